import json
from unittest.mock import MagicMock

import pytest

from quest_focus import feedback as feedback_mod
from quest_focus.feedback import (
    FALLBACK_FEEDBACK,
    Feedback,
    FeedbackClient,
    build_prompt,
    parse_feedback,
)


def fake_client(text=None, error=None):
    client = MagicMock()
    if error is not None:
        client.models.generate_content.side_effect = error
    else:
        client.models.generate_content.return_value = MagicMock(text=text)
    return client


class TestParseFeedback:
    def test_valid(self):
        fb = parse_feedback(json.dumps({"message": "  Nice grind!  ", "type": "tip"}))
        assert fb == Feedback(message="Nice grind!", type="tip")

    @pytest.mark.parametrize("text", [
        "not json",
        "[1, 2]",
        json.dumps({"message": "hi", "type": "boast"}),
        json.dumps({"message": "", "type": "victory"}),
        json.dumps({"type": "victory"}),
    ])
    def test_rejects_bad_payloads(self, text):
        with pytest.raises(ValueError):
            parse_feedback(text)


class TestFeedbackClient:
    def test_no_key_makes_no_call(self, logger, monkeypatch):
        monkeypatch.setattr(feedback_mod.genai, "Client", MagicMock(side_effect=AssertionError("called")))
        client = FeedbackClient(logger, api_key="")
        assert not client.enabled
        assert client.request(30, "Math", 2) is None

    def test_reads_key_from_environment(self, logger, monkeypatch):
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        monkeypatch.setenv("API_KEY", "abc")
        assert FeedbackClient(logger).enabled

    def test_success(self, logger):
        api = fake_client(json.dumps({"message": "Endurance +1!", "type": "victory"}))
        fb = FeedbackClient(logger, api_key="k", client=api).request(50, "History", 3)
        assert fb == Feedback(message="Endurance +1!", type="victory")

        kwargs = api.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert "History" in kwargs["contents"]

    def test_network_error_falls_back(self, logger):
        api = fake_client(error=ConnectionError("offline"))
        assert FeedbackClient(logger, api_key="k", client=api).request(5, "Math", 1) == FALLBACK_FEEDBACK

    def test_malformed_response_falls_back(self, logger):
        api = fake_client("Great job! (not json)")
        assert FeedbackClient(logger, api_key="k", client=api).request(5, "Math", 1) == FALLBACK_FEEDBACK

    def test_empty_response_falls_back(self, logger):
        api = fake_client("")
        assert FeedbackClient(logger, api_key="k", client=api).request(5, "Math", 1) == FALLBACK_FEEDBACK

    def test_fallback_is_victory(self):
        assert FALLBACK_FEEDBACK.type == "victory"
        assert FALLBACK_FEEDBACK.message == "Quest complete! Well done, adventurer."

    def test_async_delivers_to_callback(self, logger):
        api = fake_client(json.dumps({"message": "Go on!", "type": "encouragement"}))
        received = []
        thread = FeedbackClient(logger, api_key="k", client=api).request_async(5, "Math", 1, received.append)
        thread.join(timeout=5)
        assert received == [Feedback(message="Go on!", type="encouragement")]


def test_prompt_mentions_session_details():
    prompt = build_prompt(45, "Organic Chemistry", 7)
    assert "Organic Chemistry" in prompt
    assert "45 minutes" in prompt
    assert "Level 7" in prompt
