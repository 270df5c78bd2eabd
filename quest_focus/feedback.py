import os
import json
import logging
import threading
from dataclasses import dataclass

from google import genai
from google.genai import types

from .config import (
    API_KEY_ENV_VARS,
    FALLBACK_MESSAGE,
    FALLBACK_TYPE,
    FEEDBACK_MODEL,
    FEEDBACK_TEMPERATURE,
    FEEDBACK_TYPES,
)


@dataclass(frozen=True)
class Feedback:
    message: str
    type: str


FALLBACK_FEEDBACK = Feedback(message=FALLBACK_MESSAGE, type=FALLBACK_TYPE)


def read_api_key() -> str | None:
    for name in API_KEY_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


def build_prompt(duration_minutes: int, subject: str, level: int) -> str:
    return f"""
    You are a wise and encouraging RPG Quest Master.
    The user (Level {level}) just completed a study session.

    Details:
    - Subject: "{subject}"
    - Duration: {duration_minutes} minutes.

    Write a short, gamified message to reward them.
    If the session was long (>45m), praise their endurance.
    If it was short (<10m), encourage them that every step counts.
    Use RPG terminology (XP, grinding, quests, skills).

    Return ONLY JSON: {{"message": "...", "type": "victory" | "encouragement" | "tip"}}
    """


def parse_feedback(text: str) -> Feedback:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"feedback is {type(data).__name__}, expected object")
    message = data.get("message")
    kind = data.get("type")
    if not isinstance(message, str) or not message.strip():
        raise ValueError("feedback message missing")
    if kind not in FEEDBACK_TYPES:
        raise ValueError(f"unknown feedback type {kind!r}")
    return Feedback(message=message.strip(), type=kind)


class FeedbackClient:
    def __init__(self, logger: logging.Logger, api_key: str | None = None, client=None):
        self._logger = logger
        self._api_key = api_key if api_key is not None else read_api_key()
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None or bool(self._api_key)

    def _get_client(self):
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    def request(self, duration_minutes: int, subject: str, level: int) -> Feedback | None:
        if not self.enabled:
            self._logger.info("Feedback skipped: no API key configured")
            return None

        config = types.GenerateContentConfig(
            temperature=FEEDBACK_TEMPERATURE,
            response_mime_type="application/json",
        )
        try:
            response = self._get_client().models.generate_content(
                model=FEEDBACK_MODEL,
                contents=build_prompt(duration_minutes, subject, level),
                config=config,
            )
            text = response.text
            if not text:
                raise ValueError("empty response")
            feedback = parse_feedback(text)
        except Exception:
            self._logger.exception("Feedback request failed, using fallback")
            return FALLBACK_FEEDBACK

        self._logger.info(f"Feedback received type={feedback.type}")
        return feedback

    def request_async(self, duration_minutes: int, subject: str, level: int, callback) -> threading.Thread:
        def _run():
            callback(self.request(duration_minutes, subject, level))

        t = threading.Thread(target=_run, daemon=True)
        t.start()
        return t
