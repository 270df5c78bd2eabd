import logging

import pytest

from quest_focus.quest_store import default_state


@pytest.fixture
def logger():
    return logging.getLogger("QuestFocus.tests")


@pytest.fixture
def fresh_state():
    return default_state()
