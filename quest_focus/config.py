import os

APP_TITLE = "QuestFocus"
APPDATA_DIR = os.path.join(os.getenv("APPDATA") or os.path.expanduser("~"), "QuestFocus")

STORE_FILE = os.path.join(APPDATA_DIR, "quest_store.json")
STORE_SCHEMA = 1

LOG_DIR = os.path.join(APPDATA_DIR, "logs")
LOG_FILE = os.path.join(LOG_DIR, "quest_focus.log")

TICK_INTERVAL_MS = 250
MIN_SESSION_SEC = 60

# Progression
XP_PER_MINUTE = 10
BASE_LEVEL_XP = 500
LEVEL_MULTIPLIER = 1.2
MAX_LEVEL_UPS_PER_SESSION = 5000

# Feedback
API_KEY_ENV_VARS = ("GOOGLE_API_KEY", "API_KEY")
FEEDBACK_MODEL = "gemini-2.5-flash"
FEEDBACK_TEMPERATURE = 0.7
FEEDBACK_TYPES = ("encouragement", "victory", "tip")
FALLBACK_MESSAGE = "Quest complete! Well done, adventurer."
FALLBACK_TYPE = "victory"

# Sounds
SAMPLE_RATE = 44100
CHIME_VOLUME = 0.5
