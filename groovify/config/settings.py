import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default="0"):
    return str(os.getenv(name, default) or default).strip().lower() in {
        "1",
        "true",
        "yes",
        "y",
        "on",
    }


BASE_DIR = Path(__file__).resolve().parent.parent.parent
DATA_DIR = BASE_DIR / "data"

DB_PATH = Path(os.getenv("GROOVIFY_DB_PATH", str(DATA_DIR / "groovify.sqlite3")))
DB_TIMEOUT_SEC = max(1.0, float(os.getenv("GROOVIFY_DB_TIMEOUT_SEC", "10.0") or 10.0))

MUSIC_DIR = Path(os.getenv("GROOVIFY_MUSIC_DIR", str(DATA_DIR / "songs")))
IMPORT_ON_STARTUP = _env_flag("GROOVIFY_IMPORT_ON_STARTUP", "1")

SEED_GENRES = [
    "Rock",
    "Pop",
    "Hip-Hop",
    "Jazz",
    "Classical",
    "Electronic",
    "Country",
    "Reggae",
    "Blues",
    "Metal",
]

DEFAULT_IMAGE_FILE_NAME = "Fishing.jpg"

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 32
USERNAME_PATTERN = r"[A-Za-z0-9._-]+"
# Character-set rule is off unless explicitly requested.
ENFORCE_USERNAME_CHARSET = _env_flag("GROOVIFY_ENFORCE_USERNAME_CHARSET", "0")

SALT_LENGTH = 16

MAX_RECOMMENDATIONS = 5
RECOMMENDATION_SIZE = min(
    MAX_RECOMMENDATIONS,
    max(1, int(os.getenv("GROOVIFY_RECOMMENDATION_SIZE", "5") or 5)),
)

FLASK_SECRET_KEY = str(
    os.getenv("FLASK_SECRET_KEY", "groovify-dev-secret-change-me") or ""
).strip()
SESSION_COOKIE_SECURE = _env_flag("SESSION_COOKIE_SECURE", "0")
SESSION_LIFETIME_DAYS = 45

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", 5000))

LOG_LEVEL = str(os.getenv("LOG_LEVEL", "INFO") or "INFO").strip().upper()
