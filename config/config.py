from dotenv import load_dotenv
import os

# Load environment variables from .env file
load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off")


# Only the stagehand backend needs a model key
api_key = os.getenv("GEMINI_API_KEY")
MODEL_NAME = os.getenv("MODEL_NAME", "google/gemini-2.5-flash")

# Target application
TARGET_URL = os.getenv("TARGET_URL", "https://www.swifttranslator.com/")
INPUT_PLACEHOLDER = os.getenv("INPUT_PLACEHOLDER", "Input Your Singlish Text Here.")
OUTPUT_SELECTOR = os.getenv("OUTPUT_SELECTOR", "div.bg-slate-50")

# Browser
BROWSER_BACKEND = os.getenv("BROWSER_BACKEND", "playwright")  # playwright | stagehand
HEADLESS = _bool_env("HEADLESS", True)
VIEWPORT = {"width": 1280, "height": 980}

# Page preparation (ms)
NAVIGATION_TIMEOUT_MS = _int_env("NAVIGATION_TIMEOUT_MS", 90000)
VISIBILITY_TIMEOUT_MS = _int_env("VISIBILITY_TIMEOUT_MS", 15000)
PAGE_READY_DELAY_MS = _int_env("PAGE_READY_DELAY_MS", 1000)

# Output polling (ms unless noted)
SETTLE_DELAY_MS = _int_env("SETTLE_DELAY_MS", 800)
MAX_ATTEMPTS = _int_env("MAX_ATTEMPTS", 60)
POLL_INTERVAL_MS = _int_env("POLL_INTERVAL_MS", 500)
READ_TIMEOUT_MS = _int_env("READ_TIMEOUT_MS", 2000)
STABILIZE_DELAY_MS = _int_env("STABILIZE_DELAY_MS", 500)
FALLBACK_TIMEOUT_MS = _int_env("FALLBACK_TIMEOUT_MS", 10000)

# Runner
TESTCASE_DIR = os.getenv("TESTCASE_DIR", "./testcases")
CONCURRENCY = _int_env("CONCURRENCY", 1)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
