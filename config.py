import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ── ENV ─────────────────────────────────────────────
BOT_TOKEN = os.getenv("BOT_TOKEN", "")
BOT_USERNAME = os.getenv("BOT_USERNAME", "")
REDIS_URL = os.getenv("REDIS_URL", "")

# ── CONTENT API ─────────────────────────────────────
API_BASE_URL = os.getenv("API_BASE_URL", "https://zorouchiha.serv00.net/tiktok/api.php")
API_TIMEOUT = int(os.getenv("API_TIMEOUT", "45"))  # seconds

# ── ADMINS ──────────────────────────────────────────
ADMIN_IDS = {
    int(part) for part in os.getenv("ADMIN_IDS", "").split(",")
    if part.strip().isdigit()
}

# ── SERVER ──────────────────────────────────────────
PORT = int(os.getenv("PORT", "3000"))
WEBHOOK_URL = os.getenv("WEBHOOK_URL", "").rstrip("/")

# ── RATE LIMIT STORAGE ──────────────────────────────
RATE_LIMIT_FILE = Path(os.getenv("RATE_LIMIT_FILE", "rate_limits.json"))

# ── TEXT ────────────────────────────────────────────
DEFAULT_LOCALE = os.getenv("DEFAULT_LOCALE", "en")
HOW_TO_URL = os.getenv("HOW_TO_URL", "https://telegra.ph/TikTok-Vd-Without-Watermark-01-18")
RATE_BOT_URL = os.getenv("RATE_BOT_URL", "https://t.me/zinko158")
BOT_VERSION = "2.0"
