import re

# Order matters: first matching shape wins
TIKTOK_PATTERNS = [
    re.compile(r"https?://(?:vm|vt)\.tiktok\.com/[A-Za-z0-9]+/?"),
    re.compile(r"https?://(?:www\.)?tiktok\.com/@[A-Za-z0-9._]+/video/[0-9]+/?"),
    re.compile(r"https?://(?:www\.)?tiktok\.com/t/[A-Za-z0-9]+/?"),
]

TIKTOK_HOST_RE = re.compile(r"tiktok\.com", re.IGNORECASE)


def extract_tiktok_url(text: str) -> str | None:
    """Return the first known TikTok link in text, as written."""
    if not text:
        return None

    for pattern in TIKTOK_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)

    return None


def mentions_tiktok(text: str) -> bool:
    return bool(text and TIKTOK_HOST_RE.search(text))
