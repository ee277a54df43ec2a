from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton

from config import HOW_TO_URL, RATE_BOT_URL
from services.models import MediaKind, ResolvedContent
from ui.text import t
from utils.payload import pack_choice

BUTTON_KEYS = {
    MediaKind.AUDIO: "btn_audio",
    MediaKind.VIDEO: "btn_video",
    MediaKind.PHOTOS: "btn_photos",
}


def start_kb(lang):
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text=t(lang, "btn_how_to"), url=HOW_TO_URL),
                InlineKeyboardButton(text=t(lang, "btn_rate"), url=RATE_BOT_URL),
            ]
        ]
    )


def formats_kb(content: ResolvedContent, url: str, lang: str, links) -> InlineKeyboardMarkup | None:
    """One row per available kind; None when there is nothing to offer."""
    rows = [
        [InlineKeyboardButton(
            text=t(lang, BUTTON_KEYS[kind]),
            callback_data=pack_choice(kind, url, links)
        )]
        for kind in content.kinds
    ]
    if not rows:
        return None
    return InlineKeyboardMarkup(inline_keyboard=rows)
