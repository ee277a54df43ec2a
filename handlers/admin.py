from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from config import ADMIN_IDS
from ui.text import get_lang, t
from utils.rate_limit import RateLimiter

admin_router = Router()


def is_admin(message: Message) -> bool:
    return message.from_user is not None and message.from_user.id in ADMIN_IDS


# ── /chatid ─────────────────────────────
@admin_router.message(Command("chatid"))
async def chatid_handler(message: Message):
    # Admin-only
    if not is_admin(message):
        return

    lang = get_lang(message.from_user)
    await message.reply(
        t(lang, "admin_ids", user_id=message.from_user.id, chat_id=message.chat.id)
    )


# ── /resetlimit <user_id> ──────────────
@admin_router.message(Command("resetlimit"))
async def resetlimit_handler(message: Message, command: CommandObject, limiter: RateLimiter):
    if not is_admin(message):
        return

    lang = get_lang(message.from_user)
    arg = (command.args or "").strip()

    if not arg.isdigit():
        await message.reply(t(lang, "admin_reset_usage"))
        return

    limiter.reset(int(arg))
    await message.reply(t(lang, "admin_reset_done", user_id=arg))
