import logging

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from config import BOT_VERSION
from ui.keyboards import start_kb
from ui.text import get_lang, t
from utils.rate_limit import RateLimiter

logger = logging.getLogger(__name__)
start_router = Router()


@start_router.message(CommandStart())
async def start_handler(message: Message, limiter: RateLimiter):
    lang = get_lang(message.from_user, message.text)

    if not limiter.check_and_record(message.from_user.id):
        logger.warning(f"Rate limited user {message.from_user.id} on /start")
        await message.answer(t(lang, "rate_limited"))
        return

    await message.answer(
        t(lang, "welcome"),
        reply_markup=start_kb(lang),
        disable_web_page_preview=True
    )


# /help and /stats are not rate-limited
@start_router.message(Command("help"))
async def help_handler(message: Message):
    lang = get_lang(message.from_user, message.text)
    await message.answer(t(lang, "help"), disable_web_page_preview=True)


@start_router.message(Command("stats"))
async def stats_handler(message: Message, limiter: RateLimiter):
    lang = get_lang(message.from_user, message.text)
    user_id = message.from_user.id
    info = limiter.usage_info(user_id)

    await message.answer(
        t(lang, "stats",
          user_id=user_id,
          used=info["used"],
          remaining=info["remaining"],
          version=BOT_VERSION)
    )
