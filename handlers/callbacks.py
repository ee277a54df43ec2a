import logging

from aiogram import F, Router
from aiogram.exceptions import TelegramAPIError
from aiogram.types import CallbackQuery, Message

from services.content_api import ContentAPI
from services.delivery import deliver
from ui.text import get_lang, t
from utils.payload import CALLBACK_PREFIXES, MalformedPayload, unpack_choice
from utils.rate_limit import RateLimiter
from utils.state import LinkRegistry, MenuTracker

logger = logging.getLogger(__name__)
callbacks_router = Router()


@callbacks_router.callback_query(F.data.startswith(CALLBACK_PREFIXES))
async def download_cb(cb: CallbackQuery, limiter: RateLimiter, api: ContentAPI,
                      links: LinkRegistry, menus: MenuTracker):
    user_id = cb.from_user.id
    lang = get_lang(cb.from_user)

    if not limiter.check_and_record(user_id):
        logger.warning(f"Rate limited user {user_id} on button press")
        await cb.answer(t(lang, "rate_limited_short"), show_alert=True)
        return

    # Menus older than 48h arrive as InaccessibleMessage
    menu = cb.message
    if not isinstance(menu, Message):
        await cb.answer(t(lang, "bad_button"), show_alert=True)
        return

    try:
        kind, url = unpack_choice(cb.data, links)
    except MalformedPayload as e:
        logger.warning(f"Malformed callback from {user_id}: {e}")
        await cb.answer(t(lang, "bad_button"), show_alert=True)
        return

    if not menus.begin(menu.chat.id, menu.message_id):
        await cb.answer(t(lang, "already_downloading"))
        return

    try:
        await cb.answer()
    except TelegramAPIError as e:
        logger.info(f"Could not acknowledge button press: {e}")

    await deliver(cb, kind, url, api, menus, lang)
