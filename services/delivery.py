import logging

from aiogram.enums import ChatAction
from aiogram.exceptions import TelegramAPIError
from aiogram.types import CallbackQuery, InputMediaPhoto, Message

from config import BOT_USERNAME
from services.content_api import ContentAPI
from services.models import DeliveredAsset, Failure, MediaKind
from ui.text import t
from utils.formatting import escape_html
from utils.state import MenuTracker

logger = logging.getLogger(__name__)

CHAT_ACTIONS = {
    MediaKind.VIDEO: ChatAction.UPLOAD_VIDEO,
    MediaKind.AUDIO: ChatAction.UPLOAD_VOICE,
    MediaKind.PHOTOS: ChatAction.UPLOAD_PHOTO,
}

MEDIA_GROUP_LIMIT = 10  # Telegram album size
ALERT_LIMIT = 200       # callback answer text


async def set_status(menu: Message, text: str, **kwargs):
    """Photo menus carry their text in the caption."""
    if menu.photo:
        await menu.edit_caption(caption=text, **kwargs)
    else:
        await menu.edit_text(text, **kwargs)


async def send_asset(bot, chat_id: int, asset: DeliveredAsset, caption: str):
    if asset.kind is MediaKind.VIDEO:
        await bot.send_video(chat_id, video=asset.url, caption=caption, supports_streaming=True)
    elif asset.kind is MediaKind.AUDIO:
        await bot.send_audio(chat_id, audio=asset.url, caption=caption)
    else:
        for start in range(0, len(asset.photos), MEDIA_GROUP_LIMIT):
            batch = asset.photos[start:start + MEDIA_GROUP_LIMIT]
            media = [
                InputMediaPhoto(media=photo, caption=caption if start == 0 and i == 0 else None)
                for i, photo in enumerate(batch)
            ]
            await bot.send_media_group(chat_id, media=media)


async def deliver(cb: CallbackQuery, kind: MediaKind, url: str, api: ContentAPI,
                  menus: MenuTracker, lang: str):
    menu = cb.message
    bot = cb.bot
    chat_id = menu.chat.id

    try:
        await set_status(menu, t(lang, "downloading"))
        await bot.send_chat_action(chat_id=chat_id, action=CHAT_ACTIONS[kind])
        logger.info(f"Starting download: {kind.value} {url}")

        result = await api.download(url, kind)

        if isinstance(result, Failure):
            logger.error(f"Download failed: {result.reason}")
            await set_status(menu, t(lang, "download_failed", error=escape_html(result.reason)))
            return

        if result.empty:
            logger.warning(f"Download returned no media: {kind.value} {url}")
            await set_status(menu, t(lang, "nothing_to_send"))
            return

        await set_status(menu, t(lang, "download_done"))

        caption = t(lang, "media_caption", bot_username=escape_html(BOT_USERNAME))
        try:
            await send_asset(bot, chat_id, result, caption)
        except TelegramAPIError as e:
            logger.error(f"Error sending media: {e}")
            await set_status(menu, t(lang, "send_failed"))
            return

        # Menu may be too old to delete
        try:
            await menu.delete()
        except TelegramAPIError as e:
            logger.info(f"Could not delete menu message {menu.message_id}: {e}")

        logger.info(f"Download complete: {kind.value} {url}")

    except Exception as e:
        logger.error(f"Download error {url}: {e}", exc_info=True)
        try:
            await set_status(menu, t(lang, "error", error=escape_html(e)))
        except TelegramAPIError as edit_error:
            logger.debug(f"Could not show error on menu: {edit_error}")
        # Press already answered; Telegram may refuse this alert
        try:
            await cb.answer(t(lang, "error_alert", error=e)[:ALERT_LIMIT], show_alert=True)
        except TelegramAPIError as answer_error:
            logger.debug(f"Could not report error to user: {answer_error}")

    finally:
        menus.finish(chat_id, menu.message_id)
