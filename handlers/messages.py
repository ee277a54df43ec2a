import logging

from aiogram import F, Router
from aiogram.enums import ChatAction
from aiogram.exceptions import TelegramAPIError
from aiogram.types import InputMediaPhoto, Message

from services.content_api import ContentAPI
from services.models import Failure, ResolvedContent
from ui.keyboards import formats_kb
from ui.text import get_lang, t
from utils.formatting import escape_html, format_number
from utils.platforms import extract_tiktok_url, mentions_tiktok
from utils.rate_limit import RateLimiter
from utils.state import LinkRegistry, MenuTracker

logger = logging.getLogger(__name__)
messages_router = Router()


def preview_caption(content: ResolvedContent, lang: str) -> str:
    if content.has_video:
        content_type = t(lang, "type_video")
    elif content.has_photos:
        content_type = t(lang, "type_photos")
    else:
        content_type = t(lang, "type_content")

    return t(
        lang, "preview",
        content_type=content_type,
        author=escape_html(content.author),
        likes=format_number(content.likes),
        views=format_number(content.views),
        comments=format_number(content.comments),
    )


async def show_formats(status: Message, content: ResolvedContent, url: str,
                       lang: str, links: LinkRegistry, menus: MenuTracker):
    """Turn the placeholder into the format menu, or an error if there is nothing to offer."""
    keyboard = formats_kb(content, url, lang, links)
    if keyboard is None:
        await status.edit_text(t(lang, "no_media"))
        return

    caption = preview_caption(content, lang)

    if content.cover:
        try:
            await status.edit_media(
                InputMediaPhoto(media=content.cover, caption=caption),
                reply_markup=keyboard
            )
            menus.offer(status.chat.id, status.message_id)
            return
        except TelegramAPIError as e:
            logger.warning(f"Cover preview failed, sending text menu: {e}")

    await status.edit_text(caption, reply_markup=keyboard)
    menus.offer(status.chat.id, status.message_id)


@messages_router.message(F.text, ~F.text.startswith("/"))
async def handle_message(msg: Message, limiter: RateLimiter, api: ContentAPI,
                         links: LinkRegistry, menus: MenuTracker):
    user_id = msg.from_user.id
    lang = get_lang(msg.from_user, msg.text)

    # Rate limit
    if not limiter.check_and_record(user_id):
        logger.warning(f"Rate limited user {user_id}")
        await msg.answer(t(lang, "rate_limited"))
        return

    url = extract_tiktok_url(msg.text)
    if not url:
        await msg.reply(t(lang, "invalid_link" if mentions_tiktok(msg.text) else "usage"))
        return

    logger.info(f"🔍 URL detected: {url} from user {user_id}")
    status = await msg.reply(t(lang, "fetching"))

    try:
        await msg.bot.send_chat_action(chat_id=msg.chat.id, action=ChatAction.UPLOAD_PHOTO)
        result = await api.resolve(url)

        if isinstance(result, Failure):
            logger.warning(f"❌ Resolve failed for {url}: {result.reason}")
            await status.edit_text(t(lang, "fetch_failed", error=escape_html(result.reason)))
            return

        await show_formats(status, result, url, lang, links, menus)

    except Exception as e:
        logger.error(f"Error processing TikTok URL {url}: {e}", exc_info=True)
        await msg.answer(t(lang, "error", error=escape_html(e)))
