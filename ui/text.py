import logging
import re

from config import DEFAULT_LOCALE

logger = logging.getLogger(__name__)

BURMESE_RE = re.compile(r"[\u1000-\u109F]")

# ── Localized text ──────────────────────────────────
TEXT = {
    "en": {
        "welcome": (
            "👋 <b>Welcome to TikTok Downloader Bot!</b>\n\n"
            "🎬 <b>Special Features:</b>\n"
            "• ✅ Videos without watermark\n"
            "• 🎵 High quality MP3 audio\n"
            "• 🖼️ Photo slideshows\n"
            "• ⚡ Fast download speed\n\n"
            "📝 <b>How to use:</b>\n"
            "Just send me a TikTok URL!\n\n"
            "🔧 <b>Commands:</b>\n"
            "/start - About bot\n"
            "/help - Get help\n"
            "/stats - Usage statistics"
        ),
        "help": (
            "📖 <b>TikTok Downloader Help Guide</b>\n\n"
            "1. 📱 <b>Copy video link</b> from TikTok app\n"
            "2. 🤖 <b>Paste the link</b> to this bot\n"
            "3. 📥 <b>Choose download format</b>\n\n"
            "🔗 <b>Supported Link Formats:</b>\n"
            "• https://vm.tiktok.com/XXXXXX/\n"
            "• https://vt.tiktok.com/XXXXXX/\n"
            "• https://tiktok.com/@user/video/123456789\n\n"
            "⚠️ <b>Notes:</b>\n"
            "• Rate limit: 60 requests per hour\n"
            "• Private videos cannot be downloaded\n"
            "• May take longer depending on server load"
        ),
        "stats": (
            "📊 <b>Usage Statistics</b>\n\n"
            "👤 <b>User ID:</b> <code>{user_id}</code>\n"
            "📥 <b>Requests Used:</b> {used}\n"
            "📤 <b>Requests Left:</b> {remaining}\n"
            "⏰ <b>Reset Time:</b> 1 hour\n\n"
            "⚡ <b>Bot Status:</b> Active\n"
            "🔧 <b>Version:</b> {version}"
        ),
        "rate_limited": (
            "❌ <b>Too many requests</b>\n\n"
            "Please try again in 1 hour\n\n"
            "📊 Limit: 60 requests per hour"
        ),
        "rate_limited_short": "❌ Too many requests\nPlease try again in 1 hour",
        "usage": (
            "🤖 <b>TikTok Downloader Bot</b>\n\n"
            "Please send a TikTok link\n\n"
            "📝 <b>How to use:</b>\n"
            "1. Copy the link from the TikTok app\n"
            "2. Paste it into this chat\n"
            "3. Choose a download format\n\n"
            "🔧 <b>Commands:</b>\n"
            "/start - About bot\n"
            "/help - Get help\n"
            "/stats - Usage statistics"
        ),
        "invalid_link": (
            "❌ <b>Invalid TikTok URL</b>\n\n"
            "Please provide a valid TikTok URL.\n\n"
            "✅ <b>Examples:</b>\n"
            "• https://vm.tiktok.com/ABC123/\n"
            "• https://tiktok.com/@user/video/123456789"
        ),
        "fetching": "⏳ <b>Fetching TikTok data...</b>\n\nPlease wait...",
        "fetch_failed": (
            "❌ <b>Failed to fetch data</b>\n\n"
            "Please:\n"
            "• Check the link\n"
            "• Try again later\n"
            "• Try another link\n\n"
            "🔧 <b>Error:</b> {error}"
        ),
        "no_media": (
            "❌ <b>No media found</b>\n\n"
            "This TikTok post has nothing that can be downloaded."
        ),
        "type_video": "Video",
        "type_photos": "Photos",
        "type_content": "Content",
        "preview": (
            "📌 <b>TikTok {content_type}</b>\n"
            "🎤 <b>Creator:</b> {author}\n"
            "❤️ <b>Likes:</b> {likes}\n"
            "▶️ <b>Views:</b> {views}\n"
            "💬 <b>Comments:</b> {comments}\n\n"
            "Choose a download format:"
        ),
        "btn_audio": "🎵 MP3 (Audio)",
        "btn_video": "🎬 MP4 (Video)",
        "btn_photos": "🖼️ Photos",
        "btn_how_to": "📖 How to Use",
        "btn_rate": "🌟 Rate Bot",
        "downloading": (
            "⏳ <b>Downloading...</b>\n\n"
            "Please wait\n"
            "This may take a while depending on the file size"
        ),
        "download_failed": (
            "❌ <b>Download failed</b>\n\n"
            "Please try again later\n\n"
            "🔧 <b>Error:</b> {error}"
        ),
        "nothing_to_send": "❌ <b>Download failed</b>\n\nThe server returned no media.",
        "download_done": "✅ <b>Download complete!</b>\n\n📦 Sending media...",
        "media_caption": "✅ <b>Downloaded!</b>\n\n🎬 Downloaded by {bot_username}",
        "send_failed": "❌ <b>Failed to send media</b>\n\nPlease try again later",
        "already_downloading": "⏳ Already downloading, please wait",
        "bad_button": "❌ This button has expired. Please send the link again.",
        "error": "❌ Error: {error}",
        "error_alert": "Error: {error}",
        "admin_ids": "User ID: {user_id}\nChat ID: {chat_id}",
        "admin_reset_usage": "Usage: /resetlimit &lt;user_id&gt;",
        "admin_reset_done": "Rate limit cleared for {user_id}.",
    },
    "my": {
        "welcome": (
            "👋 <b>TikTok Downloader Bot</b> မှ ကြိုဆိုပါတယ်!\n\n"
            "🎬 <b>စပါယ်ရှယ် ထူးခြားချက်:</b>\n"
            "• ✅ Watermark မပါသော ဗီဒီယိုများ\n"
            "• 🎵 အရည်အသွေးမြင့် MP3 အသံများ\n"
            "• 🖼️ ဓာတ်ပုံ Slideshow များ\n"
            "• ⚡ မြန်ဆန်သော Download နှုန်း\n\n"
            "📝 <b>အသုံးပြုနည်း:</b>\n"
            "TikTok link ကို ပေးပို့ရုံပါပဲ!\n\n"
            "🔧 <b>Commands:</b>\n"
            "/start - Bot အကြောင်း\n"
            "/help - အကူအညီရယူရန်\n"
            "/stats - အသုံးပြုမှုစာရင်း"
        ),
        "help": (
            "📖 <b>TikTok Downloader အသုံးပြုနည်း</b>\n\n"
            "1. 📱 <b>TikTok App</b> မှ video link ကို copy လုပ်ပါ\n"
            "2. 🤖 <b>Bot</b> ထံသို့ paste လုပ်ပါ\n"
            "3. 📥 Download format ကို ရွေးချယ်ပါ\n\n"
            "🔗 <b>Supported Link Formats:</b>\n"
            "• https://vm.tiktok.com/XXXXXX/\n"
            "• https://vt.tiktok.com/XXXXXX/\n"
            "• https://tiktok.com/@user/video/123456789\n\n"
            "⚠️ <b>မှတ်ချက်များ:</b>\n"
            "• တစ်နာရီလျှင် 60 ကြိမ်သာ အသုံးပြုနိုင်ပါသည်\n"
            "• Private videos များကို ဒေါင်းလုပ်ဆွဲ၍မရပါ\n"
            "• တစ်ခါတစ်ရံ ဆာဗာပေါ်မူတည်၍ ကြာနိုင်ပါသည်"
        ),
        "stats": (
            "📊 <b>အသုံးပြုမှုစာရင်း</b>\n\n"
            "👤 <b>User ID:</b> <code>{user_id}</code>\n"
            "📥 <b>အသုံးပြုပြီး:</b> {used} ကြိမ်\n"
            "📤 <b>ကျန်ရှိသည်:</b> {remaining} ကြိမ်\n"
            "⏰ <b>ပြန်လည်သတ်မှတ်ချိန်:</b> 1 နာရီ\n\n"
            "⚡ <b>Bot Status:</b> Active\n"
            "🔧 <b>Version:</b> {version}"
        ),
        "rate_limited": (
            "❌ <b>အသုံးပြုမှုများလွန်းပါတယ်</b>\n\n"
            "ကျေးဇူးပြု၍ 1 နာရီကြာပြီးမှ ထပ်ကြိုးစားပါ\n\n"
            "📊 တစ်နာရီလျှင် 60 ကြိမ်သာ အသုံးပြုနိုင်ပါသည်"
        ),
        "rate_limited_short": "❌ အသုံးပြုမှုများလွန်းပါတယ်\nကျေးဇူးပြု၍ 1 နာရီကြာပြီးမှ ထပ်ကြိုးစားပါ",
        "usage": (
            "🤖 <b>TikTok Downloader Bot</b>\n\n"
            "ကျေးဇူးပြု၍ TikTok link တစ်ခုပေးပါ\n\n"
            "📝 <b>အသုံးပြုနည်း:</b>\n"
            "1. TikTok app မှ link ကို copy လုပ်ပါ\n"
            "2. ဒီ chat ထဲ paste လုပ်ပါ\n"
            "3. Download format ရွေးပါ\n\n"
            "🔧 <b>Commands:</b>\n"
            "/start - Bot အကြောင်း\n"
            "/help - အကူအညီရယူရန်\n"
            "/stats - အသုံးပြုမှုစာရင်း"
        ),
        "invalid_link": (
            "❌ <b>မှားယွင်းသော TikTok Link</b>\n\n"
            "ကျေးဇူးပြု၍ မှန်ကန်သော TikTok link တစ်ခုပေးပါ။\n\n"
            "✅ <b>ဥပမာများ:</b>\n"
            "• https://vm.tiktok.com/ABC123/\n"
            "• https://tiktok.com/@user/video/123456789"
        ),
        "fetching": "⏳ <b>TikTok ဒေတာရယူနေသည်...</b>\n\nကျေးဇူးပြု၍ စောင့်ပါ...",
        "fetch_failed": (
            "❌ <b>ဒေတာရယူခြင်းမအောင်မြင်ပါ</b>\n\n"
            "ကျေးဇူးပြု၍:\n"
            "• Link ကိုပြန်စစ်ပါ\n"
            "• နောက်မှထပ်ကြိုးစားပါ\n"
            "• တစ်ခြား link တစ်ခုပို့ပါ\n\n"
            "🔧 <b>Error:</b> {error}"
        ),
        "no_media": (
            "❌ <b>မည်သည့် media မှမတွေ့ရှိပါ</b>\n\n"
            "ဒီ TikTok video မှာ download ဆွဲနိုင်တဲ့ media မရှိပါဘူး။"
        ),
        "type_video": "ဗီဒီယို",
        "type_photos": "ဓာတ်ပုံများ",
        "type_content": "အကြောင်းအရာ",
        "preview": (
            "📌 <b>TikTok {content_type}</b>\n"
            "🎤 <b>ဖန်တီးသူ:</b> {author}\n"
            "❤️ <b>Like:</b> {likes}\n"
            "▶️ <b>View:</b> {views}\n"
            "💬 <b>Comment:</b> {comments}\n\n"
            "ဒေါင်းလုပ်ဆွဲရန်ဖော်မက်ရွေးပါ:"
        ),
        "btn_audio": "🎵 MP3 (အသံ)",
        "btn_video": "🎬 MP4 (ဗီဒီယို)",
        "btn_photos": "🖼️ ဓာတ်ပုံများ",
        "downloading": (
            "⏳ <b>ဒေါင်းလုပ်ဆွဲနေသည်...</b>\n\n"
            "ကျေးဇူးပြု၍ စောင့်ပါ\n"
            "ဗီဒီယိုအရွယ်အစားပေါ်မူတည်၍ ကြာနိုင်ပါသည်"
        ),
        "download_failed": (
            "❌ <b>ဒေါင်းလုပ်ဆွဲရန် မအောင်မြင်ပါ</b>\n\n"
            "ကျေးဇူးပြု၍ နောက်မှထပ်ကြိုးစားပါ\n\n"
            "🔧 <b>Error:</b> {error}"
        ),
        "download_done": "✅ <b>ဒေါင်းလုပ်ဆွဲပြီးပါပြီ!</b>\n\n📦 Media ကို ပို့နေသည်...",
        "media_caption": "✅ <b>Download ဆွဲပြီးပါပြီ!</b>\n\n🎬 {bot_username} မှ download ဆွဲထားသည်",
        "send_failed": "❌ <b>Media ပို့ခြင်းမအောင်မြင်ပါ</b>\n\nကျေးဇူးပြု၍ နောက်မှထပ်ကြိုးစားပါ",
    },
}


def get_lang(user=None, text: str = "") -> str:
    """Pick the locale once per request."""
    first_name = getattr(user, "first_name", None) or ""
    if BURMESE_RE.search(text or "") or BURMESE_RE.search(first_name):
        return "my"

    code = (getattr(user, "language_code", None) or "").lower().split("-")[0]
    if code in TEXT:
        return code

    return DEFAULT_LOCALE if DEFAULT_LOCALE in TEXT else "en"


def t(lang: str, key: str, **kwargs) -> str:
    for locale in (lang, DEFAULT_LOCALE, "en"):
        template = TEXT.get(locale, {}).get(key)
        if template is not None:
            break
    else:
        logger.warning(f"Missing text key: {key}")
        return key

    return template.format(**kwargs) if kwargs else template
