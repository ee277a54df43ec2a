import asyncio
import logging

import redis
from aiohttp import web
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application

import config
from handlers.admin import admin_router
from handlers.callbacks import callbacks_router
from handlers.messages import messages_router
from handlers.start import start_router
from services.content_api import ContentAPI
from utils.rate_limit import RateLimiter
from utils.state import JsonFileStore, LinkRegistry, MenuTracker, RedisStore

# ---------------- CONFIG ----------------
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)

MODE_KEY = web.AppKey("mode", str)


def build_dispatcher(redis_url: str = "") -> Dispatcher:
    """Dispatcher with routers and the shared services handlers ask for by name."""
    client = redis.Redis.from_url(redis_url, decode_responses=True) if redis_url else None
    store = RedisStore(client) if client else JsonFileStore(config.RATE_LIMIT_FILE)

    dp = Dispatcher(
        limiter=RateLimiter(store),
        api=ContentAPI(config.API_BASE_URL, timeout=config.API_TIMEOUT),
        links=LinkRegistry(client),
        menus=MenuTracker(),
    )
    dp.include_routers(admin_router, start_router, callbacks_router, messages_router)
    dp.shutdown.register(on_shutdown)
    return dp


async def on_shutdown(api: ContentAPI):
    logger.info("Shutting down...")
    await api.close()
    logger.info("Shutdown complete")


async def health(request: web.Request) -> web.Response:
    return web.json_response({"status": "online", "mode": request.app[MODE_KEY]})


def build_web_app(mode: str) -> web.Application:
    app = web.Application()
    app[MODE_KEY] = mode
    app.router.add_get("/", health)
    return app


def webhook_path(token: str) -> str:
    return f"/bot{token}"


def run_webhook(bot: Bot, dp: Dispatcher):
    app = build_web_app("webhook")
    path = webhook_path(config.BOT_TOKEN)

    async def on_startup(bot: Bot):
        await bot.set_webhook(f"{config.WEBHOOK_URL}{path}")
        logger.info("✅ Webhook set successfully")

    dp.startup.register(on_startup)
    SimpleRequestHandler(dispatcher=dp, bot=bot).register(app, path=path)
    setup_application(app, dp, bot=bot)

    logger.info(f"🤖 Server is listening on port {config.PORT}")
    web.run_app(app, port=config.PORT, print=None)


async def run_polling(bot: Bot, dp: Dispatcher):
    runner = web.AppRunner(build_web_app("polling"))
    await runner.setup()
    await web.TCPSite(runner, port=config.PORT).start()
    logger.info(f"🤖 Server is listening on port {config.PORT}")

    try:
        await bot.delete_webhook(drop_pending_updates=False)
        logger.info("🚀 Starting bot in polling mode...")
        await dp.start_polling(bot)
    finally:
        await runner.cleanup()


def main():
    if not config.BOT_TOKEN:
        raise RuntimeError("BOT_TOKEN is missing")

    bot = Bot(config.BOT_TOKEN, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    dp = build_dispatcher(config.REDIS_URL)
    logger.info("✅ TikTok Downloader Bot is starting...")

    if config.WEBHOOK_URL:
        run_webhook(bot, dp)
    else:
        asyncio.run(run_polling(bot, dp))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
