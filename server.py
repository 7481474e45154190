"""
HTTP сервер для webhook платформ (aiohttp).

Один маршрут принимает POST с JSON телом и передаёт его в Bot.run.
Коды ответа:
- 200 — ответ адаптера
- 200 "ok" — неподдерживаемое событие мессенджера (VK, Telegram, Viber),
  чтобы платформа не повторяла доставку
- 400 — не POST запрос, некорректный JSON или запрос, не разобранный адаптером
- 404 — логика приложения вернула "notFound"
- 500 — ошибка обработки

Запуск:
    bot = Bot(EchoController, AppContext.from_file("bot.yaml"))
    run_server(bot, host="0.0.0.0", port=3000)
"""

import json
from typing import Optional

from aiohttp import web

from config import BOT_HOST, BOT_PORT, Platform, get_logger
from core.bot import Bot, PlatformInitError

logger = get_logger(__name__)

BOT_KEY = web.AppKey("bot", Bot)
NOT_FOUND = "notFound"

# Платформы, повторяющие доставку при ответе не 2xx
ACK_PLATFORMS = (Platform.VK, Platform.TELEGRAM, Platform.VIBER)


def _get_auth(request: web.Request) -> Optional[str]:
    authorization = request.headers.get("Authorization")
    if not authorization:
        return None
    return authorization.replace("Bearer", "", 1).strip() or None


async def handle_webhook(request: web.Request) -> web.Response:
    """Обработчик webhook"""
    if request.method != "POST":
        return web.Response(status=400, text="Bad Request")

    try:
        content = await request.json()
    except json.JSONDecodeError:
        return web.Response(status=400, text="Invalid JSON")
    if not content:
        return web.Response(status=400, text="Bad Request")

    bot = request.app[BOT_KEY]
    try:
        result = await bot.run(content, headers=request.headers, auth=_get_auth(request))
    except PlatformInitError as e:
        if e.platform in ACK_PLATFORMS:
            logger.warning(f"Skipped {e.platform} event: {e}")
            return web.Response(text="ok")
        logger.warning(f"Bad request: {e}")
        return web.Response(status=400, text="Bad Request")
    except Exception as e:
        logger.error(f"Webhook processing failed: {e}")
        return web.Response(status=500, text="Internal Server Error")

    if result == NOT_FOUND:
        return web.Response(status=404, text=NOT_FOUND)
    if isinstance(result, (dict, list)):
        return web.json_response(result)
    return web.Response(text=str(result))


async def on_shutdown(app: web.Application):
    """Дожидается фоновых записей, закрывает хранилище и клиенты"""
    await app[BOT_KEY].close()
    logger.info("Bot stopped")


def create_app(bot: Bot, path: str = "/") -> web.Application:
    app = web.Application()
    app[BOT_KEY] = bot
    app.router.add_route("*", path, handle_webhook)
    app.on_shutdown.append(on_shutdown)
    return app


def run_server(bot: Bot, host: str = BOT_HOST, port: int = BOT_PORT, path: str = "/") -> None:
    logger.info(f"🚀 Server running at http://{host}:{port}{path}")
    web.run_app(create_app(bot, path), host=host, port=port)
