"""
Запуск webhook сервера приложения.

Класс контроллера задаётся переменной BOT_CONTROLLER (module:Class),
конфигурация — BOT_CONFIG (YAML), адрес — BOT_HOST / BOT_PORT.
Тип платформы определяется по каждому запросу, либо задаётся BOT_PLATFORM.
"""

import os

from cli import load_controller
from config import BOT_CONFIG, BOT_HOST, BOT_PORT, get_logger
from core.bot import Bot
from core.context import AppContext
from server import run_server

logger = get_logger(__name__)

BOT_CONTROLLER = os.getenv("BOT_CONTROLLER", "examples.echo:EchoController")
BOT_PLATFORM = os.getenv("BOT_PLATFORM")


def main():
    context = AppContext.from_file(BOT_CONFIG)
    controller_class = load_controller(BOT_CONTROLLER, context)
    logger.info(f"Controller: {BOT_CONTROLLER}, platform: {BOT_PLATFORM or 'auto'}")
    bot = Bot(controller_class, context, platform=BOT_PLATFORM)
    run_server(bot, BOT_HOST, BOT_PORT)


if __name__ == "__main__":
    main()
