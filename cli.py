"""
Консольный режим: диалог с приложением в терминале.

Каждая введённая строка превращается в запрос в формате Алисы,
в ответ печатается текст ответа. Выход: "exit" или "выход".

Запуск:
    python cli.py examples.echo:EchoController --config bot.yaml
"""

import argparse
import asyncio
import importlib
from typing import Callable, Optional

from config import BOT_CONFIG, Platform, get_logger
from core.bot import Bot
from core.context import AppContext

logger = get_logger(__name__)

EXIT_COMMANDS = ("exit", "выход")
CONSOLE_USER_ID = "console_user"


def build_request(text: str, message_id: int, user_id: str = CONSOLE_USER_ID) -> dict:
    """Запрос Алисы для введённой строки"""
    return {
        "meta": {
            "locale": "ru-RU",
            "timezone": "UTC",
            "client_id": "console",
            "interfaces": {"screen": {}},
        },
        "session": {
            "message_id": message_id,
            "session_id": "console",
            "skill_id": "console",
            "user_id": user_id,
            "new": message_id == 0,
        },
        "request": {
            "command": text.lower(),
            "original_utterance": text,
            "nlu": {},
            "type": "SimpleUtterance",
        },
        "state": {"session": {}},
        "version": "1.0",
    }


def format_response(result) -> str:
    if isinstance(result, dict):
        response = result.get("response") or {}
        text = response.get("text", "")
        titles = [button.get("title") for button in response.get("buttons") or [] if button.get("title")]
        if titles:
            text += "\n" + " | ".join(f"[{title}]" for title in titles)
        return text
    return str(result)


async def repl(
    bot: Bot,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print
) -> int:
    """
    Диалог в консоли.

    Returns:
        Количество обработанных запросов
    """
    message_id = 0
    while True:
        try:
            text = await asyncio.to_thread(input_fn, "> ")
        except EOFError:
            break
        if text.strip().lower() in EXIT_COMMANDS:
            break

        result = await bot.run(build_request(text, message_id), platform=Platform.ALISA)
        await bot.drain()
        output_fn(format_response(result))
        message_id += 1

        if isinstance(result, dict) and (result.get("response") or {}).get("end_session"):
            break
    return message_id


def load_controller(path: str, context: Optional[AppContext] = None):
    """
    Загружает класс контроллера по пути вида module:Class.

    Если в модуле есть register_commands(context), он регистрирует команды
    приложения в контексте.
    """
    module_name, _, class_name = path.partition(":")
    if not class_name:
        raise ValueError(f"Expected module:Class, got {path}")
    module = importlib.import_module(module_name)
    register = getattr(module, "register_commands", None)
    if context is not None and register is not None:
        register(context)
    return getattr(module, class_name)


async def run_console(controller_path: str, config_path: Optional[str] = None) -> None:
    context = AppContext.from_file(config_path)
    bot = Bot(load_controller(controller_path, context), context)
    try:
        await repl(bot)
    finally:
        await bot.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Диалог с приложением в консоли")
    parser.add_argument("controller", help="Класс контроллера: module:Class")
    parser.add_argument("--config", default=BOT_CONFIG, help="Путь к YAML конфигурации")
    args = parser.parse_args(argv)
    asyncio.run(run_console(args.controller, args.config))


if __name__ == "__main__":
    main()
