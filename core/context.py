"""
AppContext — окружение одного приложения.

Контекст владеет конфигурацией, параметрами платформ, таблицей команд,
логгером, хранилищем данных пользователей и клиентами платформ.
В одном процессе может жить несколько независимых контекстов
(несколько навыков или изоляция в тестах).

Использование:
    context = AppContext.from_file("config/bot.yaml")
    context.add_command("greeting", ["привет"], cb=lambda cmd, ctrl: "Привет!")
"""

import logging
from typing import Any, Callable, Optional

from clients import SmartAppStorage, TelegramClient, ViberClient, VkClient
from config import AppConfig, PlatformParams, get_logger, load_config
from core.commands import CommandCallback, CommandTable, Slot
from db import JsonFileStore, MemoryStore, PostgresStore

logger = get_logger(__name__)

PersistFailureHook = Callable[[Any, Optional[BaseException]], None]


class AppContext:
    """Конфигурация, команды, логгер и хранилище одного приложения"""

    def __init__(
        self,
        app_config: Optional[AppConfig] = None,
        params: Optional[PlatformParams] = None,
        store=None,
        log: Optional[logging.Logger] = None
    ):
        """
        Args:
            app_config: Настройки приложения
            params: Параметры платформ
            store: Хранилище пользователей. None — выбирается по app_config
            log: Логгер. None — логгер модуля
        """
        self.app_config = app_config or AppConfig()
        self.params = params or PlatformParams()
        self.logger = log or logger
        self.commands = CommandTable(self.app_config.strict_patterns, self.logger)
        self.store = store if store is not None else self._create_store()
        self.on_persist_failure: Optional[PersistFailureHook] = None
        self._clients: dict[str, Any] = {}

    @classmethod
    def from_file(cls, path: Any = None, **kwargs) -> "AppContext":
        """Создаёт контекст из YAML файла (переменные окружения важнее файла)"""
        app_config, params = load_config(path)
        return cls(app_config, params, **kwargs)

    def _create_store(self):
        if self.app_config.db_url:
            return PostgresStore(self.app_config.db_url)
        if self.app_config.store == "json":
            return JsonFileStore(self.app_config.json_dir)
        if self.app_config.store != "memory":
            self.log_warn(f"Unknown store '{self.app_config.store}', using memory")
        return MemoryStore()

    # ============= ЛОГИРОВАНИЕ =============

    def set_logger(self, log: logging.Logger) -> None:
        self.logger = log
        self.commands.logger = log

    def log_error(self, message: str) -> None:
        self.logger.error(message)

    def log_warn(self, message: str) -> None:
        self.logger.warning(message)

    # ============= КОМАНДЫ =============

    def add_command(
        self,
        name: str,
        slots: list[Slot],
        cb: Optional[CommandCallback] = None,
        is_pattern: bool = False
    ) -> None:
        self.commands.add(name, slots, cb, is_pattern)

    def remove_command(self, name: str) -> None:
        self.commands.remove(name)

    def clear_commands(self) -> None:
        self.commands.clear()

    # ============= КЛИЕНТЫ ПЛАТФОРМ =============

    def _create_client(self, name: str):
        if name == "vk":
            return VkClient(self.params.vk_token, self.params.vk_api_version)
        if name == "telegram":
            return TelegramClient(self.params.telegram_token)
        if name == "viber":
            return ViberClient(
                self.params.viber_token,
                self.params.viber_sender,
                self.params.viber_api_version
            )
        if name == "smart_app_storage":
            return SmartAppStorage()
        raise KeyError(f"Unknown client: {name}")

    def get_client(self, name: str):
        """
        Клиент платформы (создаётся при первом обращении).

        Args:
            name: vk, telegram, viber или smart_app_storage
        """
        if name not in self._clients:
            self._clients[name] = self._create_client(name)
        return self._clients[name]

    def set_client(self, name: str, client) -> None:
        """Подменяет клиент (например, фейковым в тестах)"""
        self._clients[name] = client

    # ============= ЗАВЕРШЕНИЕ =============

    def persist_failed(self, user_id, error: Optional[BaseException] = None) -> None:
        """Вызывается, когда сохранение данных пользователя не удалось"""
        if error:
            self.log_error(f"Bot.run(): failed to persist data for user {user_id}: {error}")
        else:
            self.log_error(f"Bot.run(): failed to persist data for user {user_id}")
        if self.on_persist_failure:
            self.on_persist_failure(user_id, error)

    async def close(self) -> None:
        """Закрывает хранилище и клиенты"""
        for client in self._clients.values():
            close = getattr(client, "close", None)
            if close:
                await close()
        self._clients.clear()
        await self.store.close()
