"""
Bot — диспетчер запросов.

Один вызов run() обрабатывает один запрос:
    платформа -> init адаптера -> данные пользователя -> middleware и логика
    -> ответ платформы -> сохранение данных (в фоне) -> очистка

Сохранение данных не ожидается: задача ставится через asyncio.create_task,
ошибки логируются и передаются в AppContext.on_persist_failure.
Дождаться всех записей можно через drain().

Использование:
    bot = Bot(EchoController, AppContext.from_file("bot.yaml"))
    bot.add_command("greeting", ["привет"], cb=lambda cmd, ctrl: "Привет!")

    result = await bot.run(request_body, headers=request.headers)
"""

import asyncio
from typing import Any, Mapping, Optional

from config import Platform
from core.context import AppContext
from core.controller import BotController
from core.detection import detect_platform
from core.middleware import Middleware, MiddlewareChain
from core.text import clear_cache
from db import UsersData
from platforms import PLATFORMS, PlatformAdapter

OLD_INTENT_KEY = "oldIntentName"


class BotError(Exception):
    """Запрос не может быть обработан."""
    pass


class PlatformInitError(BotError):
    """Адаптер платформы не смог разобрать запрос."""

    def __init__(self, message: str, platform: Optional[str] = None):
        super().__init__(message)
        self.platform = platform


class ControllerNotSetError(BotError):
    """Не задан класс контроллера с логикой приложения."""
    pass


class Bot:
    """Точка входа приложения: связывает контекст, контроллер и адаптеры"""

    def __init__(
        self,
        controller_class: Optional[type[BotController]] = None,
        context: Optional[AppContext] = None,
        platform: Optional[str] = None,
        adapter_class: Optional[type[PlatformAdapter]] = None
    ):
        """
        Args:
            controller_class: Класс с логикой приложения
            context: AppContext. None — контекст по умолчанию
            platform: Платформа. None — определяется по запросу
            adapter_class: Адаптер пользовательской платформы
        """
        self.controller_class = controller_class
        self.context = context or AppContext()
        self.platform = platform
        self.adapter_class = adapter_class
        self.middlewares = MiddlewareChain(self.context.logger)
        self._pending: set[asyncio.Task] = set()

    # ============= НАСТРОЙКА =============

    def set_controller(self, controller_class: type[BotController]) -> None:
        self.controller_class = controller_class

    def use(self, platform_or_middleware, middleware: Optional[Middleware] = None) -> None:
        """
        Регистрирует middleware.

        bot.use(mw) — для всех платформ, bot.use(Platform.ALISA, mw) — для одной.
        """
        if middleware is None:
            self.middlewares.use(platform_or_middleware)
        else:
            self.middlewares.use(middleware, platform_or_middleware)

    def add_command(self, name, slots, cb=None, is_pattern: bool = False) -> None:
        self.context.add_command(name, slots, cb, is_pattern)

    def remove_command(self, name: str) -> None:
        self.context.remove_command(name)

    def clear_commands(self) -> None:
        self.context.clear_commands()

    # ============= ОБРАБОТКА ЗАПРОСА =============

    def _create_adapter(self, platform: str, adapter_class=None) -> PlatformAdapter:
        if platform == Platform.USER_APP:
            adapter_class = adapter_class or self.adapter_class
            if adapter_class is None:
                raise BotError("Не удалось определить тип приложения!")
            return adapter_class(self.context)
        if platform not in PLATFORMS:
            raise BotError(f"Неизвестная платформа: {platform}")
        return PLATFORMS[platform](self.context)

    async def _load_user_data(self, controller, users_data: UsersData, auth) -> bool:
        """Загружает данные из хранилища. Возвращает True для нового пользователя."""
        key = controller.user_token if auth and controller.user_token else controller.user_id
        key = users_data.escape_string(key)
        if await users_data.where_one({"user_id": key}):
            controller.user_data = users_data.data
            return False
        controller.user_data = None
        users_data.user_id = key
        users_data.meta = controller.user_meta
        return True

    async def run(
        self,
        content: Any,
        platform: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        auth: Optional[str] = None,
        adapter_class: Optional[type[PlatformAdapter]] = None
    ) -> Any:
        """
        Обрабатывает запрос.

        Args:
            content: Тело запроса (dict или JSON строка)
            platform: Платформа запроса. None — из настроек Bot или по запросу
            headers: Заголовки HTTP запроса (для определения платформы)
            auth: Токен из заголовка Authorization
            adapter_class: Адаптер пользовательской платформы

        Returns:
            Ответ в формате платформы (dict или строка)

        Raises:
            ControllerNotSetError: Не задан контроллер
            PlatformInitError: Запрос не разобран адаптером
            BotError: Не удалось определить платформу
        """
        if self.controller_class is None:
            message = "Не определён класс с логикой приложения. Передайте его в Bot или set_controller"
            self.context.log_error(message)
            raise ControllerNotSetError(message)

        platform = platform or self.platform or detect_platform(
            content,
            headers,
            has_user_adapter=bool(adapter_class or self.adapter_class),
            log=self.context.logger
        )
        adapter = self._create_adapter(platform, adapter_class)
        controller = self.controller_class(self.context)
        controller.app_type = platform
        if auth:
            controller.user_token = auth

        try:
            if not await adapter.init(content, controller):
                error = adapter.get_error() or f"{adapter.name}.init(): запрос не обработан"
                self.context.log_error(error)
                raise PlatformInitError(error, platform)
            if adapter.send_in_init is not None:
                return adapter.send_in_init

            users_data = UsersData(self.context.store, platform)
            is_local_storage = adapter.is_local_storage()
            is_new = False
            if is_local_storage:
                adapter.is_used_local_storage = True
                controller.user_data = await adapter.get_local_storage()
            else:
                is_new = await self._load_user_data(controller, users_data, auth)

            if controller.user_data is None:
                controller.user_data = {}
            user_data = controller.user_data if isinstance(controller.user_data, dict) else None

            if not controller.old_intent_name and user_data and user_data.get(OLD_INTENT_KEY):
                controller.old_intent_name = user_data[OLD_INTENT_KEY]

            await self.middlewares.run(controller, platform, controller.run)

            if user_data is not None:
                if controller.this_intent_name is not None:
                    user_data[OLD_INTENT_KEY] = controller.this_intent_name
                else:
                    user_data.pop(OLD_INTENT_KEY, None)

            if controller.is_send_rating:
                result = await adapter.get_rating_context()
            else:
                result = await adapter.get_context()

            if controller.user_id is None and not is_local_storage:
                self.context.log_warn(f"{adapter.name}: запрос без идентификатора пользователя, данные не сохранены")
            elif is_local_storage:
                self._persist(controller.user_id, adapter.set_local_storage(controller.user_data))
            else:
                users_data.data = controller.user_data
                self._persist(controller.user_id, users_data.save(True) if is_new else users_data.update())

            if adapter.get_error():
                self.context.log_warn(adapter.get_error())
            return result
        finally:
            controller.clear()

    # ============= СОХРАНЕНИЕ =============

    def _persist(self, user_id, coro) -> None:
        """Запускает запись в фоне"""
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(lambda done: self._persist_done(user_id, done))

    def _persist_done(self, user_id, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            self.context.persist_failed(user_id, asyncio.CancelledError())
            return
        error = task.exception()
        if error is not None or not task.result():
            self.context.persist_failed(user_id, error)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Ожидает завершения всех фоновых записей"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        """Завершение работы: дожидается записей, закрывает хранилище, очищает команды и кэш"""
        await self.drain()
        await self.context.close()
        self.context.clear_commands()
        clear_cache()
