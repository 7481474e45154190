"""
PlatformAdapter — общий контракт адаптеров платформ.

Адаптер живёт один запрос:
    init(payload, controller)  -> заполняет BotController из запроса
    get_context()              -> собирает ответ в формате платформы

Некорректный запрос не приводит к исключению: init возвращает False,
текст ошибки доступен через get_error(). Превышение времени ответа
тоже записывается в get_error(), но ответ всё равно возвращается.
"""

import json
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

from config import MAX_TIME_REQUEST


class PlatformAdapter(ABC):
    """Базовый адаптер платформы"""

    platform: Optional[str] = None

    def __init__(self, context):
        """
        Args:
            context: AppContext приложения
        """
        self.context = context
        self.controller = None
        self.error: Optional[str] = None
        self.send_in_init: Any = None
        self.is_used_local_storage = False
        self.time_start = time.monotonic()

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def params(self):
        return self.context.params

    def _parse(self, query: Any) -> Optional[dict]:
        """Разбирает тело запроса. При ошибке заполняет error и возвращает None."""
        if not query:
            self.error = f"{self.name}.init(): Отправлен пустой запрос!"
            return None
        if isinstance(query, (str, bytes)):
            try:
                query = json.loads(query)
            except ValueError as e:
                self.error = f"{self.name}.init(): Некорректный JSON: {e}"
                return None
        if not isinstance(query, dict):
            self.error = f"{self.name}.init(): Некорректные данные!"
            return None
        return dict(query)

    def get_processing_time(self) -> int:
        """Время обработки запроса в миллисекундах"""
        return int((time.monotonic() - self.time_start) * 1000)

    def _check_deadline(self) -> None:
        limit = MAX_TIME_REQUEST.get(self.platform)
        if limit is None:
            return
        elapsed = self.get_processing_time()
        if elapsed >= limit:
            self.error = (
                f"{self.name}.get_context(): Превышено ограничение на отправку ответа. "
                f"Время ответа составило: {elapsed / 1000} сек."
            )

    def _init_tts(self) -> None:
        """Подставляет звуки в tts"""
        sound = self.controller.sound
        if sound.sounds or sound.is_used_standard_sound:
            if self.controller.tts is None:
                self.controller.tts = self.controller.text
            self.controller.tts = sound.get_sounds(self.controller.tts, self.platform)

    def _fallback_command(self) -> None:
        if not self.controller.user_command:
            self.controller.user_command = self.controller.original_user_command

    def get_error(self) -> Optional[str]:
        return self.error

    @abstractmethod
    async def init(self, query: Any, controller) -> bool:
        """Заполняет контроллер из запроса. False — запрос некорректен."""

    @abstractmethod
    async def get_context(self) -> Any:
        """Ответ в формате платформы"""

    async def get_rating_context(self) -> Any:
        return await self.get_context()

    def is_local_storage(self) -> bool:
        return False

    async def get_local_storage(self) -> Any:
        return None

    async def set_local_storage(self, data: Any) -> bool:
        return True
