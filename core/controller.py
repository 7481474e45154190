"""
BotController — состояние одного запроса.

Адаптер платформы заполняет входные поля (user_id, user_command, ...),
логика приложения (action) заполняет ответ (text, tts, buttons, card, ...),
после чего адаптер собирает ответ в формате платформы.

Экземпляр создаётся диспетчером на каждый запрос и не переиспользуется.

Использование:
    class EchoController(BotController):
        def action(self, intent_name, is_command=False):
            if intent_name is None:
                self.text = self.original_user_command
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Optional

from components import Buttons, Card, Nlu, Sound
from config import HELP_INTENT_NAME, VOICE_PLATFORMS, WELCOME_INTENT_NAME
from core.text import get_text, is_say_text


class BotController(ABC):
    """Каноническое состояние запроса и ответа"""

    def __init__(self, app_context=None):
        """
        Args:
            app_context: AppContext приложения (команды, параметры)
        """
        self.app_context = app_context
        utm_text = app_context.params.utm_text if app_context else None

        # Ответ
        self.buttons = Buttons(utm_text)
        self.card = Card(utm_text)
        self.sound = Sound()
        self.text: str = ''
        self.tts: Optional[str] = None
        self.emotion: Optional[str] = None
        self.is_end = False
        self.is_send = True
        self.is_send_rating = False

        # Запрос
        self.nlu = Nlu()
        self.user_id: Any = None
        self.user_token: Optional[str] = None
        self.user_meta: Any = None
        self.message_id: Any = None
        self.user_command: Optional[str] = None
        self.original_user_command: Optional[str] = None
        self.payload: Any = None
        self.request_object: Any = None
        self.user_events: Optional[dict] = None
        self.appeal: Optional[str] = None
        self.app_type: Optional[str] = None

        # Состояние
        self.user_data: Any = None
        self.state: Any = None
        self.is_auth = False
        self.is_screen = True
        self.old_intent_name: Optional[str] = None
        self.this_intent_name: Optional[str] = None

    @property
    def params(self):
        return self.app_context.params if self.app_context else None

    def _intents(self) -> list[dict]:
        if not self.params:
            return []
        return self.params.intents or []

    def _get_intent(self, text: Optional[str]) -> Optional[str]:
        """Первый интент из параметров, совпавший с текстом"""
        if not text:
            return None
        for intent in self._intents():
            if is_say_text(intent.get('slots') or [], text, intent.get('is_pattern', False)):
                return intent.get('name')
        return None

    def _param_text(self, name: str) -> str:
        if not self.params:
            return ''
        return get_text(getattr(self.params, name) or '')

    async def _run_command(self) -> Optional[str]:
        """Ищет команду в таблице контекста и выполняет её обработчик"""
        if not self.app_context:
            return None
        table = self.app_context.commands
        name = table.resolve(self.user_command or '')
        if name is None:
            return None
        command = table.get(name)
        if command and command.cb:
            result = command.cb(self.user_command, self)
            if inspect.isawaitable(result):
                result = await result
            if isinstance(result, str):
                self.text = result
        return name

    @abstractmethod
    def action(self, intent_name: Optional[str], is_command: bool = False) -> None:
        """
        Логика приложения.

        Args:
            intent_name: Имя совпавшей команды или интента (None — не найдено)
            is_command: True если совпала команда из таблицы команд
        """

    async def _action(self, intent_name: Optional[str], is_command: bool = False) -> None:
        result = self.action(intent_name, is_command)
        if inspect.isawaitable(result):
            await result

    async def run(self) -> None:
        """
        Находит команду или интент и вызывает action ровно один раз.

        Обработчик команды и action могут быть как обычными функциями,
        так и корутинами.
        """
        name = await self._run_command()
        if name is not None:
            self.this_intent_name = name
            await self._action(name, True)
        else:
            intent = self._get_intent(self.user_command)
            if intent is None and self.message_id in (0, '0'):
                intent = WELCOME_INTENT_NAME
            if intent == WELCOME_INTENT_NAME:
                self.text = self._param_text('welcome_text')
            elif intent == HELP_INTENT_NAME:
                self.text = self._param_text('help_text')
            self.this_intent_name = intent
            await self._action(intent)

        if self.tts is None and self.app_type in VOICE_PLATFORMS:
            self.tts = self.text

    def clear(self) -> None:
        """Очищает накопители ответа"""
        self.buttons.clear()
        self.card.clear()
        self.sound.clear()
        self.nlu.clear()


class BaseBotController(BotController):
    """Контроллер со стандартными ответами на приветствие, помощь и непонятое"""

    def action(self, intent_name: Optional[str], is_command: bool = False) -> None:
        if is_command:
            return
        if intent_name == WELCOME_INTENT_NAME:
            self.text = self._param_text('welcome_text')
        elif intent_name == HELP_INTENT_NAME:
            self.text = self._param_text('help_text')
        else:
            self.text = self._param_text('empty_text')
