"""
Клиент Telegram Bot API на aiogram.

Bot создаётся при первой отправке: aiogram проверяет формат токена
в конструкторе.
"""

from typing import Any, Optional

from aiogram import Bot
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramAPIError

from config import get_logger
from .request import RequestResult

logger = get_logger(__name__)


class TelegramClient:
    """Отправка сообщений и медиа-групп"""

    def __init__(self, token: Optional[str]):
        self.token = token
        self._bot: Optional[Bot] = None

    def _get_bot(self) -> Bot:
        if self._bot is None:
            self._bot = Bot(
                token=self.token,
                default=DefaultBotProperties(parse_mode=ParseMode.MARKDOWN)
            )
        return self._bot

    async def send_message(self, chat_id, text: str, reply_markup: Any = None) -> RequestResult:
        if not self.token:
            logger.error("Telegram token is not set")
            return RequestResult(False, err="Telegram token is not set")
        try:
            message = await self._get_bot().send_message(chat_id, text, reply_markup=reply_markup)
            return RequestResult(True, message)
        except TelegramAPIError as e:
            logger.error(f"Telegram sendMessage error: {e}")
            return RequestResult(False, err=str(e))
        except Exception as e:
            logger.error(f"Telegram sendMessage exception: {e}")
            return RequestResult(False, err=str(e))

    async def send_media_group(self, chat_id, media: list) -> RequestResult:
        if not self.token:
            logger.error("Telegram token is not set")
            return RequestResult(False, err="Telegram token is not set")
        try:
            messages = await self._get_bot().send_media_group(chat_id, media=media)
            return RequestResult(True, messages)
        except TelegramAPIError as e:
            logger.error(f"Telegram sendMediaGroup error: {e}")
            return RequestResult(False, err=str(e))
        except Exception as e:
            logger.error(f"Telegram sendMediaGroup exception: {e}")
            return RequestResult(False, err=str(e))

    async def close(self) -> None:
        if self._bot is not None:
            await self._bot.session.close()
            self._bot = None
