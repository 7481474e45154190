"""
Клиенты для внешних API платформ.

Содержит:
- request.py: JsonApiClient, RequestResult
- vk.py: VkClient (messages.send, users.get)
- telegram.py: TelegramClient (aiogram)
- viber.py: ViberClient (send_message, rich media)
- smart_app.py: SmartAppStorage (данные пользователя SmartApp)
"""

from .request import JsonApiClient, RequestResult
from .smart_app import SmartAppStorage
from .telegram import TelegramClient
from .viber import ViberClient
from .vk import VkClient

__all__ = [
    'JsonApiClient',
    'RequestResult',
    'SmartAppStorage',
    'TelegramClient',
    'ViberClient',
    'VkClient',
]
