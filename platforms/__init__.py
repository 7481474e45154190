"""
Адаптеры платформ.

Содержит:
- base.py: PlatformAdapter — общий контракт
- alisa.py: Алиса (Яндекс Диалоги)
- marusia.py: Маруся
- vk.py: сообщения сообщества VK
- telegram.py: Telegram Bot API
- viber.py: Viber REST API
- smart_app.py: SmartApp (Сбер)

PLATFORMS — таблица "платформа -> класс адаптера". Пользовательская
платформа (Platform.USER_APP) в таблицу не входит: её адаптер передаётся
в Bot явно.
"""

from config import Platform

from .alisa import AlisaAdapter
from .base import PlatformAdapter
from .marusia import MarusiaAdapter
from .smart_app import SmartAppAdapter
from .telegram import TelegramAdapter
from .viber import ViberAdapter
from .vk import VkAdapter

PLATFORMS: dict[str, type[PlatformAdapter]] = {
    Platform.ALISA: AlisaAdapter,
    Platform.MARUSIA: MarusiaAdapter,
    Platform.VK: VkAdapter,
    Platform.TELEGRAM: TelegramAdapter,
    Platform.VIBER: ViberAdapter,
    Platform.SMART_APP: SmartAppAdapter,
}

__all__ = [
    'PLATFORMS',
    'PlatformAdapter',
    'AlisaAdapter',
    'MarusiaAdapter',
    'VkAdapter',
    'TelegramAdapter',
    'ViberAdapter',
    'SmartAppAdapter',
]
