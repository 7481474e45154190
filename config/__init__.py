"""
Модуль конфигурации SDK.

Содержит:
- settings.py: настройки сервера, константы платформ, логирование
- params.py: AppConfig / PlatformParams, загрузка из YAML
"""

from .settings import (
    # Сервер
    BOT_HOST,
    BOT_PORT,
    BOT_CONFIG,

    # Логирование
    get_logger,

    # Пути
    BASE_DIR,
    JSON_DIR,

    # Платформы
    Platform,
    VOICE_PLATFORMS,
    MAX_TIME_REQUEST,

    # Лимиты
    TEXT_LIMIT,
    TTS_LIMIT,
    BUBBLE_LIMIT,
    BUTTON_TITLE_LIMIT,
    CARD_TITLE_LIMIT,
    CARD_DESC_LIMIT,

    # Интенты
    WELCOME_INTENT_NAME,
    HELP_INTENT_NAME,
    DEFAULT_INTENTS,

    REGEX_CACHE_SIZE,
)

from .params import AppConfig, PlatformParams, load_config

__all__ = [
    'BOT_HOST',
    'BOT_PORT',
    'BOT_CONFIG',
    'get_logger',
    'BASE_DIR',
    'JSON_DIR',
    'Platform',
    'VOICE_PLATFORMS',
    'MAX_TIME_REQUEST',
    'TEXT_LIMIT',
    'TTS_LIMIT',
    'BUBBLE_LIMIT',
    'BUTTON_TITLE_LIMIT',
    'CARD_TITLE_LIMIT',
    'CARD_DESC_LIMIT',
    'WELCOME_INTENT_NAME',
    'HELP_INTENT_NAME',
    'DEFAULT_INTENTS',
    'REGEX_CACHE_SIZE',
    'AppConfig',
    'PlatformParams',
    'load_config',
]
