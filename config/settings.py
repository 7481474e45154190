"""
Настройки SDK: сервер, константы платформ, логирование.

Значения сервера читаются из переменных окружения. Токены платформ
задаются в YAML (config/params.py) и переопределяются env.
"""

import logging
import os
from pathlib import Path

# ============= СЕРВЕР =============

BOT_HOST = os.getenv("BOT_HOST", "0.0.0.0")
BOT_PORT = int(os.getenv("BOT_PORT", "3000"))
BOT_CONFIG = os.getenv("BOT_CONFIG")

# ============= ПУТИ =============

BASE_DIR = Path(__file__).parent.parent
JSON_DIR = BASE_DIR / "json"

# ============= ЛОГИРОВАНИЕ =============

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_logging_configured = False


def get_logger(name: str) -> logging.Logger:
    """Возвращает логгер модуля, при первом вызове настраивает корневой обработчик"""
    global _logging_configured
    if not _logging_configured:
        logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
        _logging_configured = True
    return logging.getLogger(name)


# ============= ПЛАТФОРМЫ =============

class Platform:
    """Идентификаторы платформ"""
    ALISA = "alisa"
    MARUSIA = "marusia"
    VK = "vk"
    TELEGRAM = "telegram"
    VIBER = "viber"
    SMART_APP = "smart_app"
    USER_APP = "user_application"


# Платформы с голосовым ответом: tts по умолчанию равен text
VOICE_PLATFORMS = (Platform.ALISA, Platform.MARUSIA)

# Максимальное время ответа, мс
MAX_TIME_REQUEST = {
    Platform.ALISA: 2800,
    Platform.MARUSIA: 2800,
    Platform.SMART_APP: 2800,
}

# Ограничения на длину полей ответа
TEXT_LIMIT = 1024
TTS_LIMIT = 1024
BUBBLE_LIMIT = 250
BUTTON_TITLE_LIMIT = 64
CARD_TITLE_LIMIT = 128
CARD_DESC_LIMIT = 256

# ============= ИНТЕНТЫ =============

WELCOME_INTENT_NAME = "welcome"
HELP_INTENT_NAME = "help"

DEFAULT_INTENTS = [
    {"name": WELCOME_INTENT_NAME, "slots": ["привет", "здравст"]},
    {"name": HELP_INTENT_NAME, "slots": ["помощ", "что ты умеешь"]},
]

# ============= РЕГУЛЯРНЫЕ ВЫРАЖЕНИЯ =============

REGEX_CACHE_SIZE = 3000
