"""
Конфигурация приложения и параметры платформ.

Загружается из YAML файла. Переменные окружения имеют приоритет над
значениями в файле (токены платформ и строка подключения к БД).

Пример bot.yaml:

    app:
      is_local_storage: true
      store: json
      json_dir: ./json
    params:
      welcome_text: ["Привет!", "Здравствуйте!"]
      help_text: "Я умею повторять за вами"
      intents:
        - name: bye
          slots: ["пока", "до свидания"]

Использование:
    from config.params import load_config

    app_config, params = load_config("bot.yaml")
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .settings import DEFAULT_INTENTS, JSON_DIR, get_logger

logger = get_logger(__name__)

# Поле параметров -> переменная окружения
ENV_OVERRIDES = {
    "telegram_token": "TELEGRAM_TOKEN",
    "vk_token": "VK_TOKEN",
    "vk_confirmation_token": "VK_CONFIRMATION_TOKEN",
    "viber_token": "VIBER_TOKEN",
    "viber_sender": "VIBER_SENDER",
}


@dataclass
class AppConfig:
    """
    Настройки приложения.

    is_local_storage — хранить данные пользователя в самой платформе
    (state Алисы и Маруси), если она это поддерживает.
    store — хранилище остальных данных: memory или json. При заданном
    db_url используется PostgreSQL.
    """
    is_local_storage: bool = False
    store: str = "memory"
    json_dir: str = str(JSON_DIR)
    db_url: Optional[str] = None
    strict_patterns: bool = False


@dataclass
class PlatformParams:
    """Параметры платформ и тексты стандартных интентов"""
    telegram_token: Optional[str] = None
    vk_token: Optional[str] = None
    vk_confirmation_token: Optional[str] = None
    vk_api_version: str = "5.131"
    viber_token: Optional[str] = None
    viber_sender: Optional[str] = None
    viber_api_version: int = 2
    y_is_auth_user: bool = False
    welcome_text: Union[str, list] = "Текст приветствия"
    help_text: Union[str, list] = "Текст помощи"
    empty_text: Union[str, list] = "Извините, я вас не понимаю"
    intents: list = field(default_factory=lambda: [dict(i) for i in DEFAULT_INTENTS])
    utm_text: Optional[str] = None

    def update(self, values: dict) -> None:
        """Обновляет известные поля, неизвестные ключи логируются и пропускаются"""
        names = {f.name for f in fields(self)}
        for key, value in values.items():
            if key in names:
                setattr(self, key, value)
            else:
                logger.warning(f"Unknown platform param: {key}")


def _read_yaml(path: Path) -> dict:
    """Читает YAML файл. Отсутствующий файл даёт пустую конфигурацию."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(f"Config file not found: {path}. Using defaults.")
        return {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}")


def apply_env(params: PlatformParams, app_config: AppConfig) -> None:
    """Переносит значения из переменных окружения поверх файловых"""
    for name, env_name in ENV_OVERRIDES.items():
        env_value = os.getenv(env_name)
        if env_value:
            setattr(params, name, env_value)

    db_url = os.getenv("DATABASE_URL")
    if db_url:
        app_config.db_url = db_url

    local_storage = os.getenv("IS_LOCAL_STORAGE")
    if local_storage is not None:
        app_config.is_local_storage = local_storage.lower() in ("true", "1", "yes", "on")


def load_config(path: Any = None) -> tuple[AppConfig, PlatformParams]:
    """
    Загружает конфигурацию приложения.

    Args:
        path: Путь к YAML файлу. None — только значения по умолчанию и env.

    Returns:
        (AppConfig, PlatformParams)

    Raises:
        ValueError: Если YAML некорректен
    """
    raw = _read_yaml(Path(path)) if path else {}

    app_config = AppConfig()
    for key, value in (raw.get("app") or {}).items():
        if hasattr(app_config, key):
            setattr(app_config, key, value)
        else:
            logger.warning(f"Unknown app config key: {key}")

    params = PlatformParams()
    params.update(raw.get("params") or {})

    apply_env(params, app_config)
    return app_config, params
