"""
Определение платформы по запросу.

Порядок:
1. Заголовки, которые отправляет только одна платформа
2. Структура тела: упорядоченный список (предикат, платформа),
   первый совпавший выигрывает
3. Пользовательская платформа, если для неё зарегистрирован адаптер
4. Алиса, с предупреждением в логе

Алиса и Маруся присылают одинаковые session + version. Маруся
отличается по meta.client_id (MailRu...), при сомнениях платформу
лучше указать явно.
"""

import json
import logging
from typing import Any, Callable, Mapping, Optional

from config import Platform, get_logger

logger = get_logger(__name__)

MARUSIA_CLIENT_MARKER = "MailRu"

DETECTION_HEADERS = (
    ("x-telegram-bot-api-secret-token", Platform.TELEGRAM),
    ("x-viber-content-signature", Platform.VIBER),
    ("x-retry-counter", Platform.VK),
)


def _is_smart_app(body: dict) -> bool:
    payload = body.get("payload")
    return "uuid" in body and isinstance(payload, dict) and "app_info" in payload


def _is_viber(body: dict) -> bool:
    return "event" in body and "message_token" in body


def _is_telegram(body: dict) -> bool:
    return "update_id" in body


def _is_vk(body: dict) -> bool:
    return "type" in body and ("group_id" in body or body.get("type") == "confirmation")


def _is_voice_assistant(body: dict) -> bool:
    return "session" in body and "version" in body


def _is_marusia(body: dict) -> bool:
    if not _is_voice_assistant(body):
        return False
    client_id = (body.get("meta") or {}).get("client_id") or ""
    return MARUSIA_CLIENT_MARKER in client_id


def _is_alisa(body: dict) -> bool:
    return _is_voice_assistant(body) or "account_linking_complete_event" in body


BODY_RULES: list[tuple[Callable[[dict], bool], str]] = [
    (_is_smart_app, Platform.SMART_APP),
    (_is_viber, Platform.VIBER),
    (_is_telegram, Platform.TELEGRAM),
    (_is_vk, Platform.VK),
    (_is_marusia, Platform.MARUSIA),
    (_is_alisa, Platform.ALISA),
]


def parse_body(content: Any) -> dict:
    """Тело запроса как словарь. Некорректный JSON даёт пустой словарь."""
    if isinstance(content, dict):
        return content
    if isinstance(content, (str, bytes)) and content:
        try:
            body = json.loads(content)
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
    return {}


def detect_by_headers(headers: Optional[Mapping[str, str]]) -> Optional[str]:
    if not headers:
        return None
    names = {name.lower() for name in headers}
    for header, platform in DETECTION_HEADERS:
        if header in names:
            return platform
    return None


def detect_by_body(body: dict) -> Optional[str]:
    for predicate, platform in BODY_RULES:
        if predicate(body):
            return platform
    return None


def detect_platform(
    content: Any,
    headers: Optional[Mapping[str, str]] = None,
    has_user_adapter: bool = False,
    log: logging.Logger = None
) -> str:
    """
    Определяет платформу запроса.

    Args:
        content: Тело запроса (dict или JSON строка)
        headers: Заголовки HTTP запроса
        has_user_adapter: Зарегистрирован пользовательский адаптер

    Returns:
        Идентификатор платформы (Platform.*)
    """
    platform = detect_by_headers(headers) or detect_by_body(parse_body(content))
    if platform:
        return platform
    if has_user_adapter:
        return Platform.USER_APP
    (log or logger).warning("Не удалось определить платформу, используется Алиса")
    return Platform.ALISA
