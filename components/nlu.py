"""
Обработка NLU, присланного платформой.

Для голосовых ассистентов это блок request.nlu (токены, сущности,
интенты). Для мессенджеров хранится только this_user — имя пользователя
из профиля.
"""

from typing import Any, Optional

T_FIO = "YANDEX.FIO"
T_GEO = "YANDEX.GEO"
T_DATETIME = "YANDEX.DATETIME"
T_NUMBER = "YANDEX.NUMBER"


class Nlu:
    """Обёртка над NLU запроса"""

    def __init__(self):
        self.nlu: dict = {}

    def set_nlu(self, nlu: Optional[dict]) -> None:
        self.nlu = dict(nlu or {})

    def clear(self) -> None:
        self.nlu = {}

    def _entities(self, entity_type: str) -> list[Any]:
        return [
            entity.get("value")
            for entity in self.nlu.get("entities") or []
            if entity.get("type") == entity_type
        ]

    def get_user_name(self) -> Optional[dict]:
        """Имя пользователя из профиля мессенджера: {username, first_name, last_name}"""
        return self.nlu.get("this_user")

    def get_fio(self) -> list[dict]:
        return self._entities(T_FIO)

    def get_geo(self) -> list[dict]:
        return self._entities(T_GEO)

    def get_date_time(self) -> list[dict]:
        return self._entities(T_DATETIME)

    def get_numbers(self) -> list[float]:
        return self._entities(T_NUMBER)

    def get_tokens(self) -> list[str]:
        return list(self.nlu.get("tokens") or [])

    def get_intents(self) -> dict:
        return self.nlu.get("intents") or {}

    def get_intent(self, name: str) -> Optional[dict]:
        """Интент, размеченный на стороне платформы (slots)"""
        return self.get_intents().get(name)
