"""
Адаптер Маруси (VK).

Формат запроса совпадает с Алисой. Отличия: идентификатор только из
session.user_id, два поля state (user, session), в ответе
возвращается session, авторизации через account linking нет.
"""

from typing import Any

from config import Platform
from .alisa import VERSION, AlisaAdapter


class MarusiaAdapter(AlisaAdapter):
    """Запрос и ответ в формате Маруси"""

    platform = Platform.MARUSIA

    STATE_BUCKETS = (
        ("user", "user_state_update"),
        ("session", "session_state"),
    )

    def _get_user_id(self) -> Any:
        self._is_state = False
        return self.session.get("user_id")

    def _is_ping(self) -> bool:
        return False

    def _get_session(self) -> dict:
        return {
            "session_id": self.session.get("session_id"),
            "message_id": self.session.get("message_id"),
            "user_id": self.session.get("user_id"),
        }

    async def get_context(self) -> dict:
        result = {"version": VERSION}
        self._init_tts()
        result["response"] = self._get_response()
        result["session"] = self._get_session()
        if self.is_used_local_storage and self.controller.user_data and self._state_name:
            result[self._state_name] = self.controller.user_data
        self._check_deadline()
        return result
