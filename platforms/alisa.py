"""
Адаптер Алисы (Яндекс Диалоги).

Идентификатор пользователя:
- y_is_auth_user=True и пользователь авторизован — session.user.user_id
- иначе session.application.application_id, затем session.user_id

Данные пользователя могут храниться в state запроса (user, application
или session), тогда они возвращаются в соответствующем поле ответа.
"""

from typing import Any, Optional

from config import TEXT_LIMIT, TTS_LIMIT, Platform
from core.text import resize
from .base import PlatformAdapter

VERSION = "1.0"


class AlisaAdapter(PlatformAdapter):
    """Запрос и ответ в формате Яндекс Диалогов"""

    platform = Platform.ALISA

    # Поле state запроса -> поле ответа
    STATE_BUCKETS = (
        ("user", "user_state_update"),
        ("application", "application_state"),
        ("session", "session_state"),
    )

    def __init__(self, context):
        super().__init__(context)
        self.session: dict = {}
        self._is_state = False
        self._state_name: Optional[str] = None

    def _set_state(self, state: dict) -> None:
        for request_key, response_key in self.STATE_BUCKETS:
            if request_key in state:
                self.controller.state = state[request_key]
                self._state_name = response_key
                return

    def _init_user_command(self, request: dict) -> None:
        controller = self.controller
        if request.get("type") == "SimpleUtterance":
            controller.user_command = (request.get("command") or "").strip()
            controller.original_user_command = (request.get("original_utterance") or "").strip()
        else:
            payload = request.get("payload")
            if isinstance(payload, str):
                controller.user_command = payload
                controller.original_user_command = payload
            else:
                controller.user_command = (request.get("command") or "").strip()
                controller.original_user_command = (request.get("original_utterance") or "").strip()
            controller.payload = payload
        self._fallback_command()

    def _get_user_id(self) -> Any:
        session = self.session
        self._is_state = False
        if self.params.y_is_auth_user:
            user = session.get("user") or {}
            if user.get("user_id") is not None:
                self._is_state = True
                self.controller.user_token = user.get("access_token")
                return user["user_id"]

        application = session.get("application") or {}
        if application.get("application_id") is not None:
            return application["application_id"]
        return session.get("user_id")

    def _init_auth_event(self, content: dict) -> bool:
        """account_linking_complete_event: пользователь завершил авторизацию"""
        if "account_linking_complete_event" not in content:
            self.error = f"{self.name}.init(): Некорректные данные!"
            return False
        self.controller.user_events = {"auth": {"status": True}}
        self.controller.request_object = content
        return True

    async def init(self, query: Any, controller) -> bool:
        self.controller = controller
        content = self._parse(query)
        if content is None:
            return False
        if "session" not in content and "request" not in content:
            return self._init_auth_event(content)
        if "account_linking_complete_event" in content:
            controller.user_events = {"auth": {"status": True}}

        controller.request_object = content
        request = content.get("request") or {}
        self._init_user_command(request)

        self.session = content.get("session") or {}
        controller.user_id = self._get_user_id()
        controller.nlu.set_nlu(request.get("nlu"))
        controller.user_meta = content.get("meta") or {}
        controller.message_id = self.session.get("message_id")
        if isinstance(content.get("state"), dict):
            self._set_state(content["state"])
        controller.is_screen = "screen" in (controller.user_meta.get("interfaces") or {})

        if self._is_ping():
            controller.text = "pong"
            self.send_in_init = await self.get_context()
        return True

    def _is_ping(self) -> bool:
        """Проверка доступности навыка, отвечаем pong без логики приложения"""
        return self.controller.original_user_command == "ping"

    def _get_response(self) -> dict:
        controller = self.controller
        response = {
            "text": resize(controller.text, TEXT_LIMIT),
            "tts": resize(controller.tts, TTS_LIMIT),
            "end_session": controller.is_end,
        }
        if controller.is_screen:
            if len(controller.card):
                card = controller.card.get_cards(self.platform)
                if card:
                    response["card"] = card
            response["buttons"] = controller.buttons.get_buttons(self.platform)
        return response

    def _add_state(self, result: dict) -> None:
        if not self._state_name or not (self._is_state or self.is_used_local_storage):
            return
        if self.is_used_local_storage and self.controller.user_data:
            result[self._state_name] = self.controller.user_data
        elif self.controller.state:
            result[self._state_name] = self.controller.state

    async def get_context(self) -> dict:
        result = {"version": VERSION}
        if self.controller.is_auth and self.controller.user_token is None:
            result["start_account_linking"] = {}
        else:
            self._init_tts()
            result["response"] = self._get_response()
        self._add_state(result)
        self._check_deadline()
        return result

    def is_local_storage(self) -> bool:
        return bool(self.context.app_config.is_local_storage and self.controller.state is not None)

    async def get_local_storage(self) -> Any:
        return self.controller.state
