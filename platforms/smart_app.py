"""
Адаптер SmartApp (Салют, Сбер).

Типы сообщений:
- MESSAGE_TO_SKILL, CLOSE_APP — текст пользователя
- SERVER_ACTION, RUN_APP — действие приложения (RUN_APP — новый диалог)
- RATING_RESULT — результат оценки приложения

Данные пользователя всегда хранятся на стороне SmartApp
(clients/smart_app.py).
"""

from typing import Any

from config import BUBBLE_LIMIT, Platform
from core.text import resize
from .base import PlatformAdapter


class SmartAppAdapter(PlatformAdapter):
    """Запрос и ответ в формате SmartApp"""

    platform = Platform.SMART_APP

    def __init__(self, context):
        super().__init__(context)
        self.session: dict = {}

    def _init_user_command(self, content: dict) -> None:
        controller = self.controller
        payload = content.get("payload") or {}
        message_name = content.get("messageName")
        controller.message_id = content.get("messageId")

        if message_name in ("MESSAGE_TO_SKILL", "CLOSE_APP"):
            message = payload.get("message") or {}
            controller.user_command = message.get("normalized_text")
            controller.original_user_command = message.get("original_text")
        elif message_name in ("SERVER_ACTION", "RUN_APP"):
            controller.payload = (payload.get("server_action") or {}).get("parameters")
            if isinstance(controller.payload, str):
                controller.user_command = controller.payload
                controller.original_user_command = controller.payload
            if message_name == "RUN_APP":
                controller.message_id = 0
                controller.original_user_command = controller.user_command
                controller.user_command = ""
        elif message_name == "RATING_RESULT":
            controller.payload = payload
            controller.message_id = 0
            controller.user_events = {
                "rating": {
                    "status": (payload.get("status_code") or {}).get("code") == 1,
                    "value": (payload.get("rating") or {}).get("estimation"),
                }
            }
        self._fallback_command()

    async def init(self, query: Any, controller) -> bool:
        self.controller = controller
        content = self._parse(query)
        if content is None:
            return False
        payload = content.get("payload")
        uuid = content.get("uuid")
        if not isinstance(payload, dict) or not isinstance(uuid, dict):
            self.error = f"{self.name}.init(): Некорректные данные!"
            return False

        controller.request_object = content
        self._init_user_command(content)
        self.session = {
            "device": payload.get("device") or {},
            "meta": payload.get("meta"),
            "sessionId": content.get("sessionId"),
            "messageId": content.get("messageId"),
            "uuid": uuid,
            "projectName": payload.get("projectName"),
        }
        controller.old_intent_name = payload.get("intent")
        controller.appeal = (payload.get("character") or {}).get("appeal")
        controller.user_id = uuid.get("userId")

        message = payload.get("message") or {}
        controller.nlu.set_nlu({
            "entities": message.get("entities"),
            "tokens": message.get("tokenized_elements_list"),
        })
        controller.user_meta = payload.get("meta") or {}

        screen = ((self.session["device"].get("capabilities") or {}).get("screen"))
        controller.is_screen = screen.get("available", True) if isinstance(screen, dict) else True
        return True

    def _get_payload(self) -> dict:
        controller = self.controller
        payload = {
            "pronounceText": controller.text,
            "pronounceTextType": "application/text",
            "device": self.session["device"],
            "intent": controller.this_intent_name,
            "projectName": self.session["projectName"],
            "auto_listening": not controller.is_end,
            "finished": controller.is_end,
        }
        items = []
        if controller.emotion:
            payload["emotion"] = {"emotionId": controller.emotion}
        if controller.text:
            items.append({
                "bubble": {
                    "text": resize(controller.text, BUBBLE_LIMIT),
                    "markdown": True,
                    "expand_policy": "auto_expand",
                }
            })
        if controller.tts:
            payload["pronounceText"] = controller.tts
            payload["pronounceTextType"] = "application/ssml"
        if controller.is_screen:
            if len(controller.card):
                card = controller.card.get_cards(self.platform)
                if card:
                    items.append(card)
            payload["suggestions"] = {"buttons": controller.buttons.get_buttons(self.platform)}
        if controller.is_end:
            items.append({"command": {"type": "close_app"}})
        if items:
            payload["items"] = items
        return payload

    def _envelope(self, message_name: str) -> dict:
        return {
            "messageName": message_name,
            "sessionId": self.session["sessionId"],
            "messageId": self.session["messageId"],
            "uuid": self.session["uuid"],
        }

    async def get_rating_context(self) -> dict:
        result = self._envelope("CALL_RATING")
        result["payload"] = {}
        return result

    async def get_context(self) -> dict:
        result = self._envelope("ANSWER_TO_USER")
        if self.controller.sound.sounds:
            if self.controller.tts is None:
                self.controller.tts = self.controller.text
            self.controller.tts = self.controller.sound.get_sounds(self.controller.tts, self.platform)
        result["payload"] = self._get_payload()
        self._check_deadline()
        return result

    def is_local_storage(self) -> bool:
        return True

    async def get_local_storage(self) -> Any:
        return await self.context.get_client("smart_app_storage").get(self.controller.user_id)

    async def set_local_storage(self, data: Any) -> bool:
        result = await self.context.get_client("smart_app_storage").set(self.controller.user_id, data)
        return result.status
