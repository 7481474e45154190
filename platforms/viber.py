"""
Адаптер Viber REST API (webhook).

conversation_started — пользователь открыл диалог: команды нет,
message_id = 0, поэтому срабатывает приветствие.
message — обычное сообщение.
"""

from typing import Any

from config import Platform
from .base import PlatformAdapter


class ViberAdapter(PlatformAdapter):
    """Webhook Viber"""

    platform = Platform.VIBER

    def _set_user_name(self, user_name: str) -> None:
        name = (user_name or "").split(" ")
        self.controller.nlu.set_nlu({
            "this_user": {
                "username": name[0] or None,
                "first_name": name[1] if len(name) > 1 else None,
                "last_name": name[2] if len(name) > 2 else None,
            }
        })

    async def init(self, query: Any, controller) -> bool:
        self.controller = controller
        content = self._parse(query)
        if content is None:
            return False
        controller.request_object = content

        event = content.get("event")
        if event == "conversation_started":
            user = content.get("user") or {}
            controller.user_id = user.get("id")
            controller.user_command = ""
            controller.original_user_command = ""
            controller.message_id = 0
            self._set_user_name(user.get("name"))
            return True

        if event == "message" and content.get("message"):
            sender = content.get("sender") or {}
            text = content["message"].get("text") or ""
            controller.user_id = sender.get("id")
            controller.user_command = text.lower().strip()
            controller.original_user_command = text
            controller.message_id = content.get("message_token")
            self._fallback_command()
            self._set_user_name(sender.get("name"))
            return True

        self.error = f"{self.name}.init(): Неподдерживаемое событие: {event}"
        return False

    async def get_context(self) -> str:
        controller = self.controller
        if controller.is_send:
            client = self.context.get_client("viber")
            await client.send_message(
                controller.user_id,
                controller.text,
                keyboard=controller.buttons.get_buttons(self.platform)
            )
            if len(controller.card):
                buttons = controller.card.get_cards(self.platform)
                if buttons:
                    await client.rich_media(controller.user_id, buttons)
        return "ok"
