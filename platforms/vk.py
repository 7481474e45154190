"""
Адаптер сообщений сообщества VK (Callback API).

confirmation — ответ строкой подтверждения без вызова логики;
message_new — обычное сообщение, ответ уходит через messages.send,
платформе возвращается "ok".
"""

from typing import Any

from config import Platform
from .base import PlatformAdapter


class VkAdapter(PlatformAdapter):
    """Callback API VK"""

    platform = Platform.VK

    async def _init_user(self, user_id) -> None:
        """Имя пользователя из профиля VK"""
        user = await self.context.get_client("vk").users_get(user_id)
        if user:
            self.controller.nlu.set_nlu({
                "this_user": {
                    "username": None,
                    "first_name": user.get("first_name"),
                    "last_name": user.get("last_name"),
                }
            })

    async def init(self, query: Any, controller) -> bool:
        self.controller = controller
        content = self._parse(query)
        if content is None:
            return False
        controller.request_object = content

        event_type = content.get("type")
        if event_type == "confirmation":
            self.send_in_init = self.params.vk_confirmation_token or ""
            return True
        if event_type != "message_new":
            self.error = f"{self.name}.init(): Некорректный тип данных: {event_type}"
            return False

        message = (content.get("object") or {}).get("message")
        if not message:
            self.error = f"{self.name}.init(): Нет сообщения в запросе!"
            return False

        text = message.get("text") or ""
        controller.user_id = message.get("from_id")
        controller.user_command = text.lower().strip()
        controller.original_user_command = text.strip()
        controller.message_id = message.get("id")
        controller.payload = message.get("payload")
        self._fallback_command()
        await self._init_user(controller.user_id)
        return True

    async def get_context(self) -> str:
        controller = self.controller
        if controller.is_send:
            keyboard = controller.buttons.get_buttons(self.platform) if len(controller.buttons) else None
            attachments = []
            template = None
            if len(controller.card) or controller.card.template is not None:
                cards = controller.card.get_cards(self.platform)
                if isinstance(cards, dict):
                    template = cards
                elif cards:
                    attachments.extend(cards)
            # Звуки VK: вложения вида audio_message<owner>_<id>
            for item in controller.sound.sounds:
                sounds = item["sounds"]
                attachments.extend([sounds] if isinstance(sounds, str) else sounds)
            await self.context.get_client("vk").messages_send(
                controller.user_id,
                controller.text,
                keyboard=keyboard,
                attachments=attachments or None,
                template=template
            )
        return "ok"
