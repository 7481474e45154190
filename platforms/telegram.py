"""
Адаптер Telegram Bot API (webhook).

Ответ отправляется через Bot API (aiogram), платформе возвращается "ok".
"""

from typing import Any

from config import Platform
from .base import PlatformAdapter


class TelegramAdapter(PlatformAdapter):
    """Webhook Telegram"""

    platform = Platform.TELEGRAM

    async def init(self, query: Any, controller) -> bool:
        self.controller = controller
        content = self._parse(query)
        if content is None:
            return False
        controller.request_object = content

        message = content.get("message")
        if not message:
            self.error = f"{self.name}.init(): Нет сообщения в запросе!"
            return False

        chat = message.get("chat") or {}
        text = message.get("text") or ""
        controller.user_id = chat.get("id")
        controller.user_command = text.lower().strip()
        controller.original_user_command = text
        controller.message_id = message.get("message_id")
        self._fallback_command()
        controller.nlu.set_nlu({
            "this_user": {
                "username": chat.get("username"),
                "first_name": chat.get("first_name"),
                "last_name": chat.get("last_name"),
            }
        })
        return True

    async def get_context(self) -> str:
        controller = self.controller
        if controller.is_send:
            client = self.context.get_client("telegram")
            await client.send_message(
                controller.user_id,
                controller.text,
                reply_markup=controller.buttons.get_buttons(self.platform)
            )
            if len(controller.card):
                media = controller.card.get_cards(self.platform)
                if media:
                    await client.send_media_group(controller.user_id, media)
        return "ok"
