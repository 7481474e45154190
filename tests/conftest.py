"""
Общие фикстуры и фейковые клиенты платформ.

Сеть в тестах не используется: клиенты VK, Telegram, Viber и хранилище
SmartApp подменяются через AppContext.set_client.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from clients.request import RequestResult
from config import PlatformParams
from core.context import AppContext
from core.controller import BotController
from db import MemoryStore


class FakeVkClient:
    def __init__(self):
        self.sent = []

    async def users_get(self, user_id):
        return {"id": user_id, "first_name": "Иван", "last_name": "Петров"}

    async def messages_send(self, peer_id, message, keyboard=None, attachments=None, template=None):
        self.sent.append({
            "peer_id": peer_id,
            "message": message,
            "keyboard": keyboard,
            "attachments": attachments,
            "template": template,
        })
        return RequestResult(True, 1)


class FakeTelegramClient:
    def __init__(self):
        self.messages = []
        self.media = []

    async def send_message(self, chat_id, text, reply_markup=None):
        self.messages.append({"chat_id": chat_id, "text": text, "reply_markup": reply_markup})
        return RequestResult(True)

    async def send_media_group(self, chat_id, media):
        self.media.append({"chat_id": chat_id, "media": media})
        return RequestResult(True)


class FakeViberClient:
    def __init__(self):
        self.messages = []
        self.rich = []

    async def send_message(self, receiver, text, keyboard=None):
        self.messages.append({"receiver": receiver, "text": text, "keyboard": keyboard})
        return RequestResult(True)

    async def rich_media(self, receiver, buttons):
        self.rich.append({"receiver": receiver, "buttons": buttons})
        return RequestResult(True)


class FakeSmartAppStorage:
    def __init__(self, fail=False):
        self.data = {}
        self.fail = fail

    async def get(self, user_id):
        return self.data.get(user_id, {})

    async def set(self, user_id, data):
        if self.fail:
            return RequestResult(False, err="unavailable")
        self.data[user_id] = data
        return RequestResult(True)


class FailingStore(MemoryStore):
    """Хранилище, которое не может записать данные"""

    async def insert(self, record):
        raise RuntimeError("disk full")

    async def update(self, record):
        return False


class EchoController(BotController):
    """Повторяет фразу, если не сработала команда или интент"""

    def action(self, intent_name, is_command=False):
        if intent_name is None:
            self.text = f"Вы сказали: {self.original_user_command}"


def make_context(store=None, **params) -> AppContext:
    values = {
        "vk_confirmation_token": "conf-123",
        "welcome_text": "Добро пожаловать",
        "help_text": "Я повторяю фразы",
    }
    values.update(params)
    context = AppContext(params=PlatformParams(**values), store=store if store is not None else MemoryStore())
    context.set_client("vk", FakeVkClient())
    context.set_client("telegram", FakeTelegramClient())
    context.set_client("viber", FakeViberClient())
    context.set_client("smart_app_storage", FakeSmartAppStorage())
    return context


def alisa_request(command="", original=None, message_id=1, user_id="u1", state=None, screen=True, **extra):
    request = {
        "meta": {
            "locale": "ru-RU",
            "timezone": "UTC",
            "client_id": "ru.yandex.searchplugin/7.16",
            "interfaces": {"screen": {}} if screen else {},
        },
        "session": {
            "message_id": message_id,
            "session_id": "s1",
            "skill_id": "skill1",
            "user_id": user_id,
            "new": message_id == 0,
        },
        "request": {
            "command": command,
            "original_utterance": command if original is None else original,
            "type": "SimpleUtterance",
            "nlu": {"tokens": command.split(), "entities": []},
        },
        "version": "1.0",
    }
    if state is not None:
        request["state"] = state
    request.update(extra)
    return request


def smart_app_request(message_name="MESSAGE_TO_SKILL", text="привет", **payload_extra):
    payload = {
        "device": {"platformType": "android", "capabilities": {"screen": {"available": True}}},
        "app_info": {"applicationId": "app-1", "projectId": "p1"},
        "projectName": "Тест",
        "intent": "прошлый",
        "character": {"id": "sber", "name": "Сбер", "appeal": "official"},
        "meta": {"time": {}},
        "message": {
            "original_text": text.capitalize(),
            "normalized_text": text,
            "entities": {},
            "tokenized_elements_list": [],
        },
    }
    payload.update(payload_extra)
    return {
        "messageId": 7,
        "sessionId": "sess-1",
        "messageName": message_name,
        "uuid": {"userId": "sber-user", "userChannel": "B2C", "sub": "sub-1"},
        "payload": payload,
    }


@pytest.fixture
def context():
    return make_context()
