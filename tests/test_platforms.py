"""
Тесты адаптеров платформ: разбор запроса и формат ответа.

Запуск: python -m pytest tests/test_platforms.py -v
"""

import asyncio
import json
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from conftest import EchoController, alisa_request, make_context, smart_app_request
from platforms import (
    AlisaAdapter,
    MarusiaAdapter,
    SmartAppAdapter,
    TelegramAdapter,
    ViberAdapter,
    VkAdapter,
)


def _init(adapter_class, payload, context=None):
    context = context or make_context()
    adapter = adapter_class(context)
    controller = EchoController(context)
    controller.app_type = adapter.platform
    ok = asyncio.run(adapter.init(payload, controller))
    return adapter, controller, ok


# ============= АЛИСА =============

def test_alisa_init():
    adapter, controller, ok = _init(AlisaAdapter, alisa_request("привет", "Привет!"))
    assert ok
    assert controller.user_id == "u1"
    assert controller.user_command == "привет"
    assert controller.original_user_command == "Привет!"
    assert controller.message_id == 1
    assert controller.is_screen is True
    assert adapter.send_in_init is None


def test_alisa_command_fallback():
    """Пустая команда заменяется исходной фразой"""
    _, controller, ok = _init(AlisaAdapter, alisa_request("", "Ой!"))
    assert ok
    assert controller.user_command == controller.original_user_command == "Ой!"


def test_alisa_button_payload():
    payload = alisa_request()
    payload["request"] = {"type": "ButtonPressed", "payload": "next", "nlu": {}}
    _, controller, ok = _init(AlisaAdapter, payload)
    assert ok
    assert controller.user_command == "next"
    assert controller.payload == "next"


def test_alisa_application_id():
    payload = alisa_request("тест")
    payload["session"]["application"] = {"application_id": "app-42"}
    _, controller, _ = _init(AlisaAdapter, payload)
    assert controller.user_id == "app-42"


def test_alisa_auth_user():
    context = make_context(y_is_auth_user=True)
    payload = alisa_request("тест")
    payload["session"]["user"] = {"user_id": "yandex-user", "access_token": "token-1"}
    _, controller, _ = _init(AlisaAdapter, payload, context)
    assert controller.user_id == "yandex-user"
    assert controller.user_token == "token-1"


def test_alisa_json_string():
    _, controller, ok = _init(AlisaAdapter, json.dumps(alisa_request("строка")))
    assert ok
    assert controller.user_command == "строка"


def test_alisa_invalid_payload():
    adapter, _, ok = _init(AlisaAdapter, "")
    assert not ok
    assert "пустой" in adapter.get_error()

    adapter, _, ok = _init(AlisaAdapter, "{broken")
    assert not ok
    assert adapter.get_error()

    adapter, _, ok = _init(AlisaAdapter, {"foo": "bar"})
    assert not ok
    assert adapter.get_error()


def test_alisa_account_linking_event():
    _, controller, ok = _init(AlisaAdapter, {"account_linking_complete_event": {}, "version": "1.0"})
    assert ok
    assert controller.user_events == {"auth": {"status": True}}


def test_alisa_ping():
    adapter, controller, ok = _init(AlisaAdapter, alisa_request("ping"))
    assert ok
    assert adapter.send_in_init["response"]["text"] == "pong"


def test_alisa_context():
    adapter, controller, _ = _init(AlisaAdapter, alisa_request("привет"))
    controller.text = "Привет!"
    controller.buttons.add_btn("Далее")
    result = asyncio.run(adapter.get_context())

    assert result["version"] == "1.0"
    assert result["response"]["text"] == "Привет!"
    assert result["response"]["tts"] == "Привет!"
    assert result["response"]["end_session"] is False
    assert result["response"]["buttons"] == [{"title": "Далее", "hide": True}]
    assert adapter.get_error() is None


def test_alisa_context_without_screen():
    adapter, controller, _ = _init(AlisaAdapter, alisa_request("привет", screen=False))
    controller.text = "Привет!"
    controller.buttons.add_btn("Далее")
    result = asyncio.run(adapter.get_context())
    assert "buttons" not in result["response"]


def test_alisa_text_limit():
    adapter, controller, _ = _init(AlisaAdapter, alisa_request("привет"))
    controller.text = "а" * 2000
    result = asyncio.run(adapter.get_context())
    assert len(result["response"]["text"]) == 1024
    assert result["response"]["text"].endswith("...")


def test_alisa_start_account_linking():
    adapter, controller, _ = _init(AlisaAdapter, alisa_request("войти"))
    controller.is_auth = True
    result = asyncio.run(adapter.get_context())
    assert "start_account_linking" in result
    assert "response" not in result


def test_alisa_deadline_exceeded():
    """Долгий ответ записывает ошибку, но ответ остаётся корректным"""
    adapter, controller, _ = _init(AlisaAdapter, alisa_request("привет"))
    controller.text = "Поздно"
    adapter.time_start -= 5
    result = asyncio.run(adapter.get_context())
    assert adapter.get_error() is not None
    assert result["response"]["text"] == "Поздно"


def test_alisa_state_local_storage():
    context = make_context()
    context.app_config.is_local_storage = True
    payload = alisa_request("привет", state={"user": {"count": 2}})
    adapter, controller, _ = _init(AlisaAdapter, payload, context)
    assert adapter.is_local_storage()
    assert asyncio.run(adapter.get_local_storage()) == {"count": 2}

    adapter.is_used_local_storage = True
    controller.user_data = {"count": 3}
    result = asyncio.run(adapter.get_context())
    assert result["user_state_update"] == {"count": 3}


def test_alisa_state_disabled():
    payload = alisa_request("привет", state={"session": {"a": 1}})
    adapter, _, _ = _init(AlisaAdapter, payload)
    assert not adapter.is_local_storage()


# ============= МАРУСЯ =============

def test_marusia_session_echo():
    payload = alisa_request("привет", user_id="m1")
    payload["session"]["application"] = {"application_id": "ignored"}
    adapter, controller, ok = _init(MarusiaAdapter, payload)
    assert ok
    assert controller.user_id == "m1"

    controller.text = "Привет"
    result = asyncio.run(adapter.get_context())
    assert result["session"] == {"session_id": "s1", "message_id": 1, "user_id": "m1"}
    assert result["response"]["text"] == "Привет"


def test_marusia_no_ping():
    adapter, _, ok = _init(MarusiaAdapter, alisa_request("ping"))
    assert ok
    assert adapter.send_in_init is None


# ============= VK =============

def test_vk_confirmation():
    adapter, _, ok = _init(VkAdapter, {"type": "confirmation", "group_id": 1})
    assert ok
    assert adapter.send_in_init == "conf-123"


def test_vk_message_new():
    context = make_context()
    payload = {
        "type": "message_new",
        "group_id": 1,
        "object": {"message": {"from_id": 555, "id": 10, "text": "  Привет Бот  "}},
    }
    adapter, controller, ok = _init(VkAdapter, payload, context)
    assert ok
    assert controller.user_id == 555
    assert controller.user_command == "привет бот"
    assert controller.original_user_command == "Привет Бот"
    assert controller.nlu.get_user_name()["first_name"] == "Иван"

    controller.text = "Ответ"
    controller.buttons.add_btn("Ещё")
    assert asyncio.run(adapter.get_context()) == "ok"
    sent = context.get_client("vk").sent
    assert sent[0]["peer_id"] == 555
    assert sent[0]["message"] == "Ответ"
    assert sent[0]["keyboard"]["buttons"][0][0]["action"]["label"] == "Ещё"


def test_vk_unknown_type():
    adapter, _, ok = _init(VkAdapter, {"type": "wall_post_new", "group_id": 1})
    assert not ok
    assert adapter.get_error()


# ============= TELEGRAM =============

def test_telegram_message():
    context = make_context()
    payload = {
        "update_id": 1,
        "message": {
            "message_id": 3,
            "text": "Привет",
            "chat": {"id": 777, "username": "ivan", "first_name": "Иван"},
        },
    }
    adapter, controller, ok = _init(TelegramAdapter, payload, context)
    assert ok
    assert controller.user_id == 777
    assert controller.user_command == "привет"
    assert controller.original_user_command == "Привет"
    assert controller.nlu.get_user_name()["username"] == "ivan"

    controller.text = "Здравствуйте"
    assert asyncio.run(adapter.get_context()) == "ok"
    messages = context.get_client("telegram").messages
    assert len(messages) == 1
    assert messages[0]["chat_id"] == 777
    assert messages[0]["text"] == "Здравствуйте"


def test_telegram_not_send():
    context = make_context()
    payload = {"update_id": 1, "message": {"message_id": 3, "text": "x", "chat": {"id": 1}}}
    adapter, controller, _ = _init(TelegramAdapter, payload, context)
    controller.is_send = False
    assert asyncio.run(adapter.get_context()) == "ok"
    assert context.get_client("telegram").messages == []


def test_telegram_without_message():
    adapter, _, ok = _init(TelegramAdapter, {"update_id": 1, "edited_message": {}})
    assert not ok


# ============= VIBER =============

def test_viber_conversation_started():
    payload = {
        "event": "conversation_started",
        "message_token": 1,
        "user": {"id": "viber-1", "name": "Иван Петров"},
    }
    _, controller, ok = _init(ViberAdapter, payload)
    assert ok
    assert controller.user_id == "viber-1"
    assert controller.user_command == ""
    assert controller.message_id == 0


def test_viber_message():
    context = make_context()
    payload = {
        "event": "message",
        "message_token": 99,
        "sender": {"id": "viber-2", "name": "Пётр"},
        "message": {"type": "text", "text": "Помощь"},
    }
    adapter, controller, ok = _init(ViberAdapter, payload, context)
    assert ok
    assert controller.user_command == "помощь"
    assert controller.message_id == 99

    controller.text = "Справка"
    assert asyncio.run(adapter.get_context()) == "ok"
    assert context.get_client("viber").messages[0]["text"] == "Справка"


# ============= SMARTAPP =============

def test_smart_app_message():
    adapter, controller, ok = _init(SmartAppAdapter, smart_app_request(text="привет"))
    assert ok
    assert controller.user_id == "sber-user"
    assert controller.user_command == "привет"
    assert controller.original_user_command == "Привет"
    assert controller.appeal == "official"
    assert controller.old_intent_name == "прошлый"
    assert adapter.is_local_storage()


def test_smart_app_run_app():
    payload = smart_app_request("RUN_APP", server_action={"parameters": "start"})
    _, controller, ok = _init(SmartAppAdapter, payload)
    assert ok
    assert controller.message_id == 0
    assert controller.original_user_command == "start"
    assert controller.user_command == "start"


def test_smart_app_rating_result():
    payload = smart_app_request(
        "RATING_RESULT",
        status_code={"code": 1},
        rating={"estimation": 5},
    )
    _, controller, ok = _init(SmartAppAdapter, payload)
    assert ok
    assert controller.user_events == {"rating": {"status": True, "value": 5}}


def test_smart_app_context():
    adapter, controller, _ = _init(SmartAppAdapter, smart_app_request())
    controller.text = "б" * 300
    controller.is_end = True
    controller.emotion = "igrivost"
    result = asyncio.run(adapter.get_context())

    assert result["messageName"] == "ANSWER_TO_USER"
    assert result["sessionId"] == "sess-1"
    payload = result["payload"]
    assert payload["finished"] is True
    assert payload["emotion"] == {"emotionId": "igrivost"}
    assert len(payload["items"][0]["bubble"]["text"]) == 250
    assert payload["items"][-1] == {"command": {"type": "close_app"}}


def test_smart_app_rating_context():
    adapter, _, _ = _init(SmartAppAdapter, smart_app_request())
    result = asyncio.run(adapter.get_rating_context())
    assert result["messageName"] == "CALL_RATING"
    assert result["payload"] == {}


def test_smart_app_invalid():
    adapter, _, ok = _init(SmartAppAdapter, {"messageName": "MESSAGE_TO_SKILL"})
    assert not ok
    assert adapter.get_error()
