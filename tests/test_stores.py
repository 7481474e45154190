"""
Тесты хранилищ данных пользователей.

Запуск: python -m pytest tests/test_stores.py -v
"""

import asyncio
import json
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from conftest import alisa_request, make_context
from core.bot import Bot
from core.controller import BotController
from db import JsonFileStore


class Profile(BotController):
    def action(self, intent_name, is_command=False):
        visits = (self.user_data or {}).get("visits", 0) + 1
        self.user_data = {
            "visits": visits,
            "name": "Аня",
            "tags": ["новый", {"level": 2, "flag": None}],
        }
        self.text = f"Визит {visits}"


def _request(bot, payload):
    async def go():
        result = await bot.run(payload)
        await bot.drain()
        return result
    return asyncio.run(go())


def test_json_store_survives_new_context(tmp_path):
    """Данные, записанные через Bot.run, читаются новым контекстом с тем же файлом"""
    bot = Bot(Profile, make_context(store=JsonFileStore(str(tmp_path))))
    assert _request(bot, alisa_request("раз"))["response"]["text"] == "Визит 1"

    fresh = make_context(store=JsonFileStore(str(tmp_path)))
    record = asyncio.run(fresh.store.get("u1"))
    assert record["data"] == {"visits": 1, "name": "Аня", "tags": ["новый", {"level": 2, "flag": None}]}

    bot = Bot(Profile, fresh)
    assert _request(bot, alisa_request("два"))["response"]["text"] == "Визит 2"
    assert asyncio.run(JsonFileStore(str(tmp_path)).get("u1"))["data"]["visits"] == 2


def test_json_store_update_missing(tmp_path):
    store = JsonFileStore(str(tmp_path))
    assert asyncio.run(store.update({"user_id": "x", "platform": "alisa", "meta": {}, "data": {}})) is False
    assert asyncio.run(store.get("x")) is None


def test_json_store_failed_write_keeps_file(tmp_path, monkeypatch):
    """Сбой посреди записи не портит уже сохранённые данные"""
    store = JsonFileStore(str(tmp_path))
    asyncio.run(store.insert({"user_id": "u1", "platform": "alisa", "meta": {}, "data": {"a": 1}}))

    def broken_dump(records, f, **kwargs):
        f.write('{"u1": ')
        raise OSError("disk full")

    monkeypatch.setattr(json, "dump", broken_dump)
    with pytest.raises(OSError):
        asyncio.run(store.insert({"user_id": "u2", "platform": "alisa", "meta": {}, "data": {}}))
    monkeypatch.undo()

    assert asyncio.run(store.get("u1"))["data"] == {"a": 1}
    assert os.listdir(tmp_path) == ["UsersData.json"]
