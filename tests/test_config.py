"""
Тесты загрузки конфигурации.

Запуск: python -m pytest tests/test_config.py -v
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
from config import load_config
from core.context import AppContext
from db import JsonFileStore, MemoryStore


CONFIG_YAML = """
app:
  is_local_storage: true
  store: json
params:
  vk_token: file-token
  welcome_text: ["Привет!", "Здравствуйте!"]
  intents:
    - name: bye
      slots: ["пока"]
"""


def test_load_from_file(tmp_path, monkeypatch):
    monkeypatch.delenv("VK_TOKEN", raising=False)
    monkeypatch.delenv("IS_LOCAL_STORAGE", raising=False)
    path = tmp_path / "bot.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")

    app_config, params = load_config(path)
    assert app_config.is_local_storage is True
    assert app_config.store == "json"
    assert params.vk_token == "file-token"
    assert params.welcome_text == ["Привет!", "Здравствуйте!"]
    assert params.intents == [{"name": "bye", "slots": ["пока"]}]


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "bot.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    monkeypatch.setenv("VK_TOKEN", "env-token")
    monkeypatch.setenv("IS_LOCAL_STORAGE", "false")

    app_config, params = load_config(path)
    assert params.vk_token == "env-token"
    assert app_config.is_local_storage is False


def test_missing_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    app_config, params = load_config(tmp_path / "missing.yaml")
    assert app_config.store == "memory"
    assert params.empty_text == "Извините, я вас не понимаю"
    assert [intent["name"] for intent in params.intents] == ["welcome", "help"]


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bot.yaml"
    path.write_text("app: [unclosed", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_unknown_params_skipped(tmp_path):
    path = tmp_path / "bot.yaml"
    path.write_text("params:\n  no_such_param: 1\n  help_text: Помощь\n", encoding="utf-8")
    _, params = load_config(path)
    assert params.help_text == "Помощь"
    assert not hasattr(params, "no_such_param")


def test_context_store_selection(tmp_path, monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    path = tmp_path / "bot.yaml"
    path.write_text(f"app:\n  store: json\n  json_dir: {tmp_path}\n", encoding="utf-8")
    assert isinstance(AppContext.from_file(path).store, JsonFileStore)
    assert isinstance(AppContext.from_file(tmp_path / "missing.yaml").store, MemoryStore)


def test_tokens_read_only_from_params(tmp_path, monkeypatch):
    """Токены платформ берутся из параметров, токенов без клиента нет"""
    monkeypatch.setenv("TELEGRAM_TOKEN", "tg-env")
    monkeypatch.setenv("MARUSIA_TOKEN", "ignored")
    path = tmp_path / "bot.yaml"
    path.write_text("params:\n  yandex_token: old\n", encoding="utf-8")

    _, params = load_config(path)
    assert params.telegram_token == "tg-env"
    for name in ("marusia_token", "yandex_token", "app_id"):
        assert not hasattr(params, name)
    assert not hasattr(config, "TELEGRAM_TOKEN")
    assert not hasattr(config.Platform, "ALL")
