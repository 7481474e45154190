"""
Тесты консольного режима и примера echo.

Запуск: python -m pytest tests/test_cli.py -v
"""

import asyncio
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from conftest import make_context
from cli import build_request, format_response, load_controller, repl
from core.bot import Bot


def _dialog(phrases):
    context = make_context()
    controller_class = load_controller("examples.echo:EchoController", context)
    bot = Bot(controller_class, context)
    inputs = iter(phrases)
    outputs = []

    def input_fn(prompt):
        try:
            return next(inputs)
        except StopIteration:
            raise EOFError

    count = asyncio.run(repl(bot, input_fn, outputs.append))
    return count, outputs, context


def test_echo_dialog():
    count, outputs, context = _dialog(["", "как дела", "как дела", "пока", "не дойдёт"])
    assert count == 4
    assert outputs[0] == "Добро пожаловать\n[Помощь]"
    assert outputs[1] == "как дела (1)\n[Пока]"
    assert outputs[2] == "как дела (2)\n[Пока]"
    assert outputs[3] == "До встречи!"


def test_number_pattern():
    _, outputs, _ = _dialog(["", "5 и 12"])
    assert outputs[1].startswith("Вы назвали 2 числа")


def test_exit_command():
    count, outputs, _ = _dialog(["выход"])
    assert count == 0
    assert outputs == []


def test_eof_stops():
    count, _, _ = _dialog([])
    assert count == 0


def test_build_request():
    request = build_request("Привет", 3)
    assert request["request"]["command"] == "привет"
    assert request["request"]["original_utterance"] == "Привет"
    assert request["session"]["message_id"] == 3
    assert request["session"]["new"] is False


def test_format_response():
    assert format_response("ok") == "ok"
    assert format_response({"response": {"text": "Да", "buttons": [{"title": "А"}, {"title": "Б"}]}}) == "Да\n[А] | [Б]"


def test_load_controller_invalid_path():
    with pytest.raises(ValueError):
        load_controller("examples.echo")
