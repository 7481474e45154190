"""
Кнопки ответа.

Кнопки накапливаются в контроллере во время обработки запроса и переводятся
в формат конкретной платформы адаптером (get_buttons(platform)).
"""

import json
from typing import Any, Optional

from aiogram.types import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
)

from config import BUTTON_TITLE_LIMIT, Platform
from core.text import is_url, resize

DEFAULT_UTM = "utm_source=umBot&utm_medium=cpc&utm_campaign=phone"

VK_TYPE_TEXT = "text"
VK_TYPE_LINK = "open_link"
VK_GROUP_NAME = "_group"

VIBER_REPLY = "reply"
VIBER_OPEN_URL = "open-url"


class Button:
    """Одна кнопка: текст, ссылка, payload"""

    def __init__(
        self,
        title: str,
        url: Optional[str] = None,
        payload: Any = None,
        hide: bool = True,
        options: Optional[dict] = None
    ):
        self.title = title
        self.url = url
        self.payload = payload
        self.hide = hide
        self.options = options or {}

    def __repr__(self) -> str:
        return f"<Button: {self.title}>"


class Buttons:
    """
    Набор кнопок.

    hide=True — кнопка-подсказка (исчезает после нажатия),
    hide=False — кнопка-ссылка, остаётся в истории диалога.
    """

    def __init__(self, utm_text: Optional[str] = None):
        """
        Args:
            utm_text: Метка для ссылок. None — стандартная метка, "" — без метки.
        """
        self.buttons: list[Button] = []
        self.utm_text = utm_text

    def _prepare_url(self, url: Optional[str]) -> Optional[str]:
        if not url or not is_url(url):
            return None
        utm = DEFAULT_UTM if self.utm_text is None else self.utm_text
        if utm and "utm_source" not in url:
            url += ("&" if "?" in url else "?") + utm
        return url

    def _add(self, title, url, payload, hide, options) -> bool:
        if title is None:
            return False
        self.buttons.append(Button(title, self._prepare_url(url), payload, hide, options))
        return True

    def add_btn(self, title: str, url: str = "", payload: Any = None, options: dict = None) -> bool:
        """Добавляет кнопку-подсказку"""
        return self._add(title, url, payload, True, options)

    def add_link(self, title: str, url: str = "", payload: Any = None, options: dict = None) -> bool:
        """Добавляет кнопку-ссылку"""
        return self._add(title, url, payload, False, options)

    def clear(self) -> None:
        self.buttons = []

    def __len__(self) -> int:
        return len(self.buttons)

    def get_buttons(self, platform: str) -> Any:
        """Кнопки в формате платформы"""
        render = BUTTON_RENDERERS.get(platform)
        if render is None:
            return None
        return render(self.buttons)

    def get_card_button(self, platform: str) -> Optional[dict]:
        """Первая кнопка в формате кнопки карточки (Алиса, Маруся, SmartApp)"""
        if not self.buttons:
            return None
        if platform == Platform.SMART_APP:
            return _smart_app_card_action(self.buttons[0])
        return _alisa_card_button(self.buttons[0])


# ============= ФОРМАТЫ ПЛАТФОРМ =============

def _alisa_button(button: Button) -> Optional[dict]:
    title = resize(button.title, BUTTON_TITLE_LIMIT)
    if not title:
        return None
    obj = {"title": title, "hide": button.hide}
    if button.payload:
        obj["payload"] = button.payload
    if button.url:
        obj["url"] = resize(button.url, 1024)
    return obj


def _alisa_card_button(button: Button) -> Optional[dict]:
    title = resize(button.title, BUTTON_TITLE_LIMIT)
    if not title:
        return None
    obj = {"text": title}
    if button.payload:
        obj["payload"] = button.payload
    if button.url:
        obj["url"] = resize(button.url, 1024)
    return obj


def render_alisa(buttons: list[Button]) -> list[dict]:
    return [obj for obj in map(_alisa_button, buttons) if obj]


def render_telegram(buttons: list[Button]):
    """
    Клавиатура Telegram.

    Если есть хоть одна ссылка — inline клавиатура, иначе reply клавиатура.
    Без кнопок клавиатура убирается.
    """
    if not buttons:
        return ReplyKeyboardRemove()

    if any(button.url for button in buttons):
        rows = []
        for button in buttons:
            if button.url:
                rows.append([InlineKeyboardButton(text=button.title, url=button.url)])
            else:
                data = button.payload if isinstance(button.payload, str) else button.title
                rows.append([InlineKeyboardButton(text=button.title, callback_data=data[:64])])
        return InlineKeyboardMarkup(inline_keyboard=rows)

    return ReplyKeyboardMarkup(
        keyboard=[[KeyboardButton(text=button.title)] for button in buttons],
        resize_keyboard=True,
        one_time_keyboard=True
    )


def render_vk(buttons: list[Button]) -> dict:
    """Клавиатура VK. Кнопки с одинаковым options['_group'] попадают в одну строку."""
    rows: list = []
    groups: dict = {}
    for button in buttons:
        action = {"type": VK_TYPE_TEXT, "label": button.title}
        if button.url:
            action["type"] = VK_TYPE_LINK
            action["link"] = button.url
        if button.payload:
            payload = button.payload
            action["payload"] = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)

        obj = {"action": action}
        if isinstance(button.payload, dict) and "color" in button.payload and not button.url:
            obj["color"] = button.payload["color"]

        options = dict(button.options)
        group = options.pop(VK_GROUP_NAME, None)
        obj.update(options)

        if group is None:
            rows.append([obj])
        elif group in groups:
            rows[groups[group]].append(obj)
        else:
            groups[group] = len(rows)
            rows.append([obj])

    return {"one_time": bool(rows), "buttons": rows}


def render_viber(buttons: list[Button]) -> Optional[dict]:
    if not buttons:
        return None
    items = []
    for button in buttons:
        item = {"Text": button.title}
        if button.url:
            item["ActionType"] = VIBER_OPEN_URL
            item["ActionBody"] = button.url
        else:
            item["ActionType"] = VIBER_REPLY
            item["ActionBody"] = button.title
        item.update(button.options)
        items.append(item)
    return {"Type": "keyboard", "DefaultHeight": True, "BgColor": "#FFFFFF", "Buttons": items}


def render_smart_app(buttons: list[Button]) -> list[dict]:
    suggestions = []
    for button in buttons:
        title = resize(button.title, BUTTON_TITLE_LIMIT)
        if not title:
            continue
        if button.payload:
            action = {"server_action": button.payload, "type": "server_action"}
        else:
            action = {"text": title, "type": "text"}
        suggestions.append({"title": title, "action": action})
    return suggestions


def _smart_app_card_action(button: Button) -> Optional[dict]:
    if button.url:
        return {"deep_link": button.url, "type": "deep_link"}
    text = resize(button.title, BUTTON_TITLE_LIMIT)
    if text:
        return {"text": text, "type": "text"}
    return None


BUTTON_RENDERERS = {
    Platform.ALISA: render_alisa,
    Platform.MARUSIA: render_alisa,
    Platform.TELEGRAM: render_telegram,
    Platform.VK: render_vk,
    Platform.VIBER: render_viber,
    Platform.SMART_APP: render_smart_app,
}
