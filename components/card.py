"""
Карточки с изображениями.

Card накапливает изображения (Image) и по запросу адаптера отдаёт их в
формате платформы: BigImage / ItemsList / ImageGallery для голосовых
ассистентов, список ячеек для SmartApp, медиа-группу для Telegram,
rich media для Viber, вложения для VK.
"""

from typing import Any, Optional

from aiogram.types import InputMediaPhoto

from config import CARD_DESC_LIMIT, CARD_TITLE_LIMIT, Platform
from core.text import is_url, resize
from .buttons import Buttons

ALISA_BIG_IMAGE = "BigImage"
ALISA_ITEMS_LIST = "ItemsList"
ALISA_IMAGE_GALLERY = "ImageGallery"
ALISA_MAX_IMAGES = 5
ALISA_MAX_GALLERY_IMAGES = 7

TELEGRAM_MAX_MEDIA = 10


class Image:
    """Изображение карточки"""

    def __init__(self, image: str, title: str, desc: str = " ", button: Buttons = None):
        # Ссылка на файл или уже загруженный идентификатор (image_id / attachment)
        if is_url(image):
            self.url: Optional[str] = image
            self.token: Optional[str] = None
        else:
            self.url = None
            self.token = image or None
        self.title = title
        self.desc = desc
        self.button = button or Buttons()
        self.params: dict = {}


class Card:
    """
    Набор изображений для отображения пользователю.

    Атрибуты:
        title: Заголовок списка
        is_one: Отобразить только первое изображение (BigImage)
        is_used_gallery: Отобразить как галерею
        template: Готовый ответ платформы, отдаётся как есть
    """

    def __init__(self, utm_text: Optional[str] = None):
        self.title = ""
        self.images: list[Image] = []
        self.button = Buttons(utm_text)
        self.is_one = False
        self.is_used_gallery = False
        self.template: Any = None

    def add(self, image: str, title: str, desc: str = " ", button: Buttons = None) -> bool:
        """Добавляет изображение. Без заголовка и картинки не добавляется."""
        if not image and not title:
            return False
        self.images.append(Image(image, title, desc, button))
        return True

    def clear(self) -> None:
        self.images = []
        self.button.clear()
        self.template = None

    def __len__(self) -> int:
        return len(self.images)

    def get_cards(self, platform: str) -> Any:
        """Карточка в формате платформы"""
        if self.template is not None:
            return self.template
        render = CARD_RENDERERS.get(platform)
        if render is None or not self.images:
            return None
        return render(self)


# ============= ГОЛОСОВЫЕ АССИСТЕНТЫ =============

def _alisa_items(card: Card) -> list[dict]:
    limit = ALISA_MAX_GALLERY_IMAGES if card.is_used_gallery else ALISA_MAX_IMAGES
    items = []
    for image in card.images[:limit]:
        item = {"title": resize(image.title, CARD_TITLE_LIMIT)}
        if image.token:
            item["image_id"] = image.token
        if not card.is_used_gallery:
            item["description"] = resize(image.desc, CARD_DESC_LIMIT)
            button = image.button.get_card_button(Platform.ALISA)
            if button:
                item["button"] = button
        items.append(item)
    return items


def render_alisa(card: Card) -> Optional[dict]:
    if card.is_one:
        image = card.images[0]
        if not image.token:
            return None
        obj = {
            "type": ALISA_BIG_IMAGE,
            "image_id": image.token,
            "title": resize(image.title, CARD_TITLE_LIMIT),
            "description": resize(image.desc, CARD_DESC_LIMIT),
        }
        button = image.button.get_card_button(Platform.ALISA) or card.button.get_card_button(Platform.ALISA)
        if button:
            obj["button"] = button
        return obj

    if card.is_used_gallery:
        return {"type": ALISA_IMAGE_GALLERY, "items": _alisa_items(card)}

    obj = {
        "type": ALISA_ITEMS_LIST,
        "header": {"text": resize(card.title, 64)},
        "items": _alisa_items(card),
    }
    button = card.button.get_card_button(Platform.ALISA)
    if button:
        obj["footer"] = {"text": button["text"], "button": button}
    return obj


# ============= SMARTAPP =============

def _smart_app_cell(image: Image) -> dict:
    cell = {
        "type": "left_right_cell_view",
        "paddings": {"left": "4x", "top": "4x", "right": "4x", "bottom": "4x"},
        "left": {
            "type": "fast_answer_left_view",
            "icon_vertical_gravity": "top",
            "icon_and_value": {
                "value": {
                    "text": image.desc,
                    "typeface": image.params.get("desc_typeface", "body3"),
                    "text_color": image.params.get("desc_text_color", "default"),
                    "max_lines": 0,
                },
            },
            "label": {
                "text": image.title,
                "typeface": image.params.get("title_typeface", "headline2"),
                "text_color": image.params.get("title_text_color", "default"),
                "max_lines": 0,
            },
        },
    }
    if image.url:
        cell["left"]["icon_and_value"]["icon"] = {
            "address": {"type": "url", "url": image.url},
            "size": {"width": "xlarge", "height": "xlarge"},
            "margin": {"left": "0x", "right": "6x"},
        }
    action = image.button.get_card_button(Platform.SMART_APP)
    if action:
        cell["actions"] = [action]
    return cell


def _smart_app_single(image: Image) -> list[dict]:
    cells = []
    if image.url:
        cells.append({"type": "image_cell_view", "content": {"url": image.url}})
    if image.title:
        cells.append({
            "type": "text_cell_view",
            "paddings": {"top": "6x", "left": "8x", "right": "8x"},
            "content": {"text": image.title, "typeface": "title1", "text_color": "default"},
        })
    if image.desc:
        cells.append({
            "type": "text_cell_view",
            "paddings": {"top": "4x", "left": "8x", "right": "8x"},
            "content": {"text": image.desc, "typeface": "footnote1", "text_color": "secondary"},
        })
    action = image.button.get_card_button(Platform.SMART_APP)
    if action:
        cells.append({
            "type": "text_cell_view",
            "paddings": {"top": "12x", "left": "8x", "right": "8x"},
            "content": {
                "actions": [action],
                "text": action.get("text", image.title),
                "typeface": "button1",
                "text_color": "brand",
            },
        })
    return cells


def render_smart_app(card: Card) -> dict:
    if card.is_one:
        cells = _smart_app_single(card.images[0])
    else:
        cells = []
        if card.title:
            cells.append({
                "type": "text_cell_view",
                "content": {"text": card.title, "typeface": "headline3", "text_color": "default"},
            })
        cells.extend(_smart_app_cell(image) for image in card.images)
    return {"card": {"type": "list_card", "cells": cells}}


# ============= МЕССЕНДЖЕРЫ =============

def render_telegram(card: Card) -> list[InputMediaPhoto]:
    media = []
    for image in card.images[:TELEGRAM_MAX_MEDIA]:
        source = image.token or image.url
        if source:
            media.append(InputMediaPhoto(media=source, caption=image.title or None))
    return media


def render_viber(card: Card) -> list[dict]:
    buttons = []
    for image in card.images:
        if image.url:
            buttons.append({
                "Columns": 6,
                "Rows": 3,
                "ActionType": "none",
                "Image": image.url,
            })
        buttons.append({
            "Columns": 6,
            "Rows": 2,
            "Text": f"<font color=#000><b>{image.title}</b></font><br><font color=#777>{image.desc}</font>",
            "ActionType": "none",
            "TextSize": "medium",
            "TextVAlign": "middle",
            "TextHAlign": "left",
        })
        for button in image.button.buttons:
            buttons.append({
                "Columns": 6,
                "Rows": 1,
                "ActionType": "open-url" if button.url else "reply",
                "ActionBody": button.url or button.title,
                "Text": button.title,
            })
    return buttons


def render_vk(card: Card) -> list[str]:
    """Вложения VK: идентификаторы вида photo<owner>_<id>"""
    return [image.token for image in card.images if image.token]


CARD_RENDERERS = {
    Platform.ALISA: render_alisa,
    Platform.MARUSIA: render_alisa,
    Platform.SMART_APP: render_smart_app,
    Platform.TELEGRAM: render_telegram,
    Platform.VIBER: render_viber,
    Platform.VK: render_vk,
}
