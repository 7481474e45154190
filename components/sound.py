"""
Звуки в голосовом ответе.

В tts можно вставлять ключи вида #game_win#. Для Алисы и Маруси ключи
заменяются на теги <speaker audio="...">, на остальных платформах
удаляются из текста.
"""

import re
from typing import Optional, Union

from config import Platform
from core.text import get_text

SOUND_KEY_PATTERN = re.compile(r'(?:^|\s)#\w+#(?=\s|$)')

ALISA_SOUNDS = {
    "#game_win#": [
        '<speaker audio="alice-sounds-game-win-1.opus">',
        '<speaker audio="alice-sounds-game-win-2.opus">',
        '<speaker audio="alice-sounds-game-win-3.opus">',
    ],
    "#game_loss#": [
        '<speaker audio="alice-sounds-game-loss-1.opus">',
        '<speaker audio="alice-sounds-game-loss-2.opus">',
        '<speaker audio="alice-sounds-game-loss-3.opus">',
    ],
    "#game_boot#": ['<speaker audio="alice-sounds-game-boot-1.opus">'],
    "#game_coin#": [
        '<speaker audio="alice-sounds-game-8-bit-coin-1.opus">',
        '<speaker audio="alice-sounds-game-8-bit-coin-2.opus">',
    ],
    "#game_ping#": ['<speaker audio="alice-sounds-game-ping-1.opus">'],
    "#game_powerup#": [
        '<speaker audio="alice-sounds-game-powerup-1.opus">',
        '<speaker audio="alice-sounds-game-powerup-2.opus">',
    ],
    "#nature_wind#": [
        '<speaker audio="alice-sounds-nature-wind-1.opus">',
        '<speaker audio="alice-sounds-nature-wind-2.opus">',
    ],
    "#nature_thunder#": [
        '<speaker audio="alice-sounds-nature-thunder-1.opus">',
        '<speaker audio="alice-sounds-nature-thunder-2.opus">',
    ],
    "#nature_rain#": [
        '<speaker audio="alice-sounds-nature-rain-1.opus">',
        '<speaker audio="alice-sounds-nature-rain-2.opus">',
    ],
}

MARUSIA_SOUNDS = {
    "#game_win#": [
        '<speaker audio="marusia-sounds/game-win-1">',
        '<speaker audio="marusia-sounds/game-win-2">',
        '<speaker audio="marusia-sounds/game-win-3">',
    ],
    "#game_loss#": [
        '<speaker audio="marusia-sounds/game-loss-1">',
        '<speaker audio="marusia-sounds/game-loss-2">',
        '<speaker audio="marusia-sounds/game-loss-3">',
    ],
    "#game_boot#": ['<speaker audio="marusia-sounds/game-boot-1">'],
    "#game_coin#": [
        '<speaker audio="marusia-sounds/game-8-bit-coin-1">',
        '<speaker audio="marusia-sounds/game-8-bit-coin-2">',
    ],
    "#game_ping#": ['<speaker audio="marusia-sounds/game-ping-1">'],
    "#game_powerup#": [
        '<speaker audio="marusia-sounds/game-powerup-1">',
        '<speaker audio="marusia-sounds/game-powerup-2">',
    ],
    "#nature_wind#": [
        '<speaker audio="marusia-sounds/nature-wind-1">',
        '<speaker audio="marusia-sounds/nature-wind-2">',
    ],
    "#nature_thunder#": [
        '<speaker audio="marusia-sounds/nature-thunder-1">',
        '<speaker audio="marusia-sounds/nature-thunder-2">',
    ],
}

STANDARD_SOUNDS = {
    Platform.ALISA: ALISA_SOUNDS,
    Platform.MARUSIA: MARUSIA_SOUNDS,
}


def remove_sound_keys(text: str) -> str:
    """Удаляет незаменённые ключи звуков"""
    return SOUND_KEY_PATTERN.sub('', text)


class Sound:
    """Пользовательские звуки и флаг использования стандартных"""

    def __init__(self):
        self.sounds: list[dict] = []
        self.is_used_standard_sound = True

    def add(self, key: str, sounds: Union[str, list]) -> None:
        """
        Добавляет свой звук.

        Args:
            key: Ключ в тексте, например "#my_sound#"
            sounds: Тег звука или список тегов (выбирается случайный)
        """
        self.sounds.append({"key": key, "sounds": sounds})

    def clear(self) -> None:
        self.sounds = []

    def get_sounds(self, text: Optional[str], platform: str) -> str:
        """Заменяет ключи звуков в тексте на звуки платформы"""
        if not text:
            return ''
        standard = STANDARD_SOUNDS.get(platform)
        if standard is None:
            return remove_sound_keys(text)

        sounds = []
        if self.is_used_standard_sound:
            sounds.extend({"key": key, "sounds": value} for key, value in standard.items())
        sounds.extend(self.sounds)

        for sound in sounds:
            key = sound.get("key")
            if key and key in text:
                text = re.sub(re.escape(key), lambda _: get_text(sound["sounds"]), text)
        return remove_sound_keys(text)
