"""
Компоненты ответа, которые наполняет логика навыка.

Содержит:
- buttons.py: Button, Buttons
- card.py: Card, Image
- sound.py: Sound
- nlu.py: Nlu
- navigation.py: Navigation (постраничный вывод списков)
"""

from .buttons import Button, Buttons
from .card import Card, Image
from .navigation import Navigation
from .nlu import Nlu
from .sound import Sound, remove_sound_keys

__all__ = [
    'Button',
    'Buttons',
    'Card',
    'Image',
    'Navigation',
    'Nlu',
    'Sound',
    'remove_sound_keys',
]
