"""
Функции для работы с базой данных.

Модули:
- users.py: работа с таблицей users_data
"""

from .users import (
    get_user_data,
    insert_user_data,
    update_user_data,
)

__all__ = [
    'get_user_data',
    'insert_user_data',
    'update_user_data',
]
