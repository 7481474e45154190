"""
Модуль работы с данными пользователей.

Содержит:
- connection.py: пулы соединений PostgreSQL
- models.py: описание таблиц (SQL schemas)
- queries/users.py: запросы к таблице users_data
- stores.py: MemoryStore, JsonFileStore, PostgresStore
- users_data.py: UsersData — контракт хранилища для диспетчера
"""

from .connection import (
    get_pool,
    close_pool,
    init_db,
)

from .models import create_tables
from .stores import MemoryStore, JsonFileStore, PostgresStore
from .users_data import UsersData

__all__ = [
    'get_pool',
    'close_pool',
    'init_db',
    'create_tables',
    'MemoryStore',
    'JsonFileStore',
    'PostgresStore',
    'UsersData',
]
