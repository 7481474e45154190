"""
Хранилища данных пользователей.

Все хранилища реализуют один контракт:
    get(user_id) -> dict | None
    insert(record) -> None
    update(record) -> bool
    close() -> None

record — словарь {user_id, platform, meta, data}. При конкурентной записи
побеждает последний писатель.

- MemoryStore: в памяти процесса (по умолчанию, тесты)
- JsonFileStore: один JSON файл на диске
- PostgresStore: PostgreSQL через asyncpg
"""

import asyncio
import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from config import get_logger
from db.connection import close_pool, get_pool, init_db
from db.queries.users import get_user_data, insert_user_data, update_user_data

logger = get_logger(__name__)


class MemoryStore:
    """Хранилище в памяти процесса"""

    def __init__(self):
        self._records: dict[str, dict] = {}

    async def get(self, user_id: str) -> Optional[dict]:
        record = self._records.get(user_id)
        return copy.deepcopy(record) if record else None

    async def insert(self, record: dict) -> None:
        self._records[record['user_id']] = copy.deepcopy(record)

    async def update(self, record: dict) -> bool:
        if record['user_id'] not in self._records:
            return False
        self._records[record['user_id']] = copy.deepcopy(record)
        return True

    async def close(self) -> None:
        pass

    def __len__(self) -> int:
        return len(self._records)


class JsonFileStore:
    """
    Хранилище в JSON файле.

    Файл читается и перезаписывается целиком на каждую операцию,
    подходит для разработки и небольших навыков.
    """

    def __init__(self, json_dir: str, file_name: str = "UsersData.json"):
        self.path = Path(json_dir) / file_name
        self._lock = asyncio.Lock()

    def _load(self) -> dict:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f) or {}
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            logger.error(f"Broken JSON storage {self.path}: {e}")
            return {}

    def _dump(self, records: dict) -> None:
        """Пишет во временный файл и атомарно подменяет им основной"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            os.unlink(tmp_name)
            raise

    def _put(self, record: dict, only_existing: bool) -> bool:
        records = self._load()
        if only_existing and record['user_id'] not in records:
            return False
        records[record['user_id']] = record
        self._dump(records)
        return True

    async def get(self, user_id: str) -> Optional[dict]:
        async with self._lock:
            records = await asyncio.to_thread(self._load)
            return records.get(user_id)

    async def insert(self, record: dict) -> None:
        async with self._lock:
            await asyncio.to_thread(self._put, record, False)

    async def update(self, record: dict) -> bool:
        async with self._lock:
            return await asyncio.to_thread(self._put, record, True)

    async def close(self) -> None:
        pass


class PostgresStore:
    """Хранилище в PostgreSQL. Таблицы создаются при первом обращении."""

    def __init__(self, dsn: str):
        self.dsn = dsn
        self._initialized = False

    async def _pool(self):
        if not self._initialized:
            self._initialized = True
            return await init_db(self.dsn)
        return await get_pool(self.dsn)

    async def get(self, user_id: str) -> Optional[dict]:
        return await get_user_data(await self._pool(), user_id)

    async def insert(self, record: dict) -> None:
        await insert_user_data(await self._pool(), record)

    async def update(self, record: dict) -> bool:
        return await update_user_data(await self._pool(), record)

    async def close(self) -> None:
        await close_pool(self.dsn)
