"""
Управление подключением к базе данных.

Пулы соединений PostgreSQL через asyncpg, по одному на строку подключения.
"""

from typing import Optional

import asyncpg

from config import get_logger

logger = get_logger(__name__)

_pools: dict[str, asyncpg.Pool] = {}


async def get_pool(dsn: str) -> asyncpg.Pool:
    """Получить пул соединений (создать если не существует)"""
    pool = _pools.get(dsn)
    if pool is None:
        try:
            pool = await asyncpg.create_pool(dsn)
            _pools[dsn] = pool
            logger.info("✅ Пул соединений создан")
        except Exception as e:
            logger.error(f"❌ Ошибка создания пула соединений: {e}")
            raise
    return pool


async def close_pool(dsn: Optional[str] = None):
    """Закрыть пул соединений (или все пулы, если dsn не указан)"""
    targets = [dsn] if dsn else list(_pools)
    for key in targets:
        pool = _pools.pop(key, None)
        if pool:
            await pool.close()
            logger.info("🔒 Пул соединений закрыт")


async def init_db(dsn: str) -> asyncpg.Pool:
    """Создаёт пул и таблицы"""
    pool = await get_pool(dsn)

    from .models import create_tables
    await create_tables(pool)

    logger.info("✅ База данных инициализирована")
    return pool
