"""
Запросы для работы с данными пользователей (таблица users_data).
"""

import json
from typing import Optional

import asyncpg

from config import get_logger

logger = get_logger(__name__)


def _row_to_dict(row) -> dict:
    """Преобразовать строку БД в словарь"""
    def safe_json(key):
        val = row[key]
        if val is None:
            return None
        try:
            return json.loads(val) if isinstance(val, str) else val
        except json.JSONDecodeError:
            logger.warning(f"Broken JSON in users_data.{key} for {row['user_id']}")
            return None

    return {
        'user_id': row['user_id'],
        'platform': row['platform'],
        'meta': safe_json('meta'),
        'data': safe_json('data'),
    }


async def get_user_data(pool: asyncpg.Pool, user_id: str) -> Optional[dict]:
    """Получить данные пользователя"""
    async with pool.acquire() as conn:
        row = await conn.fetchrow(
            'SELECT user_id, platform, meta, data FROM users_data WHERE user_id = $1', user_id
        )
    return _row_to_dict(row) if row else None


async def insert_user_data(pool: asyncpg.Pool, record: dict):
    """Добавить пользователя. При конфликте данные перезаписываются."""
    async with pool.acquire() as conn:
        await conn.execute('''
            INSERT INTO users_data (user_id, platform, meta, data)
            VALUES ($1, $2, $3, $4)
            ON CONFLICT (user_id) DO UPDATE
            SET platform = EXCLUDED.platform, meta = EXCLUDED.meta,
                data = EXCLUDED.data, updated_at = NOW()
        ''',
            record['user_id'],
            record.get('platform'),
            json.dumps(record.get('meta'), ensure_ascii=False),
            json.dumps(record.get('data'), ensure_ascii=False),
        )


async def update_user_data(pool: asyncpg.Pool, record: dict) -> bool:
    """Обновить данные пользователя. False если пользователь не найден."""
    async with pool.acquire() as conn:
        result = await conn.execute('''
            UPDATE users_data SET data = $2, meta = $3, updated_at = NOW()
            WHERE user_id = $1
        ''',
            record['user_id'],
            json.dumps(record.get('data'), ensure_ascii=False),
            json.dumps(record.get('meta'), ensure_ascii=False),
        )
    return result != 'UPDATE 0'
