"""
Модели базы данных (SQL схемы).
"""

import asyncpg
from config import get_logger

logger = get_logger(__name__)


async def create_tables(pool: asyncpg.Pool):
    """Создание таблиц"""
    async with pool.acquire() as conn:
        # Данные пользователей навыка/бота
        await conn.execute('''
            CREATE TABLE IF NOT EXISTS users_data (
                user_id TEXT PRIMARY KEY,
                platform TEXT DEFAULT NULL,
                meta TEXT DEFAULT '{}',
                data TEXT DEFAULT '{}',
                created_at TIMESTAMP DEFAULT NOW(),
                updated_at TIMESTAMP DEFAULT NOW()
            )
        ''')

        await conn.execute('CREATE INDEX IF NOT EXISTS idx_users_data_platform ON users_data(platform)')

    logger.info("✅ Таблицы созданы")
