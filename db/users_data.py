"""
UsersData — данные пользователя между запросами.

Обёртка над хранилищем (db/stores.py) с контрактом, который использует
диспетчер:
    where_one(query) -> bool   (при успехе заполняет data/meta)
    save(is_new) -> bool
    update() -> bool
    escape_string(value) -> str

Ошибки хранилища логируются и превращаются в False, наружу не
пробрасываются.
"""

from typing import Any, Optional

from config import get_logger

logger = get_logger(__name__)

_ESCAPE = {
    "\\": "\\\\",
    "\x00": "\\0",
    "\n": "\\n",
    "\r": "\\r",
    "'": "\\'",
    '"': '\\"',
    "\x1a": "\\Z",
}


class UsersData:
    """Запись пользователя: идентификатор, мета-информация, данные"""

    def __init__(self, store, platform: Optional[str] = None):
        """
        Args:
            store: Хранилище (MemoryStore, JsonFileStore, PostgresStore)
            platform: Платформа, с которой пришёл пользователь
        """
        self.store = store
        self.platform = platform
        self.user_id: Optional[str] = None
        self.meta: Any = None
        self.data: Any = None

    @staticmethod
    def escape_string(value: Any) -> str:
        """Экранирует значение, используемое как ключ поиска"""
        return "".join(_ESCAPE.get(char, char) for char in str(value))

    def _record(self) -> dict:
        return {
            "user_id": self.user_id,
            "platform": self.platform,
            "meta": self.meta,
            "data": self.data,
        }

    async def where_one(self, query: dict) -> bool:
        """
        Ищет пользователя.

        Args:
            query: {"user_id": ...}

        Returns:
            True если пользователь найден (data и meta заполнены)
        """
        user_id = query.get("user_id")
        if user_id is None:
            return False
        try:
            record = await self.store.get(str(user_id))
        except Exception as e:
            logger.error(f"Failed to load user data for {user_id}: {e}")
            return False

        if not record:
            return False
        self.user_id = record.get("user_id", str(user_id))
        self.meta = record.get("meta")
        self.data = record.get("data")
        return True

    async def save(self, is_new: bool = False) -> bool:
        """Сохраняет пользователя. is_new=False ведёт себя как update()."""
        if not is_new:
            return await self.update()
        if self.user_id is None:
            logger.error("Cannot save user data: user has no id")
            return False
        try:
            await self.store.insert(self._record())
            return True
        except Exception as e:
            logger.error(f"Failed to save user data for {self.user_id}: {e}")
            return False

    async def update(self) -> bool:
        if self.user_id is None:
            logger.error("Cannot update user data: user has no id")
            return False
        try:
            return bool(await self.store.update(self._record()))
        except Exception as e:
            logger.error(f"Failed to update user data for {self.user_id}: {e}")
            return False
