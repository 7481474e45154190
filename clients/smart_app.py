"""
Хранилище данных пользователя на стороне SmartApp.
"""

from typing import Any

from config import get_logger
from .request import JsonApiClient, RequestResult

logger = get_logger(__name__)

SMART_APP_DATA_URL = "https://smartapp-code.sberdevices.ru/tools/api/data/"


class SmartAppStorage(JsonApiClient):
    """Удалённое key-value хранилище, ключ — идентификатор пользователя"""

    def __init__(self, base_url: str = SMART_APP_DATA_URL):
        super().__init__(name="SmartApp storage")
        self.base_url = base_url

    async def get(self, user_id) -> Any:
        """Данные пользователя или пустой словарь"""
        result = await self.request(f"{self.base_url}{user_id}", method="GET")
        if result.status and result.data:
            return result.data
        return {}

    async def set(self, user_id, data: Any) -> RequestResult:
        return await self.request(f"{self.base_url}{user_id}", json=data)
