"""
Базовый HTTP клиент для API платформ.

Все вызовы возвращают RequestResult и никогда не бросают исключений:
ошибки логируются и попадают в поле err.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

import aiohttp

from config import get_logger

logger = get_logger(__name__)


@dataclass
class RequestResult:
    """Результат запроса к API"""
    status: bool
    data: Any = None
    err: Optional[str] = None


class JsonApiClient:
    """Клиент JSON API на aiohttp"""

    def __init__(self, name: str = "API", timeout: int = 30):
        """
        Args:
            name: Имя клиента для логов
            timeout: Таймаут запроса в секундах
        """
        self.name = name
        self.timeout = timeout

    async def request(
        self,
        url: str,
        method: str = "POST",
        json: Any = None,
        data: Any = None,
        params: Optional[dict] = None,
        headers: Optional[dict] = None
    ) -> RequestResult:
        """Выполняет запрос и разбирает JSON ответа"""
        try:
            async with aiohttp.ClientSession() as session:
                async with session.request(
                    method,
                    url,
                    json=json,
                    data=data,
                    params=params,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as resp:
                    if resp.status == 200:
                        return RequestResult(True, await resp.json(content_type=None))
                    error = await resp.text()
                    logger.error(f"{self.name} HTTP error {resp.status}: {error}")
                    return RequestResult(False, err=f"HTTP {resp.status}: {error}")
        except asyncio.TimeoutError:
            logger.error(f"{self.name} request timeout")
            return RequestResult(False, err="timeout")
        except Exception as e:
            logger.error(f"{self.name} exception: {e}")
            return RequestResult(False, err=str(e))
