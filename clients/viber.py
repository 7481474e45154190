"""
Клиент Viber REST API.
"""

from typing import Optional

from config import get_logger
from .request import JsonApiClient, RequestResult

logger = get_logger(__name__)

VIBER_API_URL = "https://chatapi.viber.com/pa/"


class ViberClient(JsonApiClient):
    """Отправка текстовых сообщений и rich media"""

    def __init__(self, token: Optional[str], sender: Optional[str] = None, api_version: int = 2):
        super().__init__(name="Viber")
        self.token = token
        self.sender = sender
        self.api_version = api_version

    async def call(self, method: str, body: dict) -> RequestResult:
        if not self.token:
            logger.error("Viber token is not set")
            return RequestResult(False, err="Viber token is not set")

        result = await self.request(
            VIBER_API_URL + method,
            json=body,
            headers={"X-Viber-Auth-Token": self.token}
        )
        if result.status and isinstance(result.data, dict) and result.data.get("status", 0) != 0:
            message = result.data.get("status_message", "unknown error")
            logger.error(f"Viber {method} error: {message}")
            return RequestResult(False, result.data, message)
        return result

    def _base(self, receiver) -> dict:
        return {
            "receiver": receiver,
            "sender": {"name": self.sender or ""},
            "min_api_version": self.api_version,
        }

    async def send_message(self, receiver, text: str, keyboard: Optional[dict] = None) -> RequestResult:
        body = {**self._base(receiver), "type": "text", "text": text}
        if keyboard:
            body["keyboard"] = keyboard
        return await self.call("send_message", body)

    async def rich_media(self, receiver, buttons: list, columns: int = 6, rows: int = 7) -> RequestResult:
        body = {
            **self._base(receiver),
            "type": "rich_media",
            "rich_media": {
                "Type": "rich_media",
                "ButtonsGroupColumns": columns,
                "ButtonsGroupRows": rows,
                "BgColor": "#FFFFFF",
                "Buttons": buttons,
            },
        }
        return await self.call("send_message", body)
