"""
Клиент VK API (сообщения сообщества).
"""

import json
import random
from typing import Optional

from config import get_logger
from .request import JsonApiClient, RequestResult

logger = get_logger(__name__)

VK_API_URL = "https://api.vk.com/method/"


class VkClient(JsonApiClient):
    """Клиент для методов messages.send и users.get"""

    def __init__(self, token: Optional[str], api_version: str = "5.131"):
        super().__init__(name="VK")
        self.token = token
        self.api_version = api_version

    async def call(self, method: str, params: dict) -> RequestResult:
        if not self.token:
            logger.error("VK token is not set")
            return RequestResult(False, err="VK token is not set")

        body = {**params, "access_token": self.token, "v": self.api_version}
        result = await self.request(VK_API_URL + method, data=body)
        if result.status and isinstance(result.data, dict) and "error" in result.data:
            error = result.data["error"]
            logger.error(f"VK {method} error: {error}")
            return RequestResult(False, result.data, str(error))
        if result.status:
            result.data = result.data.get("response")
        return result

    async def users_get(self, user_id) -> Optional[dict]:
        """Профиль пользователя (first_name, last_name) или None"""
        result = await self.call("users.get", {"user_ids": user_id})
        if result.status and result.data:
            return result.data[0]
        return None

    async def messages_send(
        self,
        peer_id,
        message: str,
        keyboard: Optional[dict] = None,
        attachments: Optional[list] = None,
        template: Optional[dict] = None
    ) -> RequestResult:
        """Отправляет сообщение пользователю"""
        params = {
            "peer_id": peer_id,
            "message": message,
            "random_id": random.randint(1, 2_147_483_647),
        }
        if keyboard:
            params["keyboard"] = json.dumps(keyboard, ensure_ascii=False)
        if attachments:
            params["attachment"] = ",".join(attachments)
        if template:
            params["template"] = json.dumps(template, ensure_ascii=False)
        return await self.call("messages.send", params)
