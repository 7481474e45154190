"""
Цепочка middleware.

Middleware — функция (controller, next_) -> None или корутина.
Сначала выполняются глобальные middleware, затем middleware платформы,
в порядке регистрации. Обработчик запускается в конце цепочки, только если
каждое звено вызвало next_(). Исключение в middleware логируется,
и цепочка продолжается со следующего звена.

Использование:
    chain = MiddlewareChain()

    async def auth_guard(controller, next_):
        if controller.user_token is None:
            controller.text = "Нужна авторизация"
            return
        await next_()

    chain.use(auth_guard)
    chain.use(log_request, platform=Platform.TELEGRAM)
"""

import inspect
import logging
from typing import Awaitable, Callable, Optional

from config import get_logger

logger = get_logger(__name__)

Next = Callable[[], Awaitable[None]]
Middleware = Callable[[object, Next], Optional[Awaitable[None]]]


class MiddlewareChain:
    """Глобальные и платформенные middleware"""

    def __init__(self, log: logging.Logger = None):
        self._global: list[Middleware] = []
        self._platform: dict[str, list[Middleware]] = {}
        self.logger = log or logger

    def use(self, middleware: Middleware, platform: Optional[str] = None) -> None:
        """
        Регистрирует middleware.

        Args:
            middleware: Функция или корутина (controller, next_)
            platform: Платформа. None — для всех платформ
        """
        if platform is None:
            self._global.append(middleware)
        else:
            self._platform.setdefault(platform, []).append(middleware)

    def for_platform(self, platform: Optional[str]) -> list[Middleware]:
        return self._global + self._platform.get(platform, [])

    def __len__(self) -> int:
        return len(self._global) + sum(len(items) for items in self._platform.values())

    async def run(self, controller, platform: Optional[str], handler: Callable[[], Awaitable[None]]) -> bool:
        """
        Прогоняет цепочку и обработчик.

        Returns:
            True если обработчик был вызван

        Raises:
            Исключение обработчика (не middleware)
        """
        chain = self.for_platform(platform)
        handled = False
        handler_error: Optional[BaseException] = None

        async def dispatch(index: int) -> None:
            nonlocal handled, handler_error
            if index == len(chain):
                try:
                    await handler()
                except Exception as e:
                    handler_error = e
                handled = True
                return

            middleware = chain[index]
            called = False

            async def next_() -> None:
                nonlocal called
                if called:
                    return
                called = True
                await dispatch(index + 1)

            try:
                result = middleware(controller, next_)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                name = getattr(middleware, "__name__", repr(middleware))
                self.logger.error(f"Middleware {name} failed: {e}")
                if not called:
                    await next_()

        await dispatch(0)
        if handler_error is not None:
            raise handler_error
        return handled
