"""
Ядро SDK.

Содержит:
- text.py: сравнение текста, шаблоны, склонение, обрезка
- commands.py: CommandTable — таблица команд и поиск команды
- context.py: AppContext — конфигурация, команды, хранилище приложения
- controller.py: BotController — состояние запроса и логика приложения
- middleware.py: MiddlewareChain — цепочка middleware
- detection.py: определение платформы по запросу
- bot.py: Bot — диспетчер запросов

Контекст, контроллер и диспетчер импортируются из своих модулей
(core.context, core.controller, core.bot): они зависят от components.
"""

from .commands import (
    Command,
    CommandTable,
    UnsafePatternError,
    find_unsafe_patterns,
)

from .text import (
    is_say_text,
    is_say_true,
    is_say_false,
    text_similarity,
    get_ending,
    get_text,
    resize,
)

__all__ = [
    # commands
    'Command',
    'CommandTable',
    'UnsafePatternError',
    'find_unsafe_patterns',
    # text
    'is_say_text',
    'is_say_true',
    'is_say_false',
    'text_similarity',
    'get_ending',
    'get_text',
    'resize',
]
