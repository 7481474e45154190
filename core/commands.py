"""
Таблица команд.

Упорядоченный реестр "имя команды -> фразы/шаблоны + обработчик".
Команды проверяются в порядке регистрации, побеждает первая совпавшая.
Стратегию поиска можно заменить своей функцией (set_resolver).

Использование:
    table = CommandTable()
    table.add("greeting", ["привет", "здравствуй"], cb=say_hello)
    table.add("code", [r"\\b\\d{3}\\b"], is_pattern=True)

    name = table.resolve("код 482 принят")  # -> "code"
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional, Sequence, Union

from config import get_logger
from core.text import is_say_text

logger = get_logger(__name__)

Slot = Union[str, re.Pattern]
CommandCallback = Callable[[str, object], Optional[str]]
Resolver = Callable[[str, "CommandTable"], Optional[str]]

# Конструкции, дающие экспоненциальный перебор (вложенные квантификаторы)
DANGEROUS_PATTERNS = (
    re.compile(r'\((?:[^()]*[+*])\)[+*{]'),
    re.compile(r'\[[^\]]*\+\]'),
    re.compile(r'(\w\+|\w\*){3,}'),
)


class UnsafePatternError(ValueError):
    """Шаблон команды может привести к ReDoS."""
    pass


class InvalidPatternError(ValueError):
    """Шаблон команды не компилируется."""
    pass


@dataclass
class Command:
    """Запись таблицы команд"""
    name: str
    slots: list = field(default_factory=list)
    is_pattern: bool = False
    cb: Optional[CommandCallback] = None

    def matches(self, text: str) -> bool:
        return is_say_text(self.slots, text, self.is_pattern)


def find_unsafe_patterns(slots: Sequence[Slot], is_pattern: bool = False) -> list[str]:
    """
    Возвращает шаблоны, похожие на ReDoS-опасные.

    Строки проверяются только когда is_pattern=True, скомпилированные
    шаблоны проверяются всегда.
    """
    unsafe = []
    for slot in slots:
        if isinstance(slot, re.Pattern):
            source = slot.pattern
        elif is_pattern:
            source = slot
        else:
            continue
        if any(danger.search(source) for danger in DANGEROUS_PATTERNS):
            unsafe.append(source)
    return unsafe


def default_resolver(user_command: str, table: "CommandTable") -> Optional[str]:
    """Линейный поиск в порядке регистрации"""
    for command in table:
        if command.matches(user_command):
            return command.name
    return None


class CommandTable:
    """
    Реестр команд.

    Одна таблица живёт всё время работы процесса и читается на каждом
    запросе. Блокировок нет: гонка add/resolve допустима.
    """

    def __init__(self, strict_patterns: bool = False, log: logging.Logger = None):
        """
        Args:
            strict_patterns: Отклонять опасные шаблоны вместо предупреждения
            log: Логгер для предупреждений
        """
        self._commands: dict[str, Command] = {}
        self._resolver: Optional[Resolver] = None
        self.strict_patterns = strict_patterns
        self.logger = log or logger

    def add(
        self,
        name: str,
        slots: Sequence[Slot],
        cb: Optional[CommandCallback] = None,
        is_pattern: bool = False
    ) -> Command:
        """
        Регистрирует (или перезаписывает) команду.

        Args:
            name: Имя команды
            slots: Фразы или шаблоны
            cb: Обработчик (user_command, controller) -> str | None
            is_pattern: Интерпретировать строки как регулярные выражения

        Raises:
            InvalidPatternError: Строковый шаблон не компилируется
            UnsafePatternError: Только при strict_patterns=True
        """
        slots = list(slots)
        if is_pattern:
            for slot in slots:
                if isinstance(slot, re.Pattern):
                    continue
                try:
                    re.compile(slot, re.IGNORECASE)
                except re.error as e:
                    raise InvalidPatternError(f"Команда {name}: некорректный шаблон {slot!r}: {e}") from e

        unsafe = find_unsafe_patterns(slots, is_pattern)
        if unsafe:
            message = (
                "Найдены небезопасные регулярные выражения, проверьте их корректность: "
                + ", ".join(unsafe)
            )
            if self.strict_patterns:
                raise UnsafePatternError(message)
            self.logger.warning(message)

        command = Command(name=name, slots=slots, is_pattern=is_pattern, cb=cb)
        self._commands[name] = command
        return command

    def remove(self, name: str) -> None:
        self._commands.pop(name, None)

    def clear(self) -> None:
        self._commands.clear()

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(name)

    def set_resolver(self, resolver: Optional[Resolver]) -> None:
        """Устанавливает свою стратегию поиска. None возвращает стандартную."""
        self._resolver = resolver

    @property
    def resolver(self) -> Resolver:
        return self._resolver or default_resolver

    def resolve(self, user_command: str) -> Optional[str]:
        """Возвращает имя команды для текста пользователя или None"""
        if self._resolver:
            return self._resolver(user_command, self)
        if not user_command:
            return None
        return default_resolver(user_command, self)

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self._commands.values()))

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: str) -> bool:
        return name in self._commands
