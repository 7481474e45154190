"""
Работа с текстом: поиск фраз и шаблонов, схожесть строк, склонения.

Все функции без состояния, кроме кэша скомпилированных регулярных
выражений. Кэш ограничен REGEX_CACHE_SIZE записями и при переполнении
очищается целиком.
"""

import random
import re
from typing import Optional, Sequence, Union

from config import REGEX_CACHE_SIZE

Pattern = Union[str, re.Pattern]
Patterns = Union[Pattern, Sequence[Pattern]]

REGEX_FLAGS = re.IGNORECASE | re.MULTILINE | re.UNICODE

CONFIRM_PATTERNS = (
    r'(?:^|\s)да(?:\s|$)',
    r'(?:^|\s)конечно(?:\s|$)',
    r'(?:^|\s)соглас\S*(?:\s|$)',
    r'(?:^|\s)подтвер\S*(?:\s|$)',
)

REJECT_PATTERNS = (
    r'(?:^|\s)нет(?:\s|$)',
    r'(?:^|\s)неа(?:\s|$)',
    r'(?:^|\s)не(?:\s|$)',
)

URL_PATTERN = re.compile(r'((http|s://)[^( |\n)]+)', REGEX_FLAGS)

# n % 10 -> индекс формы слова
ENDING_CASES = {1: 0, 2: 1, 3: 1, 4: 1}

_regex_cache: dict[str, re.Pattern] = {}


def get_cached_regex(pattern: str) -> re.Pattern:
    """Компилирует шаблон с кэшированием"""
    regex = _regex_cache.get(pattern)
    if regex is None:
        if len(_regex_cache) >= REGEX_CACHE_SIZE:
            _regex_cache.clear()
        regex = re.compile(pattern, REGEX_FLAGS)
        _regex_cache[pattern] = regex
    return regex


def clear_cache() -> None:
    """Очищает кэш регулярных выражений"""
    _regex_cache.clear()


def cache_size() -> int:
    return len(_regex_cache)


def resize(text: Optional[str], size: int = 950, is_ellipsis: bool = True) -> str:
    """
    Обрезает текст до нужной длины.

    Args:
        text: Исходный текст
        size: Максимальная длина результата
        is_ellipsis: Заменить последние 3 символа на "..."

    Returns:
        Строка длиной не больше size
    """
    if not text:
        return ''
    if len(text) <= size:
        return text
    if not is_ellipsis or size < 3:
        return text[:size]
    return text[:size - 3] + '...'


def is_url(link: str) -> bool:
    """Проверяет, похожа ли строка на ссылку"""
    return bool(link) and URL_PATTERN.search(link) is not None


def _join_patterns(patterns: Sequence[str]) -> str:
    if len(patterns) == 1:
        return patterns[0]
    return '(' + ')|('.join(patterns) + ')'


def is_say_pattern(patterns: Patterns, text: str) -> bool:
    """Проверяет текст на совпадение с одним из шаблонов"""
    if not text:
        return False
    if isinstance(patterns, re.Pattern):
        return patterns.search(text) is not None
    if isinstance(patterns, str):
        patterns = [patterns]

    plain = []
    for pattern in patterns:
        if isinstance(pattern, re.Pattern):
            if pattern.search(text):
                return True
        else:
            plain.append(pattern)

    if not plain:
        return False
    return get_cached_regex(_join_patterns(plain)).search(text) is not None


def is_say_text(find: Patterns, text: str, is_pattern: bool = False) -> bool:
    """
    Проверяет, содержит ли текст искомую фразу.

    Без is_pattern строки ищутся как подстроки (с учётом регистра).
    Скомпилированные шаблоны (re.Pattern) всегда проверяются как регулярные
    выражения, независимо от is_pattern.

    Args:
        find: Фраза, шаблон или список фраз/шаблонов
        text: Текст пользователя
        is_pattern: Интерпретировать строки как регулярные выражения

    Returns:
        True при первом совпадении
    """
    if not text:
        return False
    if is_pattern:
        return is_say_pattern(find, text)
    if isinstance(find, re.Pattern):
        return find.search(text) is not None
    if isinstance(find, str):
        return text == find or find in text

    for value in find:
        if isinstance(value, re.Pattern):
            if value.search(text):
                return True
        elif value in text:
            return True
    return False


def is_say_true(text: str) -> bool:
    """Пользователь согласился (да, конечно, согласен...)"""
    return is_say_pattern(CONFIRM_PATTERNS, text)


def is_say_false(text: str) -> bool:
    """Пользователь отказался (нет, неа, не)"""
    return is_say_pattern(REJECT_PATTERNS, text)


def get_text(value: Union[str, Sequence[str]]) -> str:
    """Возвращает строку или случайный элемент списка"""
    if isinstance(value, str):
        return value
    if not value:
        return ''
    return random.choice(list(value))


def text_replace(key: str, value: Union[str, Sequence[str]], text: str) -> str:
    """Заменяет все вхождения key на value (для списка — случайный элемент на каждую замену)"""
    return re.sub(re.escape(key), lambda _: get_text(value), text)


def get_ending(num: int, titles: Sequence[str], index: Optional[int] = None) -> Optional[str]:
    """
    Выбирает окончание слова для числа.

    Examples:
        get_ending(1, ['яблоко', 'яблока', 'яблок']) -> 'яблоко'
        get_ending(22, ['яблоко', 'яблока', 'яблок']) -> 'яблока'
        get_ending(11, ['яблоко', 'яблока', 'яблок']) -> 'яблок'

    Args:
        num: Число
        titles: Три формы слова (1, 2-4, 5-0)
        index: Принудительно выбрать форму с этим индексом
    """
    if index is not None and 0 <= index < len(titles):
        return titles[index]

    num = abs(num)
    if 11 <= num % 100 <= 19:
        title_index = 2
    else:
        title_index = ENDING_CASES.get(num % 10, 2)
    return titles[title_index] if title_index < len(titles) else None


def _lcs_length(first: str, second: str) -> int:
    if not first or not second:
        return 0
    previous = [0] * (len(second) + 1)
    for char in first:
        current = [0]
        for j, other in enumerate(second):
            if char == other:
                current.append(previous[j] + 1)
            else:
                current.append(max(previous[j + 1], current[j]))
        previous = current
    return previous[-1]


def similar_text(first: str, second: str) -> float:
    """Процент схожести строк: 2 * LCS / (len(a) + len(b)) * 100"""
    total = len(first) + len(second)
    if not total:
        return 0.0
    return _lcs_length(first, second) * 2 / total * 100


def text_similarity(orig_text: str, compare: Union[str, Sequence[str]], threshold: float = 80) -> dict:
    """
    Ищет наиболее похожую строку.

    Args:
        orig_text: Исходная строка
        compare: Строка или список строк для сравнения
        threshold: Порог схожести в процентах

    Returns:
        {'status': bool, 'index': int | None, 'percent': float, 'text': str | None}
    """
    texts = [compare] if isinstance(compare, str) else list(compare)
    normalized = orig_text.lower()

    for index, text in enumerate(texts):
        if text.lower() == normalized:
            return {'status': True, 'index': index, 'percent': 100, 'text': text}

    best = {'status': False, 'index': None, 'percent': 0, 'text': None}
    for index, text in enumerate(texts):
        percent = similar_text(normalized, text.lower())
        if percent > best['percent']:
            best = {
                'status': percent >= threshold,
                'index': index,
                'percent': percent,
                'text': text,
            }
    return best
