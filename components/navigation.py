"""
Постраничная навигация по списку голосом.

Пользователь листает список фразами «дальше» / «назад» или называет
страницу («2 страница»), а элемент выбирает номером на текущей странице
или названием (нечёткое сравнение через text_similarity).

Страницы в this_page считаются с нуля, пользователю показываются с единицы.

Использование:
    navigation = Navigation(max_visible_elements=3)
    items = navigation.get_page_elements(cities, controller.user_command)
    choice = navigation.selected_element(cities, controller.user_command, keys="name")
    for title in navigation.get_page_nav():
        controller.buttons.add_btn(title)
"""

import math
import re
from typing import Any, Optional, Sequence, Union

from core.text import is_say_text, text_similarity

STANDARD_NEXT_TEXT = ['дальше', 'вперед']
STANDARD_OLD_TEXT = ['назад']

PAGE_PATTERN = re.compile(r'(-?\d+) страни', re.IGNORECASE)
NUMBER_PATTERN = re.compile(r'\d+')

# Порог схожести названия элемента, %
SELECT_THRESHOLD = 75
# Схожесть, при которой поиск останавливается сразу
SELECT_EXACT_PERCENT = 90

Keys = Union[str, Sequence[str], None]


class Navigation:
    """Навигация по страницам списка"""

    def __init__(self, max_visible_elements: int = 5):
        """
        Args:
            max_visible_elements: Количество элементов на странице
        """
        self.is_used_standard_text = True
        self.next_text: list[str] = []
        self.old_text: list[str] = []
        self.elements: list = []
        self.max_visible_elements = max_visible_elements
        self.this_page = 0

    # ============= КОМАНДЫ =============

    def _phrases(self, custom: list[str], standard: list[str]) -> list[str]:
        if self.is_used_standard_text:
            return custom + standard
        return custom

    def is_next(self, text: str) -> bool:
        """Пользователь хочет на следующую страницу"""
        return is_say_text(self._phrases(self.next_text, STANDARD_NEXT_TEXT), text)

    def is_old(self, text: str) -> bool:
        """Пользователь хочет на предыдущую страницу"""
        return is_say_text(self._phrases(self.old_text, STANDARD_OLD_TEXT), text)

    def _validate_page(self, max_page: Optional[int] = None) -> None:
        if max_page is None:
            max_page = self.get_max_page()
        if self.this_page >= max_page:
            self.this_page = max_page - 1
        if self.this_page < 0:
            self.this_page = 0

    def number_page(self, text: str) -> bool:
        """
        Переход на страницу, названную в тексте («покажи 2 страницу»).

        Returns:
            True если номер страницы найден
        """
        match = PAGE_PATTERN.search(text or '')
        if not match:
            return False
        self.this_page = int(match.group(1)) - 1
        self._validate_page()
        return True

    def _next_page(self, text: str) -> bool:
        if not self.is_next(text):
            return False
        self.this_page += 1
        self._validate_page()
        return True

    def _old_page(self, text: str) -> bool:
        if not self.is_old(text):
            return False
        self.this_page -= 1
        self._validate_page()
        return True

    # ============= ЭЛЕМЕНТЫ =============

    def _page_slice(self) -> list:
        start = self.this_page * self.max_visible_elements
        return self.elements[start:start + self.max_visible_elements]

    def get_page_elements(self, elements: Optional[list] = None, text: str = '') -> list:
        """
        Элементы текущей страницы после обработки команд «дальше» / «назад».

        Args:
            elements: Новый список элементов (None: оставить прежний)
            text: Запрос пользователя
        """
        if elements:
            self.elements = list(elements)
        self._next_page(text)
        self._old_page(text)
        return self._page_slice()

    @staticmethod
    def _values(element: Any, keys: Keys) -> list[str]:
        """Строки элемента, с которыми сравнивается запрос"""
        if keys is None or isinstance(element, str):
            return [str(element)]
        if not isinstance(element, dict):
            return []
        if isinstance(keys, str):
            keys = [keys]
        return [str(element[key]) for key in keys if element.get(key)]

    def selected_element(
        self,
        elements: Optional[list] = None,
        text: str = '',
        keys: Keys = None,
        this_page: Optional[int] = None
    ) -> Any:
        """
        Выбирает элемент текущей страницы по номеру или по названию.

        Номер считается от начала страницы с единицы. Без номера выбирается
        элемент с наибольшей схожестью не ниже 75%.

        Args:
            elements: Новый список элементов (None: оставить прежний)
            text: Запрос пользователя
            keys: Поля словаря, по которым ищется название
            this_page: Страница, на которой выбирается элемент

        Returns:
            Элемент или None
        """
        if this_page is not None:
            self.this_page = this_page
        if elements:
            self.elements = list(elements)

        match = NUMBER_PATTERN.search(text or '')
        number = int(match.group(0)) if match else None

        selected = None
        max_percent = 0
        for index, element in enumerate(self._page_slice(), start=1):
            if index == number:
                return element
            for value in self._values(element, keys):
                result = text_similarity(value, text, SELECT_THRESHOLD)
                if result['status'] and result['percent'] > max_percent:
                    selected = element
                    max_percent = result['percent']
            if max_percent > SELECT_EXACT_PERCENT:
                return selected
        return selected

    # ============= ОТОБРАЖЕНИЕ =============

    def get_page_nav(self, is_number: bool = False) -> list[str]:
        """
        Подписи кнопок навигации.

        Args:
            is_number: Номера страниц вместо «Назад» / «Дальше».
                Текущая страница в квадратных скобках, показывается до пяти
                номеров начиная с двух страниц перед текущей.
        """
        max_page = self.get_max_page()
        self._validate_page(max_page)
        buttons = []
        if not is_number:
            if self.this_page:
                buttons.append('👈 Назад')
            if self.this_page + 1 < max_page:
                buttons.append('Дальше 👉')
            return buttons

        start = max(self.this_page - 2, 0)
        if start == 1:
            buttons.append('1')
        elif start:
            buttons.append('1 ...')

        for count, page in enumerate(range(start, max_page), start=1):
            buttons.append(f'[{page + 1}]' if page == self.this_page else f'{page + 1}')
            if count > 4:
                if page == max_page - 2:
                    buttons.append(f'{max_page}')
                elif page < max_page - 2:
                    buttons.append(f'... {max_page}')
                break
        return buttons

    def get_page_info(self) -> str:
        """Строка «N страница из M». Пустая, если страница одна."""
        if self.this_page < 0 or self.this_page * self.max_visible_elements >= len(self.elements):
            self.this_page = 0
        max_page = self.get_max_page()
        if max_page <= 1:
            return ''
        return f'{self.this_page + 1} страница из {max_page}'

    def get_max_page(self, elements: Optional[list] = None) -> int:
        """Количество страниц"""
        if elements:
            self.elements = list(elements)
        return math.ceil(len(self.elements) / self.max_visible_elements)
