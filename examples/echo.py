"""
Пример приложения: повторяет за пользователем.

Показывает команды с обработчиками, шаблонные команды, кнопки,
данные пользователя между запросами и завершение диалога.

Запуск в консоли:
    python cli.py examples.echo:EchoController

Запуск webhook сервера:
    BOT_CONTROLLER=examples.echo:EchoController python bot.py
"""

from core.controller import BotController
from core.text import get_ending, is_say_false, is_say_true


def register_commands(context) -> None:
    """Команды примера"""
    context.add_command("bye", ["пока", "до свидания"], cb=say_bye)
    context.add_command("number", [r"\b\d+\b"], is_pattern=True)


def say_bye(user_command: str, controller) -> str:
    controller.is_end = True
    return "До встречи!"


class EchoController(BotController):
    """Повторяет фразы и считает их"""

    def action(self, intent_name, is_command=False):
        count = self.user_data.get("count", 0) if isinstance(self.user_data, dict) else 0

        if intent_name == "bye":
            return
        if intent_name == "welcome":
            self.buttons.add_btn("Помощь")
            return
        if intent_name == "help":
            self.text = "Скажите что-нибудь, и я повторю. Для выхода скажите «пока»."
            return
        if intent_name == "number":
            numbers = [int(word) for word in self.user_command.split() if word.isdigit()]
            self.text = f"Вы назвали {len(numbers)} {get_ending(len(numbers), ['число', 'числа', 'чисел'])}"
            return

        if is_say_true(self.user_command or ""):
            self.text = "Хорошо, согласен."
        elif is_say_false(self.user_command or ""):
            self.text = "Жаль."
        else:
            count += 1
            self.text = f"{self.original_user_command} ({count})"
            self.user_data["count"] = count
        self.buttons.add_btn("Пока")
