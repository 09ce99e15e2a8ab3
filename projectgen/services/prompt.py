from __future__ import annotations
from typing import List

from projectgen.schemas import ProjectRequest

SIMPLE_STYLE = """Уровень сложности: ПРОСТОЙ.
- Пиши максимально простым языком.
- Используй короткие предложения.
- Объясняй термины простыми словами.
- Не используй сложные научные формулировки."""

MEDIUM_STYLE = """Уровень сложности: СРЕДНИЙ.
- Пиши обычным школьным языком.
- Используй термины, но кратко объясняй их.
- Предложения средней длины."""

ACADEMIC_STYLE = """Уровень сложности: ВЫСОКИЙ.
- Используй академический стиль.
- Применяй научные формулировки.
- Допускаются сложные предложения."""

def difficulty_instruction(level: int) -> str:
    if level <= 2:
        return SIMPLE_STYLE
    if level == 3:
        return MEDIUM_STYLE
    return ACADEMIC_STYLE

def outline(req: ProjectRequest) -> List[str]:
    intro = ["### 1. Актуальность", "### 2. Проблема исследования", "### 3. Цель работы", "### 4. Задачи исследования"]
    if req.has_hypothesis:
        intro.append("### 5. Гипотеза")
    lines = [f"# {req.topic}", "", "## Введение", "", *intro, "",
             "## Глава 1. Теоретическая часть", "",
             "### 1.1 Основные понятия", "### 1.2 Научное объяснение", "### 1.3 Анализ теории", ""]
    if req.has_practical:
        lines += ["## Глава 2. Практическая часть", "",
                  "### 2.1 Цель опыта", "### 2.2 Оборудование", "### 2.3 Ход работы",
                  "### 2.4 Результаты", "### 2.5 Вывод", ""]
    lines += ["## Заключение", "", "## Список литературы"]
    return lines

def build_prompt(req: ProjectRequest) -> str:
    """Assemble the single user message sent to the text-generation service."""
    parts = [
        "Напиши полноценный школьный исследовательский проект",
        f'по предмету "{req.subject}"',
        f'на тему "{req.topic}"',
        f"для ученика {req.grade} класса.",
        "",
        difficulty_instruction(req.difficulty),
        "",
        "Это должен быть готовый проект.",
        "Это НЕ инструкция.",
        "Это НЕ пример оформления.",
        "Это полноценный текст работы.",
        "",
        "Строгая структура:",
        "",
        *outline(req),
        "",
        "Требования:",
        "- Пиши связный текст.",
        "- Не вставляй инструкции.",
        "- Не объясняй как оформлять работу.",
        '- Не пиши "пример".',
        f"- Объём работы: примерно {max(1, req.page_count)} страниц А4.",
        f"- В списке литературы укажи {max(1, req.source_count)} реальных источников.",
        "- Список литературы оформи нумерованным списком.",
    ]
    return "\n".join(parts) + "\n"
