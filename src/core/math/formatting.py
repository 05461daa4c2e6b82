"""
Formatting — текстовое представление матриц

Формат: вложенные строки в квадратных скобках, по одной строке матрицы
на строку текста. Для единичной 2x2:

    [[1, 0],
    [0, 1]]

float печатаются через format(value, "g") — 6 значащих цифр, без
хвостовых нулей; остальные скаляры через str().
"""

from dataclasses import dataclass
from typing import Any, Final


@dataclass(frozen=True)
class PrintConfig:
    """Параметры текстового представления матрицы."""

    float_format: str = "g"
    element_separator: str = ", "
    row_separator: str = ",\n"


DEFAULT_PRINT_CONFIG: Final[PrintConfig] = PrintConfig()


def format_scalar(value: Any, config: PrintConfig = DEFAULT_PRINT_CONFIG) -> str:
    if isinstance(value, float):
        return format(value, config.float_format)
    return str(value)


def format_matrix(matrix: Any, config: PrintConfig = DEFAULT_PRINT_CONFIG) -> str:
    """
    Представление матрицы в виде `[[a, b],\\n[c, d]]`.

    Args:
        matrix: объект с методом to_rows() (row-major вложенные списки)
        config: параметры форматирования

    Returns:
        Строка без завершающего перевода строки
    """
    rows = [
        "[" + config.element_separator.join(format_scalar(v, config) for v in row) + "]"
        for row in matrix.to_rows()
    ]
    return "[" + config.row_separator.join(rows) + "]"
