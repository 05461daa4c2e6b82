"""
Vector2d — двумерный вектор-столбец Matrix[float, 2, 1]

Только именованные accessors x/y поверх data[0]/data[1]; собственного
хранения и собственных алгоритмов нет, все операции унаследованы от Matrix.
"""

from typing import Any

from src.core.math.matrix import Matrix


class Vector2d(Matrix[float, 2, 1]):
    """
    Вектор (x, y).

    Конструирование:
        Vector2d()            — (0.0, 0.0)
        Vector2d(x, y)        — из двух скаляров
        Vector2d(matrix)      — из любой матрицы формы 2x1
        Vector2d(NO_INIT)     — без инициализации

    Examples:
        >>> v = Vector2d(3, 4)
        >>> v.x, v.y, v.norm()
        (3.0, 4.0, 5.0)
    """

    __slots__ = ()

    def __init__(self, x: Any = None, y: Any = None) -> None:
        if y is None:
            super().__init__(x)
        else:
            super().__init__((x, y))

    @property
    def x(self) -> float:
        return self.data[0]

    @x.setter
    def x(self, value: float) -> None:
        self.data[0] = value

    @property
    def y(self) -> float:
        return self.data[1]

    @y.setter
    def y(self, value: float) -> None:
        self.data[1] = value
