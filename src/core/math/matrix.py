"""
Matrix — плотная матрица фиксированной формы

Форма (Rows, Cols) является частью типа: Matrix[float, 2, 2] и
Matrix[float, 3, 1] — разные классы, неявно друг в друга не конвертируются.
Каждый класс Matrix[T, Rows, Cols] наследуется от shape-класса
Matrix.shape_type(Rows, Cols), по которому диспетчеризуется inverse().

Хранение:
- data: list ровно из Rows * Cols элементов скалярного типа T
- column-major: элемент (i, j) лежит по смещению j * Rows + i
- список при конструировании задаётся в row-major (человекочитаемом) порядке

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. len(data) == Rows * Cols всегда
2. Value semantics: любой оператор возвращает новый экземпляр,
   исходные матрицы меняют только in-place формы (+=, -=, *=, /=)
3. Сравнение точное, без epsilon
4. Обращение без tolerance: det == 0 → SingularMatrixError
"""

import copy
import logging
import math
import sys
from decimal import Decimal
from functools import lru_cache, singledispatch
from typing import Any, Final, Iterator, List, Optional, TextIO, Tuple

from src.core.math.formatting import DEFAULT_PRINT_CONFIG, PrintConfig, format_matrix

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class MatrixShapeError(ValueError):
    """
    Нарушение precondition по форме.

    Возникает при:
    - длине списка != Rows * Cols
    - identity()/inverse() для неквадратной матрицы
    - extend()/project() для матрицы с Cols != 1
    - несовпадении формы при чтении payload
    """


class SingularMatrixError(ArithmeticError):
    """Определитель равен нулю, обратной матрицы не существует."""


class InverseNotImplementedError(NotImplementedError):
    """
    Обращение запрошено для квадратного размера без closed-form алгоритма.

    Поддерживаются только 1x1, 2x2, 3x3 и 4x4.
    """


# =============================================================================
# NO_INIT
# =============================================================================


class _NoInit:
    """Маркер конструктора без заполнения нулями."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NO_INIT"


# Matrix[T, R, C](NO_INIT): буфер нужной длины заполнен None,
# вызывающий код обязан записать каждый элемент до чтения
NO_INIT: Final = _NoInit()


# =============================================================================
# SHAPE TYPES
# =============================================================================


def _check_dimension(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise TypeError(f"{name} must be a positive int, got {value!r}")
    return value


@lru_cache(maxsize=None)
def _shape_type(rows: int, cols: int) -> type:
    return type(
        f"Matrix{rows}x{cols}",
        (Matrix,),
        {"__slots__": (), "__module__": __name__, "ROWS": rows, "COLS": cols},
    )


@lru_cache(maxsize=None)
def _matrix_type(scalar: type, rows: int, cols: int) -> type:
    return type(
        f"Matrix[{scalar.__name__}, {rows}, {cols}]",
        (_shape_type(rows, cols),),
        {"__slots__": (), "__module__": __name__, "SCALAR": scalar},
    )


def _restore(scalar: type, rows: int, cols: int, data: List[Any]) -> "Matrix":
    """Восстановление из pickle: классы Matrix[T, R, C] создаются динамически."""
    return _matrix_type(scalar, rows, cols)._from_data(data)


# =============================================================================
# MATRIX
# =============================================================================


class Matrix:
    """
    Плотная матрица Rows x Cols над скалярным типом T.

    Конкретный класс получается параметризацией: Matrix[float, 3, 3].
    Параметризация кэшируется, одинаковые параметры дают один и тот же класс.

    Конструирование:
        Matrix[T, R, C]()              — все элементы T(0)
        Matrix[T, R, C](NO_INIT)       — без инициализации (None)
        Matrix[T, R, C]([...])         — R * C значений в row-major порядке
        Matrix[T, R, C](other)         — поэлементное T(v) из матрицы той же формы

    Доступ:
        m[i, j]  — элемент (i, j)
        m[k]     — k-й элемент column-major буфера

    Границы индексов проверяются только assert'ами (снимаются при python -O).

    Examples:
        >>> a = Matrix[float, 2, 2]([1, 2, 3, 4])
        >>> a[0, 1], a[1, 0]
        (2.0, 3.0)
        >>> a.data
        [1.0, 3.0, 2.0, 4.0]
    """

    __slots__ = ("data",)

    ROWS: int = 0
    COLS: int = 0
    SCALAR: Optional[type] = None

    def __class_getitem__(cls, params: Any) -> type:
        if not isinstance(params, tuple) or len(params) != 3:
            raise TypeError("Matrix expects three parameters: Matrix[T, Rows, Cols]")
        scalar, rows, cols = params
        if not isinstance(scalar, type):
            raise TypeError(f"scalar type must be a type, got {scalar!r}")
        return _matrix_type(
            scalar, _check_dimension("Rows", rows), _check_dimension("Cols", cols)
        )

    @staticmethod
    def shape_type(rows: int, cols: int) -> type:
        """Shape-класс, общий для всех скалярных типов данной формы."""
        return _shape_type(_check_dimension("Rows", rows), _check_dimension("Cols", cols))

    def __init__(self, values: Any = None) -> None:
        cls = type(self)
        if cls.SCALAR is None:
            raise TypeError(
                f"{cls.__name__} has no scalar type, use Matrix[T, Rows, Cols]"
            )
        rows, cols = cls.ROWS, cls.COLS
        size = rows * cols

        if values is None:
            self.data: List[Any] = [cls.SCALAR(0)] * size
        elif values is NO_INIT:
            self.data = [None] * size
        elif isinstance(values, Matrix):
            if values.ROWS != rows or values.COLS != cols:
                raise TypeError(f"cannot convert {type(values).__name__} to {cls.__name__}")
            scalar = cls.SCALAR
            self.data = [scalar(v) for v in values.data]
        else:
            items = list(values)
            if len(items) != size:
                raise MatrixShapeError(
                    f"list size {len(items)} != Rows * Cols = {size} for {cls.__name__}"
                )
            scalar = cls.SCALAR
            data: List[Any] = [None] * size
            # row-major вход → column-major хранение
            for k, value in enumerate(items):
                i, j = divmod(k, cols)
                data[j * rows + i] = scalar(value)
            self.data = data

    @classmethod
    def _from_data(cls, data: List[Any]) -> "Matrix":
        """Обёртка над готовым column-major буфером без копирования."""
        obj = object.__new__(cls)
        obj.data = data
        return obj

    @classmethod
    def identity(cls) -> "Matrix":
        """
        Единичная матрица.

        Raises:
            MatrixShapeError: если Rows != Cols
        """
        if cls.ROWS != cls.COLS:
            raise MatrixShapeError(f"Rows != Cols for {cls.__name__}")
        res = cls()
        one = cls.SCALAR(1)
        for i in range(cls.ROWS):
            res.data[i * cls.ROWS + i] = one
        return res

    # -------------------------------------------------------------------------
    # Raw buffer
    # -------------------------------------------------------------------------

    def get_data(self) -> List[Any]:
        """Живой column-major буфер (не копия)."""
        return self.data

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.ROWS, self.COLS)

    def size(self) -> int:
        return self.ROWS * self.COLS

    def __len__(self) -> int:
        return self.ROWS * self.COLS

    def __iter__(self) -> Iterator[Any]:
        return iter(self.data)

    def to_rows(self) -> List[List[Any]]:
        """Вложенные списки строк (row-major)."""
        rows, cols, data = self.ROWS, self.COLS, self.data
        return [[data[j * rows + i] for j in range(cols)] for i in range(rows)]

    # -------------------------------------------------------------------------
    # Element access
    # -------------------------------------------------------------------------

    def __getitem__(self, key: Any) -> Any:
        if isinstance(key, tuple):
            i, j = key
            assert 0 <= i < self.ROWS and 0 <= j < self.COLS, (
                f"index ({i}, {j}) out of range for {self.ROWS}x{self.COLS}"
            )
            return self.data[j * self.ROWS + i]
        assert 0 <= key < len(self.data), f"flat index {key} out of range"
        return self.data[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        if isinstance(key, tuple):
            i, j = key
            assert 0 <= i < self.ROWS and 0 <= j < self.COLS, (
                f"index ({i}, {j}) out of range for {self.ROWS}x{self.COLS}"
            )
            self.data[j * self.ROWS + i] = value
        else:
            assert 0 <= key < len(self.data), f"flat index {key} out of range"
            self.data[key] = value

    # -------------------------------------------------------------------------
    # Copy
    # -------------------------------------------------------------------------

    def copy(self) -> "Matrix":
        return type(self)._from_data(list(self.data))

    def __copy__(self) -> "Matrix":
        return self.copy()

    def __deepcopy__(self, memo: dict) -> "Matrix":
        return type(self)._from_data(copy.deepcopy(self.data, memo))

    def __reduce__(self) -> Tuple[Any, ...]:
        cls = type(self)
        if cls is _matrix_type(cls.SCALAR, cls.ROWS, cls.COLS):
            return (_restore, (cls.SCALAR, cls.ROWS, cls.COLS, list(self.data)))
        # именованные подклассы (Vector2d) pickle находит по имени модуля
        return (cls._from_data, (list(self.data),))

    # -------------------------------------------------------------------------
    # Structural operations
    # -------------------------------------------------------------------------

    def transpose(self) -> "Matrix":
        rows, cols = self.ROWS, self.COLS
        src = self.data
        data: List[Any] = [None] * (rows * cols)
        for j in range(cols):
            for i in range(rows):
                data[i * cols + j] = src[j * rows + i]
        return Matrix[self.SCALAR, cols, rows]._from_data(data)

    def squared_norm(self) -> Any:
        total = self.SCALAR(0)
        for v in self.data:
            total += v * v
        return total

    def norm(self) -> Any:
        squared = self.squared_norm()
        if isinstance(squared, Decimal):
            return squared.sqrt()
        return math.sqrt(squared)

    def get(self, n: int, m: int = 1, i_0: int = 0, j_0: int = 0) -> "Matrix":
        """
        Блок n x m, начиная с элемента (i_0, j_0).

        Выход блока за границы не проверяется (только assert).
        """
        assert i_0 >= 0 and j_0 >= 0 and i_0 + n <= self.ROWS and j_0 + m <= self.COLS, (
            f"block {n}x{m} at ({i_0}, {j_0}) exceeds {self.ROWS}x{self.COLS}"
        )
        rows, src = self.ROWS, self.data
        data: List[Any] = [None] * (n * m)
        for j in range(m):
            for i in range(n):
                data[j * n + i] = src[(j + j_0) * rows + i + i_0]
        return Matrix[self.SCALAR, n, m]._from_data(data)

    def extend(self) -> "Matrix":
        """
        Homogeneous lift: (Rows+1) x 1 вектор с завершающей 1.

        Raises:
            MatrixShapeError: если Cols != 1
        """
        if self.COLS != 1:
            raise MatrixShapeError(f"Cols != 1 for {type(self).__name__}")
        return Matrix[self.SCALAR, self.ROWS + 1, 1]._from_data(
            self.data + [self.SCALAR(1)]
        )

    def project(self) -> "Matrix":
        """
        Perspective divide: первые Rows-1 элементов, делённые на последний.

        Нулевой последний элемент не перехватывается — поднимается то,
        что даёт деление скалярного типа (ZeroDivisionError для float/int/Fraction).

        Raises:
            MatrixShapeError: если Cols != 1 или Rows < 2
        """
        if self.COLS != 1:
            raise MatrixShapeError(f"Cols != 1 for {type(self).__name__}")
        if self.ROWS < 2:
            raise MatrixShapeError(f"project() needs Rows >= 2, got {self.ROWS}")
        return self.get(self.ROWS - 1) * (self.SCALAR(1) / self.data[-1])

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def dot(self, other: "Matrix") -> Any:
        """Скалярное произведение буферов как плоских векторов (форма не проверяется)."""
        assert len(other) == len(self.data), "dot(): size mismatch"
        total = self.SCALAR(0)
        for k in range(len(self.data)):
            total += self.data[k] * other[k]
        return total

    def _same_type(self, other: Any) -> bool:
        return (
            isinstance(other, Matrix)
            and other.SCALAR is self.SCALAR
            and other.ROWS == self.ROWS
            and other.COLS == self.COLS
        )

    def _product(self, other: "Matrix") -> "Matrix":
        rows, inner, n = self.ROWS, self.COLS, other.COLS
        a, b = self.data, other.data
        zero = self.SCALAR(0)
        data: List[Any] = [zero] * (rows * n)
        for i in range(rows):
            for j in range(n):
                acc = zero
                for k in range(inner):
                    acc += a[k * rows + i] * b[j * inner + k]
                data[j * rows + i] = acc
        return Matrix[self.SCALAR, rows, n]._from_data(data)

    def _chains(self, other: Any) -> bool:
        return isinstance(other, Matrix) and other.SCALAR is self.SCALAR and other.ROWS == self.COLS

    def __matmul__(self, other: Any) -> "Matrix":
        if not self._chains(other):
            return NotImplemented
        return self._product(other)

    def __imatmul__(self, other: Any) -> "Matrix":
        return self.__imul__(other) if isinstance(other, Matrix) else NotImplemented

    def __mul__(self, other: Any) -> "Matrix":
        if isinstance(other, Matrix):
            if not self._chains(other):
                return NotImplemented
            return self._product(other)
        res = self.copy()
        res *= other
        return res

    def __rmul__(self, other: Any) -> "Matrix":
        if isinstance(other, Matrix):
            return NotImplemented
        return type(self)._from_data([other * v for v in self.data])

    def __imul__(self, other: Any) -> "Matrix":
        if isinstance(other, Matrix):
            # in-place product только если результат сохраняет форму
            if not self._chains(other) or other.COLS != self.COLS:
                raise TypeError(
                    f"in-place product needs a {type(self).__name__} compatible "
                    f"{self.COLS}x{self.COLS} operand, got {type(other).__name__}"
                )
            self.data[:] = self._product(other).data
            return self
        data = self.data
        for k in range(len(data)):
            data[k] *= other
        return self

    def __truediv__(self, value: Any) -> "Matrix":
        if isinstance(value, Matrix):
            return NotImplemented
        res = self.copy()
        res /= value
        return res

    def __itruediv__(self, value: Any) -> "Matrix":
        if isinstance(value, Matrix):
            return NotImplemented
        data = self.data
        for k in range(len(data)):
            data[k] /= value
        return self

    def __add__(self, other: Any) -> "Matrix":
        if not self._same_type(other):
            return NotImplemented
        res = self.copy()
        res += other
        return res

    def __iadd__(self, other: Any) -> "Matrix":
        if not self._same_type(other):
            return NotImplemented
        data, src = self.data, other.data
        for k in range(len(data)):
            data[k] += src[k]
        return self

    def __sub__(self, other: Any) -> "Matrix":
        if not self._same_type(other):
            return NotImplemented
        res = self.copy()
        res -= other
        return res

    def __isub__(self, other: Any) -> "Matrix":
        if not self._same_type(other):
            return NotImplemented
        data, src = self.data, other.data
        for k in range(len(data)):
            data[k] -= src[k]
        return self

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        if not self._same_type(other):
            return False
        # поэлементный ==, без short-circuit по identity (NaN != NaN)
        return all(a == b for a, b in zip(self.data, other.data))

    __hash__ = None  # type: ignore[assignment]

    # -------------------------------------------------------------------------
    # Inversion
    # -------------------------------------------------------------------------

    def inverse(self) -> "Matrix":
        """
        Обратная матрица через closed-form алгоритм для данной формы.

        Raises:
            MatrixShapeError: если Rows != Cols
            SingularMatrixError: если det == 0
            InverseNotImplementedError: для квадратных размеров вне 1..4
        """
        if self.ROWS != self.COLS:
            raise MatrixShapeError(f"Rows != Cols for {type(self).__name__}")
        return inverse(self)

    # -------------------------------------------------------------------------
    # Text
    # -------------------------------------------------------------------------

    def print(
        self,
        name: str,
        out: Optional[TextIO] = None,
        config: PrintConfig = DEFAULT_PRINT_CONFIG,
    ) -> TextIO:
        """Печать в виде `name = [[...],\\n[...]]`."""
        if out is None:
            out = sys.stdout
        out.write(f"{name} = {format_matrix(self, config)}\n")
        return out

    def __str__(self) -> str:
        return format_matrix(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_rows()!r})"


# =============================================================================
# INVERSE DISPATCH
# =============================================================================


@singledispatch
def inverse(mat: Matrix) -> Matrix:
    """
    Обращение квадратной матрицы.

    Диспетчеризация по shape-классу (Matrix.shape_type(N, N)): реализации
    для N = 1..4 регистрируются в src.core.math.inversion. Для остальных
    форм всегда InverseNotImplementedError.
    """
    logger.debug("inverse() requested for unsupported shape %dx%d", mat.ROWS, mat.COLS)
    raise InverseNotImplementedError(
        f"inverse() not implemented for {mat.ROWS}x{mat.COLS}"
    )
