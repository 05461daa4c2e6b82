"""
Inversion — closed-form обращение матриц 1x1 .. 4x4

Каждая форма регистрируется отдельной реализацией в singledispatch-функции
src.core.math.matrix.inverse по shape-классу Matrix.shape_type(N, N).
Общей реализации с ветвлением по размеру нет.

Схема для всех размеров:
1. adjugate (транспонированная матрица алгебраических дополнений)
2. det == 0 (точное сравнение, без tolerance) → SingularMatrixError
3. результат = adjugate * (T(1) / det) — одно скалярное умножение

ФОРМУЛЫ:
    1x1: inv = [1 / a]
    2x2: det = a00*a11 - a01*a10,  adj = [[a11, -a01], [-a10, a00]]
    3x3: det — разложение по первой строке, adj — 9 миноров 2x2
    4x4: 16 алгебраических дополнений по плоскому буферу,
         det = m0*c0 + m1*c4 + m2*c8 + m3*c12
"""

import logging
from typing import Any, List

from src.core.math.matrix import (
    NO_INIT,
    Matrix,
    SingularMatrixError,
    inverse,
)

logger = logging.getLogger(__name__)


def _blank(mat: Matrix) -> Matrix:
    return Matrix[mat.SCALAR, mat.ROWS, mat.COLS](NO_INIT)


def _check_determinant(mat: Matrix, det: Any) -> None:
    if det == 0:
        logger.debug("singular %dx%d matrix rejected", mat.ROWS, mat.COLS)
        raise SingularMatrixError("inverse(): determinant = 0")


@inverse.register(Matrix.shape_type(1, 1))
def _inverse_1x1(m: Matrix) -> Matrix:
    # Единственный элемент и есть определитель; проверка та же, что у 2x2..4x4
    _check_determinant(m, m[0])
    tmp = _blank(m)
    tmp[0] = m.SCALAR(1)
    tmp *= m.SCALAR(1) / m[0]
    return tmp


@inverse.register(Matrix.shape_type(2, 2))
def _inverse_2x2(m: Matrix) -> Matrix:
    det = m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0]
    _check_determinant(m, det)
    tmp = _blank(m)
    tmp[0, 0] = m[1, 1]
    tmp[1, 0] = -m[1, 0]
    tmp[0, 1] = -m[0, 1]
    tmp[1, 1] = m[0, 0]
    tmp *= m.SCALAR(1) / det
    return tmp


@inverse.register(Matrix.shape_type(3, 3))
def _inverse_3x3(m: Matrix) -> Matrix:
    det = (
        m[0, 0] * (m[1, 1] * m[2, 2] - m[2, 1] * m[1, 2])
        - m[0, 1] * (m[1, 0] * m[2, 2] - m[1, 2] * m[2, 0])
        + m[0, 2] * (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0])
    )
    _check_determinant(m, det)
    tmp = _blank(m)
    tmp[0, 0] = m[1, 1] * m[2, 2] - m[2, 1] * m[1, 2]
    tmp[0, 1] = m[0, 2] * m[2, 1] - m[0, 1] * m[2, 2]
    tmp[0, 2] = m[0, 1] * m[1, 2] - m[0, 2] * m[1, 1]
    tmp[1, 0] = m[1, 2] * m[2, 0] - m[1, 0] * m[2, 2]
    tmp[1, 1] = m[0, 0] * m[2, 2] - m[0, 2] * m[2, 0]
    tmp[1, 2] = m[1, 0] * m[0, 2] - m[0, 0] * m[1, 2]
    tmp[2, 0] = m[1, 0] * m[2, 1] - m[2, 0] * m[1, 1]
    tmp[2, 1] = m[2, 0] * m[0, 1] - m[0, 0] * m[2, 1]
    tmp[2, 2] = m[0, 0] * m[1, 1] - m[1, 0] * m[0, 1]
    tmp *= m.SCALAR(1) / det
    return tmp


def _cofactors_4x4(m: List[Any]) -> List[Any]:
    """Алгебраические дополнения 4x4 в порядке плоского буфера (уже транспонированы)."""
    c: List[Any] = [None] * 16

    c[0] = (m[5] * m[10] * m[15] - m[5] * m[11] * m[14] - m[9] * m[6] * m[15]
            + m[9] * m[7] * m[14] + m[13] * m[6] * m[11] - m[13] * m[7] * m[10])
    c[4] = (-m[4] * m[10] * m[15] + m[4] * m[11] * m[14] + m[8] * m[6] * m[15]
            - m[8] * m[7] * m[14] - m[12] * m[6] * m[11] + m[12] * m[7] * m[10])
    c[8] = (m[4] * m[9] * m[15] - m[4] * m[11] * m[13] - m[8] * m[5] * m[15]
            + m[8] * m[7] * m[13] + m[12] * m[5] * m[11] - m[12] * m[7] * m[9])
    c[12] = (-m[4] * m[9] * m[14] + m[4] * m[10] * m[13] + m[8] * m[5] * m[14]
             - m[8] * m[6] * m[13] - m[12] * m[5] * m[10] + m[12] * m[6] * m[9])

    c[1] = (-m[1] * m[10] * m[15] + m[1] * m[11] * m[14] + m[9] * m[2] * m[15]
            - m[9] * m[3] * m[14] - m[13] * m[2] * m[11] + m[13] * m[3] * m[10])
    c[5] = (m[0] * m[10] * m[15] - m[0] * m[11] * m[14] - m[8] * m[2] * m[15]
            + m[8] * m[3] * m[14] + m[12] * m[2] * m[11] - m[12] * m[3] * m[10])
    c[9] = (-m[0] * m[9] * m[15] + m[0] * m[11] * m[13] + m[8] * m[1] * m[15]
            - m[8] * m[3] * m[13] - m[12] * m[1] * m[11] + m[12] * m[3] * m[9])
    c[13] = (m[0] * m[9] * m[14] - m[0] * m[10] * m[13] - m[8] * m[1] * m[14]
             + m[8] * m[2] * m[13] + m[12] * m[1] * m[10] - m[12] * m[2] * m[9])

    c[2] = (m[1] * m[6] * m[15] - m[1] * m[7] * m[14] - m[5] * m[2] * m[15]
            + m[5] * m[3] * m[14] + m[13] * m[2] * m[7] - m[13] * m[3] * m[6])
    c[6] = (-m[0] * m[6] * m[15] + m[0] * m[7] * m[14] + m[4] * m[2] * m[15]
            - m[4] * m[3] * m[14] - m[12] * m[2] * m[7] + m[12] * m[3] * m[6])
    c[10] = (m[0] * m[5] * m[15] - m[0] * m[7] * m[13] - m[4] * m[1] * m[15]
             + m[4] * m[3] * m[13] + m[12] * m[1] * m[7] - m[12] * m[3] * m[5])
    c[14] = (-m[0] * m[5] * m[14] + m[0] * m[6] * m[13] + m[4] * m[1] * m[14]
             - m[4] * m[2] * m[13] - m[12] * m[1] * m[6] + m[12] * m[2] * m[5])

    c[3] = (-m[1] * m[6] * m[11] + m[1] * m[7] * m[10] + m[5] * m[2] * m[11]
            - m[5] * m[3] * m[10] - m[9] * m[2] * m[7] + m[9] * m[3] * m[6])
    c[7] = (m[0] * m[6] * m[11] - m[0] * m[7] * m[10] - m[4] * m[2] * m[11]
            + m[4] * m[3] * m[10] + m[8] * m[2] * m[7] - m[8] * m[3] * m[6])
    c[11] = (-m[0] * m[5] * m[11] + m[0] * m[7] * m[9] + m[4] * m[1] * m[11]
             - m[4] * m[3] * m[9] - m[8] * m[1] * m[7] + m[8] * m[3] * m[5])
    c[15] = (m[0] * m[5] * m[10] - m[0] * m[6] * m[9] - m[4] * m[1] * m[10]
             + m[4] * m[2] * m[9] + m[8] * m[1] * m[6] - m[8] * m[2] * m[5])

    return c


@inverse.register(Matrix.shape_type(4, 4))
def _inverse_4x4(m: Matrix) -> Matrix:
    src = m.data
    cofactors = _cofactors_4x4(src)
    det = src[0] * cofactors[0] + src[1] * cofactors[4] + src[2] * cofactors[8] + src[3] * cofactors[12]
    _check_determinant(m, det)
    tmp = Matrix[m.SCALAR, 4, 4]._from_data(cofactors)
    tmp *= m.SCALAR(1) / det
    return tmp
