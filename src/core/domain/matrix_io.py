"""
Matrix IO — чтение/запись матриц через raw buffer контракт

Форматы входа read_matrix():
- dict — matrix payload (contracts/schema/matrix.json): размеры + буфер,
  размеры обязаны совпадать с формой целевой матрицы
- list/tuple — старый формат: голый column-major буфер длины Rows * Cols
- всё остальное — неизвестный формат: пропускается, матрица обнуляется

Выход write_matrix()/dumps() — всегда matrix payload.
"""

import json
import logging
from typing import Any, Dict

from src.core.contracts import validate_matrix
from src.core.domain.matrix_payload import MatrixPayload
from src.core.math.matrix import Matrix, MatrixShapeError

logger = logging.getLogger(__name__)


def write_matrix(matrix: Matrix) -> Dict[str, Any]:
    """Matrix → dict payload."""
    return MatrixPayload.from_matrix(matrix).model_dump()


def dumps(matrix: Matrix) -> str:
    """
    Matrix → JSON текст payload.

    Неконечные float пишутся как Infinity/-Infinity/NaN, loads() читает их обратно.
    """
    return MatrixPayload.from_matrix(matrix).model_dump_json()


def read_matrix(matrix: Matrix, value: Any) -> Matrix:
    """
    Заполнение существующей матрицы из payload (in-place).

    Args:
        matrix: целевая матрица; её форма фиксирована
        value: dict payload, list/tuple буфер или любое другое значение

    Returns:
        та же матрица

    Raises:
        jsonschema.ValidationError: dict не соответствует схеме
        pydantic.ValidationError: len(data) != rows * cols
        MatrixShapeError: размеры payload/буфера не совпадают с формой матрицы
    """
    if isinstance(value, dict):
        validate_matrix(value)
        payload = MatrixPayload.model_validate(value)
        if (payload.rows, payload.cols) != matrix.shape:
            raise MatrixShapeError(
                f"payload shape {payload.rows}x{payload.cols} != "
                f"{matrix.ROWS}x{matrix.COLS}"
            )
        values = payload.data
    elif isinstance(value, (list, tuple)):
        if len(value) != matrix.size():
            raise MatrixShapeError(
                f"buffer size {len(value)} != Rows * Cols = {matrix.size()}"
            )
        values = value
    else:
        logger.debug("unknown matrix payload %s skipped, matrix zeroed", type(value).__name__)
        values = [0] * matrix.size()

    scalar = matrix.SCALAR
    matrix.get_data()[:] = [scalar(v) for v in values]
    return matrix


def loads(matrix_type: type, text: str) -> Matrix:
    """Новая матрица класса matrix_type из JSON текста."""
    return read_matrix(matrix_type(), json.loads(text))
