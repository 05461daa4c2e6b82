"""
MatrixPayload — модель raw buffer контракта матрицы

Immutable Pydantic модель: размеры (rows, cols) и плоский буфер элементов
в column-major порядке, ровно как он хранится в Matrix.data.
Полная совместимость с JSON Schema (contracts/schema/matrix.json).
"""

from typing import List, Union

from pydantic import BaseModel, Field, model_validator

from src.core.math.matrix import NO_INIT, Matrix


class MatrixPayload(BaseModel):
    """
    Payload матрицы.

    Immutable модель (frozen=True). Порядок элементов в data — column-major:
    элемент (i, j) лежит по смещению j * rows + i.
    """

    schema_version: str = Field("1", pattern="^1$", description="Версия схемы")
    rows: int = Field(..., ge=1, description="Число строк")
    cols: int = Field(..., ge=1, description="Число столбцов")
    data: List[Union[int, float]] = Field(
        ..., description="Элементы в column-major порядке"
    )

    # inf/NaN в JSON как Infinity/NaN (их принимает json.loads), а не null
    model_config = {"frozen": True, "ser_json_inf_nan": "constants"}

    @model_validator(mode="after")
    def validate_data_size(self) -> "MatrixPayload":
        """Проверка len(data) == rows * cols."""
        if len(self.data) != self.rows * self.cols:
            raise ValueError(
                f"data size {len(self.data)} != rows * cols = {self.rows * self.cols}"
            )
        return self

    @classmethod
    def from_matrix(cls, matrix: Matrix) -> "MatrixPayload":
        """
        Снимок raw buffer матрицы.

        Скаляры, отличные от int/float (Fraction, Decimal), приводятся к float.
        """
        data = [v if isinstance(v, (int, float)) else float(v) for v in matrix.get_data()]
        return cls(rows=matrix.ROWS, cols=matrix.COLS, data=data)

    def to_matrix(self, scalar: type = float) -> Matrix:
        """Новая Matrix[scalar, rows, cols] с элементами payload."""
        res = Matrix[scalar, self.rows, self.cols](NO_INIT)
        res.get_data()[:] = [scalar(v) for v in self.data]
        return res
