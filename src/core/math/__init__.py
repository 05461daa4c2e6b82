"""
Core math modules

Плотные матрицы фиксированной формы, closed-form обращение 1x1..4x4,
Vector2d и текстовое представление.
"""

import logging

# Matrix (порядок импорта важен: inversion регистрирует реализации в matrix.inverse)
from src.core.math.matrix import (
    NO_INIT,
    InverseNotImplementedError,
    Matrix,
    MatrixShapeError,
    SingularMatrixError,
    inverse,
)
from src.core.math import inversion  # noqa: F401
from src.core.math.vector2d import Vector2d

# Formatting
from src.core.math.formatting import (
    DEFAULT_PRINT_CONFIG,
    PrintConfig,
    format_matrix,
    format_scalar,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Matrix — Types
    "Matrix",
    "Vector2d",
    "NO_INIT",
    # Matrix — Exceptions
    "MatrixShapeError",
    "SingularMatrixError",
    "InverseNotImplementedError",
    # Matrix — Functions
    "inverse",
    # Formatting
    "DEFAULT_PRINT_CONFIG",
    "PrintConfig",
    "format_matrix",
    "format_scalar",
]
