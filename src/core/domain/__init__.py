"""
Domain models and value objects.

Contains the matrix payload model and its read/write collaborator.
"""

from src.core.domain.matrix_io import (
    dumps,
    loads,
    read_matrix,
    write_matrix,
)
from src.core.domain.matrix_payload import MatrixPayload

__all__ = [
    # Payload model
    "MatrixPayload",
    # IO
    "write_matrix",
    "read_matrix",
    "dumps",
    "loads",
]
