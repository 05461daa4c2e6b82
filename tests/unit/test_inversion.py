"""
Тесты для closed-form обращения матриц

Проверяет:
1. Диспетчеризацию по shape-классу (1x1..4x4, остальные — not implemented)
2. A * A^-1 == A^-1 * A == I (точно для Fraction, приближённо для float)
3. Детекцию вырожденных матриц (det == 0, без tolerance)
4. Precondition: только квадратные матрицы
"""

from fractions import Fraction

import pytest

from src.core.math import (
    InverseNotImplementedError,
    Matrix,
    MatrixShapeError,
    SingularMatrixError,
    inverse,
)

# =============================================================================
# FIXTURES
# =============================================================================

INVERTIBLE = {
    1: [Fraction(-4)],
    2: [3, 1, 4, 2],
    3: [2, -1, 0, -1, 2, -1, 0, -1, 2],
    4: [1, 2, 0, 1, 0, 1, 3, 0, 2, 0, 1, 4, 1, 1, 0, 2],
}


def _assert_close_to_identity(m) -> None:
    n = m.ROWS
    for i in range(n):
        for j in range(n):
            assert m[i, j] == pytest.approx(1.0 if i == j else 0.0, abs=1e-12)


# =============================================================================
# ТЕСТЫ ОБРАЩЕНИЯ
# =============================================================================


class TestInverseExact:
    """Точное обращение над Fraction"""

    @pytest.mark.parametrize("n", [1, 2, 3, 4])
    def test_right_and_left_inverse(self, n) -> None:
        """A * A^-1 == I и A^-1 * A == I"""
        cls = Matrix[Fraction, n, n]
        a = cls(INVERTIBLE[n])
        inv = a.inverse()
        assert type(inv) is cls
        assert a * inv == cls.identity()
        assert inv * a == cls.identity()

    @pytest.mark.parametrize("n", [1, 2, 3, 4])
    def test_double_inverse(self, n) -> None:
        """(A^-1)^-1 == A"""
        a = Matrix[Fraction, n, n](INVERTIBLE[n])
        assert a.inverse().inverse() == a

    def test_identity_is_self_inverse(self) -> None:
        for n in (1, 2, 3, 4):
            eye = Matrix[Fraction, n, n].identity()
            assert eye.inverse() == eye

    def test_one_by_one_is_reciprocal(self) -> None:
        """1x1 — обратная величина элемента"""
        assert Matrix[Fraction, 1, 1]([Fraction(2, 3)]).inverse().data == [Fraction(3, 2)]

    def test_known_3x3(self) -> None:
        """Известная обратная матрица 3x3"""
        a = Matrix[Fraction, 3, 3]([1, 2, 3, 0, 1, 4, 5, 6, 0])
        expected = Matrix[Fraction, 3, 3]([-24, 18, 5, 20, -15, -4, -5, 4, 1])
        assert a.inverse() == expected

    def test_non_symmetric_4x4(self) -> None:
        """Несимметричная 4x4: проверка ориентации adjugate"""
        a = Matrix[Fraction, 4, 4]([2, 0, 0, 1, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1])
        inv = a.inverse()
        assert inv.to_rows() == [
            [Fraction(1, 2), 0, 0, Fraction(-1, 2)],
            [0, 1, 0, 0],
            [0, 0, 1, 0],
            [0, 0, 0, 1],
        ]


class TestInverseFloat:
    """Обращение над float"""

    def test_diagonal_2x2(self) -> None:
        """[[2, 0], [0, 2]]^-1 == [[0.5, 0], [0, 0.5]]"""
        a = Matrix[float, 2, 2]([2, 0, 0, 2])
        assert a.inverse() == Matrix[float, 2, 2]([0.5, 0, 0, 0.5])

    @pytest.mark.parametrize("n", [2, 3, 4])
    def test_product_close_to_identity(self, n) -> None:
        """A * A^-1 ≈ I с точностью округления"""
        a = Matrix[float, n, n](INVERTIBLE[n])
        _assert_close_to_identity(a * a.inverse())
        _assert_close_to_identity(a.inverse() * a)

    def test_inverse_does_not_mutate(self) -> None:
        a = Matrix[float, 3, 3](INVERTIBLE[3])
        before = list(a.data)
        a.inverse()
        assert a.data == before


# =============================================================================
# ТЕСТЫ ОШИБОК
# =============================================================================


class TestInverseErrors:
    """Вырожденные, неквадратные и неподдерживаемые матрицы"""

    def test_singular_2x2(self) -> None:
        """[[1, 1], [1, 1]] — det == 0"""
        with pytest.raises(SingularMatrixError, match="determinant = 0"):
            Matrix[float, 2, 2]([1, 1, 1, 1]).inverse()

    def test_singular_3x3(self) -> None:
        with pytest.raises(SingularMatrixError):
            Matrix[int, 3, 3]([1, 2, 3, 4, 5, 6, 7, 8, 9]).inverse()

    def test_singular_4x4(self) -> None:
        """Две одинаковые строки"""
        with pytest.raises(SingularMatrixError):
            Matrix[int, 4, 4]([1, 2, 3, 4, 1, 2, 3, 4, 0, 1, 0, 1, 5, 0, 2, 7]).inverse()

    def test_zero_1x1_is_singular(self) -> None:
        """1x1 проверяет ноль так же, как 2x2..4x4"""
        with pytest.raises(SingularMatrixError):
            Matrix[float, 1, 1]().inverse()

    def test_zero_matrix_singular_all_sizes(self) -> None:
        for n in (1, 2, 3, 4):
            with pytest.raises(SingularMatrixError):
                Matrix[float, n, n]().inverse()

    def test_no_tolerance(self) -> None:
        """Почти вырожденная, но det != 0 — обращается"""
        a = Matrix[float, 2, 2]([1.0, 1.0, 1.0, 1.0 + 1e-12])
        inv = a.inverse()
        assert inv[0, 0] > 1e11

    def test_singular_distinct_from_shape_error(self) -> None:
        """SingularMatrixError не является MatrixShapeError"""
        assert not issubclass(SingularMatrixError, MatrixShapeError)
        assert issubclass(SingularMatrixError, ArithmeticError)

    def test_non_square_raises_shape_error(self) -> None:
        with pytest.raises(MatrixShapeError):
            Matrix[float, 2, 3]().inverse()

    @pytest.mark.parametrize("n", [5, 6])
    def test_unsupported_size(self, n) -> None:
        """Для N > 4 closed-form нет"""
        with pytest.raises(InverseNotImplementedError):
            Matrix[float, n, n].identity().inverse()

    def test_unsupported_is_not_implemented_error(self) -> None:
        assert issubclass(InverseNotImplementedError, NotImplementedError)


class TestDispatch:
    """Диспетчеризация по shape-классу"""

    def test_registered_shapes(self) -> None:
        """Для 1x1..4x4 зарегистрированы отдельные реализации"""
        generic = inverse.dispatch(Matrix)
        impls = {inverse.dispatch(Matrix.shape_type(n, n)) for n in (1, 2, 3, 4)}
        assert len(impls) == 4
        assert generic not in impls

    def test_scalar_types_share_implementation(self) -> None:
        assert inverse.dispatch(Matrix[int, 3, 3]) is inverse.dispatch(Matrix[Fraction, 3, 3])

    def test_unsupported_shape_uses_generic(self) -> None:
        assert inverse.dispatch(Matrix[float, 5, 5]) is inverse.dispatch(Matrix)

    def test_free_function(self) -> None:
        """inverse(m) эквивалентен m.inverse()"""
        a = Matrix[Fraction, 2, 2]([3, 1, 4, 2])
        assert inverse(a) == a.inverse()
