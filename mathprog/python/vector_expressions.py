# Copyright 2010-2025 Google LLC
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Vector expressions: constant vectors, variable vectors and L x + c.

Every vector has an orientation, COLUMN by default. Vectors only combine with
vectors of the same length and orientation, except for products where the
usual matrix rules apply:

  * row (1 x n) times column (n x 1) is a scalar expression,
  * column (n x 1) times row (1 x m) would be a matrix of expressions and is not
    supported,
  * a number or K scales every entry.

Numpy arrays are promoted on the fly: a 1-D array becomes a KVector and a 2-D
array multiplies vectors as a constant matrix.
"""

import abc
import enum
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import numpy.typing as npt

from mathprog.python import constraints
from mathprog.python import errors
from mathprog.python import variables


@enum.unique
class Orientation(enum.Enum):
    COLUMN = "column"
    ROW = "row"

    def flipped(self) -> "Orientation":
        return Orientation.ROW if self == Orientation.COLUMN else Orientation.COLUMN


def _check_orientation(orientation: Any) -> "Orientation":
    if not isinstance(orientation, Orientation):
        raise TypeError(f"orientation should be an Orientation, got: {orientation!r}")
    return orientation


def rewrite_columns(
    l: np.ndarray,
    source: Sequence[variables.Variable],
    target: Sequence[variables.Variable],
) -> np.ndarray:
    """Moves the columns of l, one per variable of source, onto target.

    Columns of repeated variables are added together.

    Raises:
      VariableNotFoundError: if a variable of source is not in target.
    """
    positions = variables.index_map(target)
    result = np.zeros((l.shape[0], len(target)))
    for k, v in enumerate(source):
        if v.id not in positions:
            raise errors.VariableNotFoundError(v.id, "the target variable vector")
        result[:, positions[v.id]] += l[:, k]
    return result


class VectorExpression(variables.Expression):
    """Interface of the vector expression variants.

    Each vector expression is affine: it can be written L x + c where x is
    variable_vector(), L is linear_coeff() and c is constant().
    """

    __slots__ = ()

    @property
    @abc.abstractmethod
    def orientation(self) -> Orientation:
        pass

    @abc.abstractmethod
    def __len__(self) -> int:
        pass

    @abc.abstractmethod
    def at(self, i: int) -> variables.ScalarExpression:
        """Returns the i-th entry as a scalar expression."""

    @abc.abstractmethod
    def linear_coeff(self) -> np.ndarray:
        """Returns L, of shape (len(self), len(variable_vector()))."""

    @abc.abstractmethod
    def constant(self) -> np.ndarray:
        """Returns c, of shape (len(self),)."""

    @abc.abstractmethod
    def _scaled(self, factor: float) -> "VectorExpression":
        pass

    def dimensions(self) -> Tuple[int, int]:
        if self.orientation == Orientation.COLUMN:
            return (len(self), 1)
        return (1, len(self))

    def is_linear(self) -> bool:
        return True

    def is_constant(self) -> bool:
        return False

    def evaluate(self, variable_values: Mapping[int, float]) -> np.ndarray:
        values = variables.values_of(self.variable_vector(), variable_values)
        return self.linear_coeff() @ values + self.constant()

    def variable_part(self) -> "VectorExpression":
        """Returns the expression without its constant term."""
        return VectorLinearExpression(
            self.variable_vector(),
            self.linear_coeff(),
            np.zeros(len(self)),
            self.orientation,
        )

    def constant_part(self) -> "KVector":
        return KVector(self.constant(), self.orientation)

    def _as_linear(self) -> "VectorLinearExpression":
        return VectorLinearExpression(
            self.variable_vector(),
            self.linear_coeff(),
            self.constant(),
            self.orientation,
        )

    def _as_vector_operand(
        self, operation: str, rhs: Any, broadcast: bool = False
    ) -> "VectorExpression":
        """Promotes rhs to a vector with the orientation of self if possible.

        Args:
          operation: the name of the operation, for error messages.
          rhs: the operand to promote.
          broadcast: if true, numbers become constant vectors of len(self).

        Raises:
          DimensionMismatchError: if rhs is a scalar or a matrix.
          UnexpectedInputError: if rhs is not an expression, an array or a number.
        """
        if isinstance(rhs, VectorExpression):
            return rhs
        if isinstance(rhs, np.ndarray):
            if rhs.ndim == 1:
                return KVector(rhs, self.orientation)
            raise errors.DimensionMismatchError(operation, self.dimensions(), rhs.shape)
        if variables.is_a_number(rhs) and broadcast:
            return KVector(np.full(len(self), float(rhs)), self.orientation)
        if variables.is_a_number(rhs):
            raise errors.DimensionMismatchError(operation, self.dimensions(), (1, 1))
        if isinstance(rhs, variables.Expression):
            raise errors.DimensionMismatchError(
                operation, self.dimensions(), rhs.dimensions()
            )
        raise errors.UnexpectedInputError(operation, rhs)

    def _check_same_shape(self, operation: str, rhs: "VectorExpression") -> None:
        if len(self) != len(rhs):
            raise errors.DimensionMismatchError(
                operation, self.dimensions(), rhs.dimensions()
            )
        if self.orientation != rhs.orientation:
            raise errors.OrientationMismatchError(operation, self, rhs)

    def plus(self, rhs: Any) -> "VectorExpression":
        rhs = self._as_vector_operand("plus", rhs)
        self._check_same_shape("plus", rhs)
        if isinstance(self, KVector) and isinstance(rhs, KVector):
            return KVector(self.values + rhs.values, self.orientation)
        lhs = self._as_linear()
        rhs = rhs._as_linear()
        x = variables.unique_variables(lhs.x + rhs.x)
        return VectorLinearExpression(
            x,
            rewrite_columns(lhs.l, lhs.x, x) + rewrite_columns(rhs.l, rhs.x, x),
            lhs.c + rhs.c,
            self.orientation,
        )

    def comparison(
        self, rhs: Any, sense: constraints.ConstraintSense
    ) -> constraints.VectorConstraint:
        rhs = self._as_vector_operand("comparison", rhs, broadcast=True)
        self._check_same_shape("comparison", rhs)
        return constraints.VectorConstraint(self, rhs, sense)

    def multiply(self, rhs: Any) -> variables.Expression:
        if variables.is_a_number(rhs):
            return self._scaled(float(rhs))
        if isinstance(rhs, variables.K):
            return self._scaled(rhs.value)
        if isinstance(rhs, (variables.Variable, variables.ScalarLinearExpression)):
            if not self.is_constant():
                raise NotImplementedError(
                    f"multiplying {type(self).__name__!r} by {type(rhs).__name__!r}"
                    " would create a vector of quadratic expressions, which is not"
                    " supported"
                )
            rhs = rhs._as_linear()
            k = self.constant()
            return VectorLinearExpression(
                rhs.x, np.outer(k, rhs.l), k * rhs.c, self.orientation
            )
        if isinstance(rhs, variables.ScalarQuadraticExpression):
            if self.is_constant():
                raise NotImplementedError(
                    "multiplying a constant vector by a quadratic expression would"
                    " create a vector of quadratic expressions, which is not"
                    " supported"
                )
            raise errors.DegreeExceededError(self, rhs)
        if isinstance(rhs, np.ndarray):
            if rhs.ndim == 1:
                return self._multiply_vector(KVector(rhs, Orientation.COLUMN))
            if rhs.ndim == 2:
                return self._right_multiply_by_array(rhs)
            raise errors.DimensionMismatchError("multiply", self.dimensions(), rhs.shape)
        if isinstance(rhs, VectorExpression):
            return self._multiply_vector(rhs)
        if isinstance(rhs, variables.Expression):
            return rhs._reflected_multiply(self)
        raise errors.UnexpectedInputError("multiply", rhs)

    def _multiply_vector(self, rhs: "VectorExpression") -> variables.Expression:
        n = len(self)
        m = len(rhs)
        if self.orientation == Orientation.ROW and rhs.orientation == Orientation.COLUMN:
            if n != m:
                raise errors.DimensionMismatchError(
                    "multiply", self.dimensions(), rhs.dimensions()
                )
            return _dot(self, rhs)
        if self.orientation == Orientation.COLUMN and rhs.orientation == Orientation.ROW:
            if n == 1 and m == 1:
                return _dot(self, rhs)
            raise NotImplementedError(
                "the product of a column vector by a row vector is a matrix of"
                " expressions, which is not supported"
            )
        # Same orientation, the product is only defined when the inner
        # dimensions are both one.
        if self.orientation == Orientation.COLUMN and m == 1:
            return self.multiply(rhs.at(0))
        if self.orientation == Orientation.ROW and n == 1:
            return rhs.multiply(self.at(0))
        raise errors.DimensionMismatchError(
            "multiply", self.dimensions(), rhs.dimensions()
        )

    def _left_multiply_by_array(self, a: np.ndarray) -> "VectorExpression":
        """Returns the column vector a @ self, for a 2-D array a."""
        if self.orientation != Orientation.COLUMN or a.shape[1] != len(self):
            raise errors.DimensionMismatchError(
                "multiply", a.shape, self.dimensions()
            )
        if self.is_constant():
            return KVector(a @ self.constant(), Orientation.COLUMN)
        return VectorLinearExpression(
            self.variable_vector(),
            a @ self.linear_coeff(),
            a @ self.constant(),
            Orientation.COLUMN,
        )

    def _right_multiply_by_array(self, a: np.ndarray) -> "VectorExpression":
        """Returns the row vector self @ a, for a 2-D array a."""
        if self.orientation != Orientation.ROW or a.shape[0] != len(self):
            raise errors.DimensionMismatchError(
                "multiply", self.dimensions(), a.shape
            )
        if self.is_constant():
            return KVector(self.constant() @ a, Orientation.ROW)
        return VectorLinearExpression(
            self.variable_vector(),
            a.T @ self.linear_coeff(),
            self.constant() @ a,
            Orientation.ROW,
        )

    def __rmul__(self, lhs: Any) -> variables.Expression:
        if isinstance(lhs, np.ndarray):
            return self.__rmatmul__(lhs)
        return self.multiply(lhs)

    def __rmatmul__(self, lhs: Any) -> variables.Expression:
        if isinstance(lhs, np.ndarray):
            if lhs.ndim == 1:
                # As in numpy, a 1-D array on the left is a row vector.
                return KVector(lhs, Orientation.ROW).multiply(self)
            if lhs.ndim == 2:
                return self._left_multiply_by_array(lhs)
            raise errors.DimensionMismatchError("multiply", lhs.shape, self.dimensions())
        return self.multiply(lhs)

    def __getitem__(self, i: int) -> variables.ScalarExpression:
        return self.at(i)

    def __iter__(self) -> Iterator[variables.ScalarExpression]:
        for i in range(len(self)):
            yield self.at(i)


def _dot(lhs: VectorExpression, rhs: VectorExpression) -> variables.ScalarExpression:
    """Returns sum_i lhs[i] * rhs[i], both of the same length."""
    if lhs.is_constant() and rhs.is_constant():
        return variables.K(float(np.dot(lhs.constant(), rhs.constant())))
    if lhs.is_constant() or rhs.is_constant():
        k, e = (lhs, rhs) if lhs.is_constant() else (rhs, lhs)
        k = k.constant()
        return variables.ScalarLinearExpression(
            e.variable_vector(),
            k @ e.linear_coeff(),
            float(np.dot(k, e.constant())),
        )
    # (L1 x + c1)' (L2 x + c2) = x' L1' L2 x + (L1' c2 + L2' c1) . x + c1 . c2
    x = variables.unique_variables(lhs.variable_vector() + rhs.variable_vector())
    l1 = rewrite_columns(lhs.linear_coeff(), lhs.variable_vector(), x)
    l2 = rewrite_columns(rhs.linear_coeff(), rhs.variable_vector(), x)
    c1 = lhs.constant()
    c2 = rhs.constant()
    return variables.ScalarQuadraticExpression(
        x, l1.T @ l2, l1.T @ c2 + l2.T @ c1, float(np.dot(c1, c2))
    )


def _vector_str(entries: Iterable[Any], orientation: Orientation) -> str:
    result = "[" + ", ".join(str(e) for e in entries) + "]"
    return result + "'" if orientation == Orientation.ROW else result


class KVector(VectorExpression):
    """A constant vector.

    This class is immutable.
    """

    __slots__ = "_values", "_orientation"

    def __init__(
        self,
        values: npt.ArrayLike,
        orientation: Orientation = Orientation.COLUMN,
    ) -> None:
        self._values: np.ndarray = variables._read_only(values, 1, "KVector values")
        self._orientation: Orientation = _check_orientation(orientation)

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    def __len__(self) -> int:
        return len(self._values)

    def at(self, i: int) -> variables.K:
        return variables.K(self._values[i])

    def variable_vector(self) -> Tuple[variables.Variable, ...]:
        return ()

    def linear_coeff(self) -> np.ndarray:
        return np.zeros((len(self._values), 0))

    def constant(self) -> np.ndarray:
        return self._values

    def is_constant(self) -> bool:
        return True

    def variable_part(self) -> "KVector":
        return KVector(np.zeros(len(self._values)), self._orientation)

    def check(self) -> None:
        if self._values.ndim != 1:
            raise errors.MalformedExpressionError(
                f"KVector values should be one dimensional, got {self._values.shape}"
            )

    def transpose(self) -> "KVector":
        return KVector(self._values, self._orientation.flipped())

    def evaluate(self, variable_values: Mapping[int, float]) -> np.ndarray:
        return np.array(self._values)

    def _scaled(self, factor: float) -> "KVector":
        return KVector(factor * self._values, self._orientation)

    def __str__(self):
        return _vector_str(self._values.tolist(), self._orientation)

    def __repr__(self):
        return f"KVector({self._values.tolist()!r}, {self._orientation})"


class VarVector(VectorExpression):
    """A vector of variables, possibly with repetitions.

    This class is immutable.
    """

    __slots__ = "_elements", "_orientation"

    def __init__(
        self,
        elements: Iterable[variables.Variable],
        orientation: Orientation = Orientation.COLUMN,
    ) -> None:
        self._elements: Tuple[variables.Variable, ...] = tuple(elements)
        self._orientation: Orientation = _check_orientation(orientation)
        self.check()

    @property
    def elements(self) -> Tuple[variables.Variable, ...]:
        return self._elements

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    def __len__(self) -> int:
        return len(self._elements)

    def at(self, i: int) -> variables.Variable:
        return self._elements[i]

    def __getitem__(
        self, i: Union[int, slice]
    ) -> Union[variables.Variable, "VarVector"]:
        if isinstance(i, slice):
            return VarVector(self._elements[i], self._orientation)
        return self._elements[i]

    def variable_vector(self) -> Tuple[variables.Variable, ...]:
        return self._elements

    def linear_coeff(self) -> np.ndarray:
        return np.identity(len(self._elements))

    def constant(self) -> np.ndarray:
        return np.zeros(len(self._elements))

    def variable_part(self) -> "VarVector":
        return self

    def check(self) -> None:
        for v in self._elements:
            if not isinstance(v, variables.Variable):
                raise errors.MalformedExpressionError(
                    "VarVector should only contain Variables, found"
                    f" {type(v).__name__!r}"
                )

    def transpose(self) -> "VarVector":
        return VarVector(self._elements, self._orientation.flipped())

    def evaluate(self, variable_values: Mapping[int, float]) -> np.ndarray:
        return variables.values_of(self._elements, variable_values)

    def _scaled(self, factor: float) -> "VectorLinearExpression":
        n = len(self._elements)
        return VectorLinearExpression(
            self._elements, factor * np.identity(n), np.zeros(n), self._orientation
        )

    def __str__(self):
        return _vector_str(self._elements, self._orientation)

    def __repr__(self):
        return f"VarVector({list(self._elements)!r}, {self._orientation})"


class VectorLinearExpression(VectorExpression):
    """For variables x, the vector expression: L x + c.

    L has one row per entry of the vector and one column per variable of x.

    This class is immutable.
    """

    __slots__ = "_x", "_l", "_c", "_orientation"

    def __init__(
        self,
        x: Iterable[variables.Variable],
        l: npt.ArrayLike,
        c: Optional[npt.ArrayLike] = None,
        orientation: Orientation = Orientation.COLUMN,
    ) -> None:
        self._x: Tuple[variables.Variable, ...] = tuple(x)
        l = np.array(l, dtype=np.double)
        if l.size == 0 and not self._x:
            l = np.zeros((0 if c is None else len(np.asarray(c)), 0))
        self._l: np.ndarray = variables._read_only(l, 2, "L")
        self._c: np.ndarray = variables._read_only(
            np.zeros(self._l.shape[0]) if c is None else c, 1, "C"
        )
        self._orientation: Orientation = _check_orientation(orientation)
        self.check()

    @property
    def x(self) -> Tuple[variables.Variable, ...]:
        return self._x

    @property
    def l(self) -> np.ndarray:
        return self._l

    @property
    def c(self) -> np.ndarray:
        return self._c

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    def __len__(self) -> int:
        return len(self._c)

    def at(self, i: int) -> variables.ScalarLinearExpression:
        return variables.ScalarLinearExpression(self._x, self._l[i], self._c[i])

    def variable_vector(self) -> Tuple[variables.Variable, ...]:
        return self._x

    def linear_coeff(self) -> np.ndarray:
        return self._l

    def constant(self) -> np.ndarray:
        return self._c

    def check(self) -> None:
        for v in self._x:
            if not isinstance(v, variables.Variable):
                raise errors.MalformedExpressionError(
                    f"X should only contain Variables, found {type(v).__name__!r}"
                )
        if self._l.shape != (len(self._c), len(self._x)):
            raise errors.MalformedExpressionError(
                f"L has shape {self._l.shape} but the expression has"
                f" {len(self._c)} entries over {len(self._x)} variables"
            )

    def transpose(self) -> "VectorLinearExpression":
        return VectorLinearExpression(
            self._x, self._l, self._c, self._orientation.flipped()
        )

    def rewrite_in_terms_of(
        self, x: Sequence[variables.Variable]
    ) -> "VectorLinearExpression":
        """Returns the same expression written over the variables x.

        Args:
          x: must contain every variable of this expression.

        Raises:
          VariableNotFoundError: if a variable of the expression is not in x.
        """
        x = tuple(x)
        return VectorLinearExpression(
            x, rewrite_columns(self._l, self._x, x), self._c, self._orientation
        )

    def _scaled(self, factor: float) -> "VectorLinearExpression":
        return VectorLinearExpression(
            self._x, factor * self._l, factor * self._c, self._orientation
        )

    def _as_linear(self) -> "VectorLinearExpression":
        return self

    def __str__(self):
        return _vector_str(
            (self.at(i) for i in range(len(self))), self._orientation
        )

    def __repr__(self):
        return (
            f"VectorLinearExpression({list(self._x)!r}, {self._l.tolist()!r},"
            f" {self._c.tolist()!r}, {self._orientation})"
        )
