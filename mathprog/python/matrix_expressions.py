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

"""Constant matrices and grids of variables.

Only constant matrices take part in the expression algebra, mostly to build
`A @ x` for a vector x. Matrices of non constant expressions are not
supported.
"""

from typing import Any, Iterator, Mapping, Sequence, Tuple

import numpy as np
import numpy.typing as npt

from mathprog.python import constraints
from mathprog.python import errors
from mathprog.python import variables
from mathprog.python import vector_expressions


class KMatrix(variables.Expression):
    """A constant matrix.

    This class is immutable.
    """

    __slots__ = ("_values",)

    def __init__(self, values: npt.ArrayLike) -> None:
        values = np.array(values, dtype=np.double)
        if values.ndim != 2:
            raise errors.MalformedExpressionError(
                f"KMatrix values should be two dimensional, got shape {values.shape}"
            )
        values.flags.writeable = False
        self._values: np.ndarray = values

    @property
    def values(self) -> np.ndarray:
        return self._values

    def at(self, i: int, j: int) -> variables.K:
        return variables.K(self._values[i, j])

    def dimensions(self) -> Tuple[int, int]:
        return self._values.shape

    def variable_vector(self) -> Tuple[variables.Variable, ...]:
        return ()

    def check(self) -> None:
        if self._values.ndim != 2:
            raise errors.MalformedExpressionError(
                f"KMatrix values should be two dimensional, got {self._values.shape}"
            )

    def transpose(self) -> "KMatrix":
        return KMatrix(self._values.T)

    @property
    def T(self) -> "KMatrix":  # pylint: disable=invalid-name
        return self.transpose()

    def is_linear(self) -> bool:
        return True

    def evaluate(self, variable_values: Mapping[int, float]) -> np.ndarray:
        return np.array(self._values)

    def plus(self, rhs: Any) -> "KMatrix":
        if isinstance(rhs, np.ndarray) and rhs.ndim == 2:
            rhs = KMatrix(rhs)
        if isinstance(rhs, KMatrix):
            if rhs.dimensions() != self.dimensions():
                raise errors.DimensionMismatchError(
                    "plus", self.dimensions(), rhs.dimensions()
                )
            return KMatrix(self._values + rhs.values)
        if variables.is_a_number(rhs):
            raise errors.DimensionMismatchError("plus", self.dimensions(), (1, 1))
        if isinstance(rhs, variables.Expression):
            raise errors.DimensionMismatchError(
                "plus", self.dimensions(), rhs.dimensions()
            )
        raise errors.UnexpectedInputError("plus", rhs)

    def multiply(self, rhs: Any) -> variables.Expression:
        if variables.is_a_number(rhs):
            return KMatrix(float(rhs) * self._values)
        if isinstance(rhs, variables.K):
            return KMatrix(rhs.value * self._values)
        if isinstance(rhs, np.ndarray):
            if rhs.ndim == 1:
                rhs = vector_expressions.KVector(rhs)
            elif rhs.ndim == 2:
                rhs = KMatrix(rhs)
            else:
                raise errors.DimensionMismatchError(
                    "multiply", self.dimensions(), rhs.shape
                )
        if isinstance(rhs, vector_expressions.VectorExpression):
            return rhs._left_multiply_by_array(self._values)
        if isinstance(rhs, KMatrix):
            if self._values.shape[1] != rhs.values.shape[0]:
                raise errors.DimensionMismatchError(
                    "multiply", self.dimensions(), rhs.dimensions()
                )
            return KMatrix(self._values @ rhs.values)
        if isinstance(rhs, variables.ScalarExpression):
            raise NotImplementedError(
                f"multiplying a KMatrix by {type(rhs).__name__!r} would create a"
                " matrix of expressions, which is not supported"
            )
        raise errors.UnexpectedInputError("multiply", rhs)

    def _reflected_multiply(self, lhs: Any) -> variables.Expression:
        if isinstance(lhs, vector_expressions.VectorExpression):
            return lhs._right_multiply_by_array(self._values)
        return super()._reflected_multiply(lhs)

    def __rmatmul__(self, lhs: Any) -> variables.Expression:
        if isinstance(lhs, np.ndarray) and lhs.ndim == 2:
            return KMatrix(lhs).multiply(self)
        if isinstance(lhs, np.ndarray) and lhs.ndim == 1:
            return vector_expressions.KVector(
                lhs, vector_expressions.Orientation.ROW
            ).multiply(self)
        return self.multiply(lhs)

    def __rmul__(self, lhs: Any) -> variables.Expression:
        if isinstance(lhs, np.ndarray):
            return self.__rmatmul__(lhs)
        return self.multiply(lhs)

    def comparison(self, rhs: Any, sense: constraints.ConstraintSense) -> Any:
        raise NotImplementedError("comparisons of matrices are not supported")

    def __str__(self):
        return str(self._values.tolist())

    def __repr__(self):
        return f"KMatrix({self._values.tolist()!r})"


class VarMatrix:
    """A rows x columns grid of variables, stored in row-major order.

    This class is immutable.
    """

    __slots__ = "_elements", "_shape"

    def __init__(
        self, elements: Sequence[variables.Variable], shape: Tuple[int, int]
    ) -> None:
        rows, columns = shape
        if rows < 0 or columns < 0 or len(elements) != rows * columns:
            raise ValueError(
                f"a {rows} x {columns} VarMatrix needs {rows * columns} variables,"
                f" got {len(elements)}"
            )
        self._elements: Tuple[variables.Variable, ...] = tuple(elements)
        self._shape: Tuple[int, int] = (rows, columns)

    @property
    def shape(self) -> Tuple[int, int]:
        return self._shape

    @property
    def elements(self) -> Tuple[variables.Variable, ...]:
        """The variables in row-major order."""
        return self._elements

    def at(self, i: int, j: int) -> variables.Variable:
        rows, columns = self._shape
        if not 0 <= i < rows or not 0 <= j < columns:
            raise IndexError(f"index ({i}, {j}) is out of a {rows} x {columns} matrix")
        return self._elements[i * columns + j]

    def __getitem__(self, index: Tuple[int, int]) -> variables.Variable:
        i, j = index
        return self.at(i, j)

    def row(self, i: int) -> vector_expressions.VarVector:
        """Returns the i-th row as a row vector."""
        columns = self._shape[1]
        return vector_expressions.VarVector(
            self._elements[i * columns : (i + 1) * columns],
            vector_expressions.Orientation.ROW,
        )

    def column(self, j: int) -> vector_expressions.VarVector:
        """Returns the j-th column as a column vector."""
        rows, columns = self._shape
        return vector_expressions.VarVector(
            [self._elements[i * columns + j] for i in range(rows)]
        )

    def rows(self) -> Iterator[vector_expressions.VarVector]:
        for i in range(self._shape[0]):
            yield self.row(i)

    def columns(self) -> Iterator[vector_expressions.VarVector]:
        for j in range(self._shape[1]):
            yield self.column(j)

    def flatten(self) -> vector_expressions.VarVector:
        """Returns all the variables, in row-major order, as a column vector."""
        return vector_expressions.VarVector(self._elements)

    def transpose(self) -> "VarMatrix":
        rows, columns = self._shape
        return VarMatrix(
            [self.at(i, j) for j in range(columns) for i in range(rows)],
            (columns, rows),
        )

    def __len__(self) -> int:
        return self._shape[0]

    def __str__(self):
        return "\n".join(str(row) for row in self.rows())

    def __repr__(self):
        return f"VarMatrix({list(self._elements)!r}, {self._shape})"
