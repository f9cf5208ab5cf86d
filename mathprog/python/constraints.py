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

"""Scalar and vector constraints of the form `lhs sense rhs`.

Constraints are usually created with the comparison operators of expressions,
for example `x + y <= 3` or `A @ x == b`. This module only relies on the
methods shared by all expressions (variable_vector(), coefficients() or
linear_coeff(), constant(), variable_part(), constant_part(), ...) so that it
does not depend on the expression modules.
"""

import enum
import math
from typing import Any, Dict, Generic, List, Mapping, NoReturn, Tuple, TypeVar

import numpy as np

from mathprog.python import errors

_CHAINED_COMPARISON_MESSAGE = (
    "If you were trying to create a ranged constraint of the form "
    "`lb <= expr <= ub`, add `lb <= expr` and `expr <= ub` as two "
    "constraints instead"
)

# Relative tolerance when comparing the coefficients of two constraints.
_RELATIVE_TOLERANCE = 1e-9


@enum.unique
class ConstraintSense(enum.Enum):
    LESS_EQUAL = "<="
    GREATER_EQUAL = ">="
    EQUAL = "="


T = TypeVar("T")

# Coefficients keyed by variable id, the bound and the sense of a linear
# constraint with GREATER_EQUAL turned into LESS_EQUAL.
_NormalizedRow = Tuple[Dict[int, float], float, ConstraintSense]


def _raise_bool_not_supported(class_name: str) -> NoReturn:
    raise TypeError(
        f"__bool__ is unsupported for {class_name}\n{_CHAINED_COMPARISON_MESSAGE}"
    )


class _Constraint(Generic[T]):
    """Fields and helpers shared by ScalarConstraint and VectorConstraint."""

    __slots__ = "_lhs", "_rhs", "_sense"

    def __init__(self, lhs: T, rhs: T, sense: ConstraintSense) -> None:
        if not isinstance(sense, ConstraintSense):
            raise TypeError(f"sense should be a ConstraintSense, got: {sense!r}")
        self._lhs: T = lhs
        self._rhs: T = rhs
        self._sense: ConstraintSense = sense

    @property
    def lhs(self) -> T:
        return self._lhs

    @property
    def rhs(self) -> T:
        return self._rhs

    @property
    def sense(self) -> ConstraintSense:
        return self._sense

    def is_linear(self) -> bool:
        return self._lhs.is_linear() and self._rhs.is_linear()

    def simplify(self):
        """Returns an equivalent constraint with every variable on the left.

        The variable part of the right hand side is subtracted from both sides,
        so the right hand side of the result is a constant. The constant of the
        left hand side is kept where it is.
        """
        if not self._rhs.variable_vector():
            return type(self)(self._lhs, self._rhs.constant_part(), self._sense)
        lhs = self._lhs.plus(self._rhs.variable_part().multiply(-1.0))
        return type(self)(lhs, self._rhs.constant_part(), self._sense)

    def implies_this_is_also_satisfied(self, other: Any) -> bool:
        """Returns true when every point satisfying self also satisfies other.

        The check is sound but incomplete: a False result does not prove that
        other can be violated. Only linear constraints that share the same
        coefficients, up to sign for equalities, are compared; anything else
        returns False.

        Args:
          other: a ScalarConstraint or a VectorConstraint.
        """
        if not isinstance(other, _Constraint):
            raise errors.UnexpectedInputError("implies_this_is_also_satisfied", other)
        if not self.is_linear() or not other.is_linear():
            return False
        own_rows = self._normalized_rows()
        return all(
            any(_row_implies(own, row) for own in own_rows)
            for row in other._normalized_rows()
        )

    def _normalized_rows(self) -> List[_NormalizedRow]:
        raise NotImplementedError()

    def __bool__(self) -> bool:
        _raise_bool_not_supported(type(self).__name__)

    def __str__(self):
        return f"{self._lhs!s} {self._sense.value} {self._rhs!s}"


class ScalarConstraint(_Constraint[Any]):
    """A constraint `lhs sense rhs` between two scalar expressions.

    This class is immutable.
    """

    __slots__ = ()

    def check(self) -> None:
        """Raises MalformedExpressionError if either side is malformed."""
        self._lhs.check()
        self._rhs.check()

    def linear_row(self, column_index: Mapping[int, int]) -> Tuple[np.ndarray, float]:
        """Returns (a, b) such that the constraint reads `a . x sense b`.

        Args:
          column_index: maps each variable id to its column, the length of a is
            len(column_index).

        Raises:
          ValueError: if the constraint is not linear.
          VariableNotFoundError: if a variable is not in column_index.
        """
        if not self.is_linear():
            raise ValueError(f"the constraint {self} is not linear")
        simplified = self.simplify()
        a = np.zeros(len(column_index))
        lhs = simplified.lhs
        for v, coefficient in zip(lhs.variable_vector(), lhs.coefficients()):
            a[_column_of(v.id, column_index)] += coefficient
        return a, simplified.rhs.constant() - lhs.constant()

    def _normalized_rows(self) -> List[_NormalizedRow]:
        simplified = self.simplify()
        lhs = simplified.lhs
        coefficients: Dict[int, float] = {}
        for v, coefficient in zip(lhs.variable_vector(), lhs.coefficients()):
            coefficients[v.id] = coefficients.get(v.id, 0.0) + coefficient
        return [
            _normalize(
                coefficients, simplified.rhs.constant() - lhs.constant(), self._sense
            )
        ]

    def __repr__(self):
        return (
            f"ScalarConstraint({self._lhs!r}, {self._rhs!r}, {self._sense})"
        )


class VectorConstraint(_Constraint[Any]):
    """A constraint `lhs sense rhs` between two vector expressions.

    It stands for one scalar constraint per entry of the vectors. Both sides must
    have the same length and orientation, see check().

    This class is immutable.
    """

    __slots__ = ()

    def __len__(self) -> int:
        return len(self._lhs)

    def check(self) -> None:
        """Raises if the sides do not have the same length and orientation.

        Raises:
          DimensionMismatchError: if the lengths differ.
          OrientationMismatchError: if the orientations differ.
          MalformedExpressionError: if either side is malformed.
        """
        if len(self._lhs) != len(self._rhs):
            raise errors.DimensionMismatchError(
                "comparison", self._lhs.dimensions(), self._rhs.dimensions()
            )
        if self._lhs.orientation != self._rhs.orientation:
            raise errors.OrientationMismatchError("comparison", self._lhs, self._rhs)
        self._lhs.check()
        self._rhs.check()

    def at(self, i: int) -> ScalarConstraint:
        """Returns the scalar constraint on the i-th entry of both sides."""
        return ScalarConstraint(self._lhs.at(i), self._rhs.at(i), self._sense)

    def linear_rows(
        self, column_index: Mapping[int, int]
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Returns (A, b) such that the constraint reads `A x sense b`.

        Args:
          column_index: maps each variable id to its column, A has
            len(column_index) columns and one row per entry of the constraint.

        Raises:
          ValueError: if the constraint is not linear.
          VariableNotFoundError: if a variable is not in column_index.
        """
        if not self.is_linear():
            raise ValueError(f"the constraint {self} is not linear")
        simplified = self.simplify()
        lhs = simplified.lhs
        matrix = lhs.linear_coeff()
        a = np.zeros((len(lhs), len(column_index)))
        for k, v in enumerate(lhs.variable_vector()):
            a[:, _column_of(v.id, column_index)] += matrix[:, k]
        return a, simplified.rhs.constant() - lhs.constant()

    def _normalized_rows(self) -> List[_NormalizedRow]:
        simplified = self.simplify()
        lhs = simplified.lhs
        matrix = lhs.linear_coeff()
        b = simplified.rhs.constant() - lhs.constant()
        rows = []
        for i in range(len(lhs)):
            coefficients: Dict[int, float] = {}
            for k, v in enumerate(lhs.variable_vector()):
                coefficients[v.id] = coefficients.get(v.id, 0.0) + matrix[i, k]
            rows.append(_normalize(coefficients, b[i], self._sense))
        return rows

    def __repr__(self):
        return (
            f"VectorConstraint({self._lhs!r}, {self._rhs!r}, {self._sense})"
        )


def _column_of(variable_id: int, column_index: Mapping[int, int]) -> int:
    if variable_id not in column_index:
        raise errors.VariableNotFoundError(variable_id, "the problem")
    return column_index[variable_id]


def _normalize(
    coefficients: Dict[int, float], bound: float, sense: ConstraintSense
) -> _NormalizedRow:
    coefficients = {k: v for k, v in coefficients.items() if v != 0.0}
    if sense == ConstraintSense.GREATER_EQUAL:
        return (
            {k: -v for k, v in coefficients.items()},
            -bound,
            ConstraintSense.LESS_EQUAL,
        )
    return coefficients, float(bound), sense


def _same_coefficients(lhs: Dict[int, float], rhs: Dict[int, float]) -> bool:
    if lhs.keys() != rhs.keys():
        return False
    return all(
        math.isclose(v, rhs[k], rel_tol=_RELATIVE_TOLERANCE) for k, v in lhs.items()
    )


def _row_implies(row: _NormalizedRow, other: _NormalizedRow) -> bool:
    """Returns true if `row` implies `other`, both normalized."""
    coefficients, bound, sense = row
    other_coefficients, other_bound, other_sense = other
    if _same_coefficients(coefficients, other_coefficients):
        if sense == ConstraintSense.EQUAL:
            if other_sense == ConstraintSense.EQUAL:
                return math.isclose(bound, other_bound, rel_tol=_RELATIVE_TOLERANCE)
            return bound <= other_bound
        return other_sense == ConstraintSense.LESS_EQUAL and bound <= other_bound
    if sense == ConstraintSense.EQUAL and other_sense == ConstraintSense.LESS_EQUAL:
        negated = {k: -v for k, v in coefficients.items()}
        if _same_coefficients(negated, other_coefficients):
            return -bound <= other_bound
    return False
