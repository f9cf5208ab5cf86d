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

"""An Objective for an optimization problem."""

import enum
from typing import Any

from mathprog.python import errors
from mathprog.python import variables


@enum.unique
class ObjectiveSense(enum.Enum):
    """The direction of the optimization.

    FIND only asks for a feasible point, the objective expression is ignored by
    solvers.
    """

    MINIMIZE = 1
    MAXIMIZE = -1
    FIND = 0


class Objective:
    """The objective of an optimization problem: a scalar expression and a sense.

    The expression is linear or quadratic:
      min  x' Q x + l . x + c
    or
      max  x' Q x + l . x + c

    Do not create an Objective directly, use
    OptimizationProblem.set_objective() instead.

    This class is immutable.
    """

    __slots__ = "_expression", "_sense"

    def __init__(
        self, expression: variables.ScalarExpression, sense: ObjectiveSense
    ) -> None:
        if not isinstance(expression, variables.ScalarExpression):
            raise errors.ObjectiveNotScalarError(expression)
        if not isinstance(sense, ObjectiveSense):
            raise TypeError(f"sense should be an ObjectiveSense, got: {sense!r}")
        self._expression: variables.ScalarExpression = expression
        self._sense: ObjectiveSense = sense

    @property
    def expression(self) -> variables.ScalarExpression:
        return self._expression

    @property
    def sense(self) -> ObjectiveSense:
        return self._sense

    @property
    def is_maximize(self) -> bool:
        return self._sense == ObjectiveSense.MAXIMIZE

    def check(self) -> None:
        self._expression.check()

    def is_linear(self) -> bool:
        return self._expression.is_linear()

    def __str__(self):
        return f"{self._sense.name.lower()} {self._expression!s}"

    def __repr__(self):
        return f"Objective({self._expression!r}, {self._sense})"


def as_objective_expression(value: Any) -> variables.ScalarExpression:
    """Returns value as a scalar expression usable as an objective.

    Raises:
      ObjectiveNotScalarError: if value is a vector or a matrix, even of length 1.
      UnexpectedInputError: if value is not a number or an expression.
    """
    if variables.is_a_number(value):
        return variables.K(value)
    if isinstance(value, variables.ScalarExpression):
        return value
    if isinstance(value, variables.Expression) or hasattr(value, "shape"):
        raise errors.ObjectiveNotScalarError(value)
    raise errors.UnexpectedInputError("set_objective", value)
