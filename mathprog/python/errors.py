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

"""Errors raised while building and inspecting optimization problems.

Each error also derives from the standard Python error a user would expect if
they only caught builtin exceptions:
- shape, degree and malformed data problems: ValueError
- operands of an unsupported type: TypeError
- unknown variables: KeyError
- requests for constraints that do not exist: LookupError
"""

import enum
from typing import Any, Optional, Sequence


class MathProgError(Exception):
    """Base class of all the errors raised by mathprog."""


def _dims_as_string(dims: Sequence[int]) -> str:
    return "(" + ",".join(str(d) for d in dims) + ")"


class DimensionMismatchError(MathProgError, ValueError):
    """The shapes of two operands are incompatible for an operation."""

    def __init__(
        self,
        operation: str,
        lhs_dims: Sequence[int],
        rhs_dims: Sequence[int],
        extra_message: Optional[str] = None,
    ) -> None:
        self.operation = operation
        self.lhs_dims = tuple(lhs_dims)
        self.rhs_dims = tuple(rhs_dims)
        message = (
            f"cannot perform {operation} between expression of dimension"
            f" {_dims_as_string(self.lhs_dims)} and expression of dimension"
            f" {_dims_as_string(self.rhs_dims)}"
        )
        if extra_message is not None:
            message += "; " + extra_message
        super().__init__(message)


class OrientationMismatchError(MathProgError, ValueError):
    """A row vector and a column vector were combined where it is not allowed."""

    def __init__(self, operation: str, lhs: Any, rhs: Any) -> None:
        self.operation = operation
        super().__init__(
            f"cannot perform {operation} between {type(lhs).__name__!r} with"
            f" orientation {lhs.orientation.name} and {type(rhs).__name__!r} with"
            f" orientation {rhs.orientation.name}; try transposing one or the"
            " other"
        )


class DegreeExceededError(MathProgError, ValueError):
    """A product would create a polynomial of degree 3 or more."""

    def __init__(self, lhs: Any, rhs: Any) -> None:
        super().__init__(
            f"cannot multiply {type(lhs).__name__!r} with {type(rhs).__name__!r}:"
            " expressions of degree higher than 2 can not be represented"
        )


class UnexpectedInputError(MathProgError, TypeError):
    """An operand is not one of the supported expression types."""

    def __init__(self, operation: str, value: Any) -> None:
        self.operation = operation
        self.value = value
        super().__init__(
            f"unexpected input to {operation!r} operation: {type(value).__name__!r}"
        )


class VariableNotFoundError(MathProgError, KeyError):
    """A variable is missing from a variable vector, a problem or a solution."""

    def __init__(self, variable_id: int, where: str) -> None:
        self.variable_id = variable_id
        super().__init__(f"variable with id {variable_id} was not found in {where}")

    def __str__(self) -> str:
        # KeyError.__str__ would quote the whole message.
        return str(self.args[0])


class MalformedExpressionError(MathProgError, ValueError):
    """The internal data of an expression is inconsistent."""


class NoObjectiveDefinedError(MathProgError, ValueError):
    """The problem has no objective, set one with set_objective()."""

    def __init__(self, problem_name: str = "") -> None:
        self.problem_name = problem_name
        super().__init__(
            f"no objective defined for the optimization problem {problem_name!r};"
            " please define one with set_objective()"
        )


class NoEqualityConstraintsFoundError(MathProgError, LookupError):
    """Equality matrices were requested on a problem without linear equalities."""

    def __init__(self, problem_name: str = "") -> None:
        super().__init__(
            f"no linear equality constraints found in the problem {problem_name!r};"
            " add some with add_constraint()"
        )


class NoInequalityConstraintsFoundError(MathProgError, LookupError):
    """Inequality matrices were requested on a problem without linear inequalities."""

    def __init__(self, problem_name: str = "") -> None:
        super().__init__(
            "no linear inequality constraints found in the problem"
            f" {problem_name!r}; add some with add_constraint()"
        )


@enum.unique
class NonlinearityCause(enum.Enum):
    """The part of a problem that prevents it from being linear."""

    OBJECTIVE = "Objective"
    CONSTRAINT = "Constraint"
    NOT_WELL_DEFINED = "NotWellDefined"


class ProblemNotLinearError(MathProgError, ValueError):
    """A linear-only operation was applied to a problem that is not linear."""

    def __init__(
        self,
        problem_name: str,
        cause: NonlinearityCause,
        constraint_index: Optional[int] = None,
    ) -> None:
        self.problem_name = problem_name
        self.cause = cause
        self.constraint_index = constraint_index
        message = f"the problem {problem_name!r} is not linear"
        if cause == NonlinearityCause.OBJECTIVE:
            message += "; the objective is not linear"
        elif cause == NonlinearityCause.CONSTRAINT:
            message += f"; constraint #{constraint_index} is not linear"
        else:
            message += "; the problem is not well defined"
        super().__init__(message)


class NotWellDefinedError(MathProgError, ValueError):
    """The problem fails its structural check()."""

    def __init__(self, problem_name: str, source: Exception) -> None:
        self.problem_name = problem_name
        self.source = source
        super().__init__(f"the problem {problem_name!r} is not well defined: {source}")


class ObjectiveNotScalarError(MathProgError, TypeError):
    """The expression given as objective is not a scalar expression."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            "the objective must be a scalar expression, got"
            f" {type(value).__name__!r}"
        )
