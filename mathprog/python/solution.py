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

"""The solution to an optimization problem, as returned by a Solver."""

import dataclasses
import enum
from typing import Any, Mapping, Union

import immutabledict
import numpy as np

from mathprog.python import errors
from mathprog.python import expressions
from mathprog.python import problem as problem_lib
from mathprog.python import variables


@enum.unique
class SolutionStatus(enum.Enum):
    """The outcome of a solve, using Gurobi's status codes.

    Attributes:
      LOADED: The problem is loaded, but no solution information is available.
      OPTIMAL: The problem was solved to optimality.
      INFEASIBLE: The problem was proven infeasible.
      INF_OR_UNBD: The problem was proven either infeasible or unbounded.
      UNBOUNDED: The problem was proven unbounded.
      CUTOFF: The optimal objective is worse than the cutoff parameter.
      ITERATION_LIMIT: The iteration limit was reached.
      NODE_LIMIT: The branch and bound node limit was reached.
      TIME_LIMIT: The time limit was reached.
      SOLUTION_LIMIT: The limit on the number of solutions was reached.
      INTERRUPTED: The solve was interrupted by the user.
      NUMERIC: The solve stopped on unrecoverable numerical difficulties.
      SUBOPTIMAL: A sub-optimal solution is available.
      INPROGRESS: The solve is still running.
      USER_OBJ_LIMIT: The user specified objective limit was reached.
      WORK_LIMIT: The work limit was reached.
    """

    LOADED = 1
    OPTIMAL = 2
    INFEASIBLE = 3
    INF_OR_UNBD = 4
    UNBOUNDED = 5
    CUTOFF = 6
    ITERATION_LIMIT = 7
    NODE_LIMIT = 8
    TIME_LIMIT = 9
    SOLUTION_LIMIT = 10
    INTERRUPTED = 11
    NUMERIC = 12
    SUBOPTIMAL = 13
    INPROGRESS = 14
    USER_OBJ_LIMIT = 15
    WORK_LIMIT = 16


@dataclasses.dataclass(frozen=True)
class Solution:
    """A solution to an OptimizationProblem.

    Attributes:
      variable_values: The value assigned to each variable, keyed by variable id.
      objective_value: The value of the objective at this solution.
      status: The outcome of the solve.
    """

    variable_values: Mapping[int, float] = immutabledict.immutabledict()
    objective_value: float = 0.0
    status: SolutionStatus = SolutionStatus.LOADED

    def __post_init__(self) -> None:
        # Freeze the values given by the solver.
        object.__setattr__(
            self,
            "variable_values",
            immutabledict.immutabledict(
                {int(k): float(v) for k, v in self.variable_values.items()}
            ),
        )


def value_of(solution: Solution, variable: variables.Variable) -> float:
    """Returns the value of variable in solution.

    Raises:
      VariableNotFoundError: if the solution has no value for variable.
    """
    if variable.id not in solution.variable_values:
        raise errors.VariableNotFoundError(variable.id, "the solution")
    return solution.variable_values[variable.id]


def evaluate(solution: Solution, expression: Any) -> Union[float, np.ndarray]:
    """Returns the value of expression at solution.

    E.g. if expression = 2 * x0 + x1 + 1 and the solution has x0 = 2 and x1 = 3,
    then evaluate(solution, expression) equals 8.0.

    Args:
      solution: the solution giving a value to every variable of expression.
      expression: a number or an expression.

    Returns:
      A float for scalar expressions, a 1-D numpy array for vector expressions.

    Raises:
      VariableNotFoundError: if a variable of expression has no value.
    """
    return expressions.evaluate_expression(expression, solution.variable_values)


def objective_value_of(
    solution: Solution, problem: problem_lib.OptimizationProblem
) -> float:
    """Returns the value of the objective of problem at solution.

    Raises:
      NoObjectiveDefinedError: if problem has no objective.
      VariableNotFoundError: if a variable of the objective has no value.
    """
    if problem.objective is None:
        raise errors.NoObjectiveDefinedError(problem.name)
    return problem.objective.expression.evaluate(solution.variable_values)
