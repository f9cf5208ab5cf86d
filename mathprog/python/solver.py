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

"""The boundary between optimization problems and external solvers.

No solver is implemented here. A back-end subclasses Solver, and solve() pushes
an OptimizationProblem into it.
"""

import abc
import types
from typing import Iterable, Optional, Type

from absl import logging

from mathprog.python import objectives
from mathprog.python import parameters
from mathprog.python import problem as problem_lib
from mathprog.python import solution
from mathprog.python import variables


class Solver(metaclass=abc.ABCMeta):
    """An external solver that problems are loaded into, then optimized.

    A Solver holds resources outside of Python. Call delete() when done, or use
    the solver in a `with` block:

      with MySolver() as s:
        s.add_variables(problem.variables)
        ...
        result = s.optimize()
    """

    @abc.abstractmethod
    def show_log(self, flag: bool) -> None:
        """Enables or disables the solver logs."""

    @abc.abstractmethod
    def set_time_limit(self, seconds: float) -> None:
        """Sets the maximum time the solver should spend on optimize()."""

    @abc.abstractmethod
    def add_variable(self, variable: variables.Variable) -> None:
        """Adds a variable, with its bounds and type, to the solver."""

    def add_variables(self, variables_to_add: Iterable[variables.Variable]) -> None:
        for variable in variables_to_add:
            self.add_variable(variable)

    @abc.abstractmethod
    def add_constraint(self, constraint: problem_lib.Constraint) -> None:
        """Adds a scalar or vector constraint to the solver."""

    @abc.abstractmethod
    def set_objective(self, objective: objectives.Objective) -> None:
        """Sets the objective, the expression is ignored when the sense is FIND."""

    @abc.abstractmethod
    def optimize(self) -> solution.Solution:
        """Runs the solver and returns the solution it found."""

    @abc.abstractmethod
    def delete(self) -> None:
        """Releases the resources of the solver, it can not be used afterwards."""

    def __enter__(self) -> "Solver":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        self.delete()


def solve(
    problem: problem_lib.OptimizationProblem,
    solver: Solver,
    *,
    params: Optional[parameters.SolveParameters] = None,
) -> solution.Solution:
    """Loads problem into solver, optimizes and returns the solution.

    The solver is always deleted before returning, even on errors.

    Args:
      problem: The optimization problem, it must pass problem.check().
      solver: A fresh solver, problem is added to it.
      params: Configuration of the underlying solver.

    Returns:
      The solution returned by solver.optimize().

    Raises:
      NoObjectiveDefinedError: if problem has no objective.
      NotWellDefinedError: if problem fails its other checks.
    """
    params = params or parameters.SolveParameters()
    try:
        problem.check()
        solver.show_log(params.enable_output)
        time_limit = params.time_limit_seconds()
        if time_limit is not None:
            logging.info(
                "Solving problem %r with a time limit of %g seconds",
                problem.name,
                time_limit,
            )
            solver.set_time_limit(time_limit)
        solver.add_variables(problem.variables)
        for constraint in problem.constraints:
            solver.add_constraint(constraint)
        solver.set_objective(problem.objective)
        result = solver.optimize()
    finally:
        solver.delete()
    if result.status != solution.SolutionStatus.OPTIMAL:
        logging.warning(
            "Solve of problem %r ended with status %s", problem.name, result.status.name
        )
    return result
