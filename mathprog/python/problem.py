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

"""An optimization problem: variables, constraints and an objective.

Typical usage:

  problem = OptimizationProblem("diet")
  x = problem.add_variable_vector_classic(3, 0.0, math.inf, VarType.CONTINUOUS)
  problem.add_constraint(A @ x <= b)
  problem.set_objective(c @ x, ObjectiveSense.MINIMIZE)
  a, b = problem.linear_inequality_matrices()
"""

import math
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from absl import logging
import numpy as np

from mathprog.python import constraints as constraints_mod
from mathprog.python import errors
from mathprog.python import matrix_expressions
from mathprog.python import objectives
from mathprog.python import variables as variables_mod
from mathprog.python import vector_expressions

Constraint = Union[constraints_mod.ScalarConstraint, constraints_mod.VectorConstraint]


def _same_variable(a: variables_mod.Variable, b: variables_mod.Variable) -> bool:
    """Compares by value, expressions may hold copies of the problem variables."""
    return a is b or (
        a.id == b.id
        and a.lower_bound == b.lower_bound
        and a.upper_bound == b.upper_bound
        and a.var_type == b.var_type
    )


class OptimizationProblem:
    """A mixed integer linear or quadratic optimization problem.

    Variables are created by the problem, with ids 0, 1, ..., N - 1 in creation
    order, and the id of a variable is also its column in the matrices returned by
    linear_inequality_matrices() and linear_equality_matrices().

    Constraints are kept in the order they were added. Variables and constraints
    can not be deleted.

    This class is not thread safe.
    """

    __slots__ = "_name", "_variables", "_constraints", "_objective", "_column_index"

    def __init__(self, name: str = "") -> None:
        self._name: str = name
        self._variables: List[variables_mod.Variable] = []
        self._constraints: List[Constraint] = []
        self._objective: Optional[objectives.Objective] = None
        self._column_index: Dict[int, int] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def variables(self) -> Tuple[variables_mod.Variable, ...]:
        return tuple(self._variables)

    @property
    def constraints(self) -> Tuple[Constraint, ...]:
        return tuple(self._constraints)

    @property
    def objective(self) -> Optional[objectives.Objective]:
        return self._objective

    def num_variables(self) -> int:
        return len(self._variables)

    def num_constraints(self) -> int:
        return len(self._constraints)

    ##############################################################################
    # Variables
    ##############################################################################

    def add_variable_classic(
        self,
        lower: float = -math.inf,
        upper: float = math.inf,
        var_type: variables_mod.VarType = variables_mod.VarType.CONTINUOUS,
        name: str = "",
    ) -> variables_mod.Variable:
        """Adds a decision variable to the problem.

        The bounds are stored as given: lower > upper makes the problem
        infeasible and is reported by check().

        Args:
          lower: The new variable must take at least this value (a lower bound).
          upper: The new variable must be at most this value (an upper bound).
          var_type: The domain of the variable.
          name: For debugging purposes only.

        Returns:
          A reference to the new decision variable.
        """
        if not isinstance(var_type, variables_mod.VarType):
            raise TypeError(f"var_type should be a VarType, got: {var_type!r}")
        variable = variables_mod.Variable(
            len(self._variables), lower, upper, var_type, name
        )
        self._column_index[variable.id] = len(self._variables)
        self._variables.append(variable)
        return variable

    def add_real_variable(self, name: str = "") -> variables_mod.Variable:
        """Adds a continuous variable with no bounds."""
        return self.add_variable_classic(name=name)

    def add_variable(self, name: str = "") -> variables_mod.Variable:
        return self.add_real_variable(name)

    def add_binary_variable(self, name: str = "") -> variables_mod.Variable:
        return self.add_variable_classic(0.0, 1.0, variables_mod.VarType.BINARY, name)

    def add_integer_variable(
        self, lower: float = -math.inf, upper: float = math.inf, name: str = ""
    ) -> variables_mod.Variable:
        return self.add_variable_classic(
            lower, upper, variables_mod.VarType.INTEGER, name
        )

    def add_variable_vector_classic(
        self,
        n: int,
        lower: float = -math.inf,
        upper: float = math.inf,
        var_type: variables_mod.VarType = variables_mod.VarType.CONTINUOUS,
    ) -> vector_expressions.VarVector:
        """Adds n variables sharing the same bounds and type.

        Returns:
          A column vector with the new variables, in increasing id order.
        """
        if n < 0:
            raise ValueError(f"the number of variables must be non negative, got {n}")
        return vector_expressions.VarVector(
            [self.add_variable_classic(lower, upper, var_type) for _ in range(n)]
        )

    def add_variable_vector(self, n: int) -> vector_expressions.VarVector:
        return self.add_variable_vector_classic(n)

    def add_binary_variable_vector(self, n: int) -> vector_expressions.VarVector:
        return self.add_variable_vector_classic(
            n, 0.0, 1.0, variables_mod.VarType.BINARY
        )

    def add_variable_matrix(
        self,
        rows: int,
        columns: int,
        lower: float = -math.inf,
        upper: float = math.inf,
        var_type: variables_mod.VarType = variables_mod.VarType.CONTINUOUS,
    ) -> matrix_expressions.VarMatrix:
        """Adds a rows x columns grid of variables, ids assigned in row-major order."""
        if rows < 0 or columns < 0:
            raise ValueError(
                f"the matrix dimensions must be non negative, got {rows} x {columns}"
            )
        return matrix_expressions.VarMatrix(
            self.add_variable_vector_classic(
                rows * columns, lower, upper, var_type
            ).elements,
            (rows, columns),
        )

    def add_binary_variable_matrix(
        self, rows: int, columns: int
    ) -> matrix_expressions.VarMatrix:
        return self.add_variable_matrix(
            rows, columns, 0.0, 1.0, variables_mod.VarType.BINARY
        )

    def get_variable(self, vid: int) -> variables_mod.Variable:
        """Returns the variable with id vid.

        Raises:
          VariableNotFoundError: if there is no such variable.
        """
        if vid not in self._column_index:
            raise errors.VariableNotFoundError(vid, f"the problem {self._name!r}")
        return self._variables[self._column_index[vid]]

    def column_of(self, variable: variables_mod.Variable) -> int:
        """Returns the column of variable in the extracted matrices.

        Raises:
          VariableNotFoundError: if variable does not belong to this problem.
        """
        return self._column_index[self.get_variable(variable.id).id]

    ##############################################################################
    # Constraints and objective
    ##############################################################################

    def add_constraint(self, constraint: Any) -> Constraint:
        """Adds a constraint built with <=, >= or == to the problem.

        Structural problems (e.g. vectors of different lengths) are reported by
        check(), not here.

        Args:
          constraint: a ScalarConstraint, a VectorConstraint or the result of
            `x == y` for two variables.

        Returns:
          The constraint that was added.
        """
        if isinstance(constraint, variables_mod.VarEqVar):
            constraint = constraint.to_constraint()
        if not isinstance(
            constraint,
            (constraints_mod.ScalarConstraint, constraints_mod.VectorConstraint),
        ):
            raise errors.UnexpectedInputError("add_constraint", constraint)
        self._constraints.append(constraint)
        return constraint

    def add_constraints(self, constraints_to_add: Iterable[Any]) -> List[Constraint]:
        return [self.add_constraint(c) for c in constraints_to_add]

    def set_objective(
        self,
        expression: Any,
        sense: objectives.ObjectiveSense = objectives.ObjectiveSense.MINIMIZE,
    ) -> objectives.Objective:
        """Sets the objective, replacing any previous one.

        Args:
          expression: a number or a scalar expression.
          sense: the direction of the optimization.

        Returns:
          The new objective.

        Raises:
          ObjectiveNotScalarError: if expression is a vector, even of length one.
        """
        self._objective = objectives.Objective(
            objectives.as_objective_expression(expression), sense
        )
        return self._objective

    def check(self) -> None:
        """Checks that the problem is well defined.

        The checks run in this order: an objective is set, the objective is well
        formed, every variable has consistent bounds, every constraint is well
        formed and every variable used belongs to the problem.

        Raises:
          NoObjectiveDefinedError: if no objective was set.
          NotWellDefinedError: if any of the other checks fails, with the
            original error as source.
        """
        if self._objective is None:
            raise errors.NoObjectiveDefinedError(self._name)
        try:
            self._objective.check()
            for variable in self._variables:
                variable.check()
            for constraint in self._constraints:
                constraint.check()
            self._check_variables_belong_to_problem(self._objective.expression)
            for constraint in self._constraints:
                self._check_variables_belong_to_problem(constraint.lhs)
                self._check_variables_belong_to_problem(constraint.rhs)
        except errors.MathProgError as e:
            raise errors.NotWellDefinedError(self._name, e) from e

    def _check_variables_belong_to_problem(
        self, expression: variables_mod.Expression
    ) -> None:
        for variable in expression.variable_vector():
            if not _same_variable(self.get_variable(variable.id), variable):
                raise errors.VariableNotFoundError(
                    variable.id, f"the problem {self._name!r}"
                )

    def is_linear(self) -> bool:
        """Returns true if the objective, if set, and every constraint are linear."""
        if self._objective is not None and not self._objective.is_linear():
            return False
        return all(c.is_linear() for c in self._constraints)

    def check_linear(self) -> None:
        """Checks that the problem is well defined and linear.

        Raises:
          ProblemNotLinearError: with cause NOT_WELL_DEFINED if check() fails,
            OBJECTIVE if the objective is quadratic, or CONSTRAINT and the index of
            the first quadratic constraint.
        """
        try:
            self.check()
        except errors.MathProgError as e:
            raise errors.ProblemNotLinearError(
                self._name, errors.NonlinearityCause.NOT_WELL_DEFINED
            ) from e
        if not self._objective.is_linear():
            raise errors.ProblemNotLinearError(
                self._name, errors.NonlinearityCause.OBJECTIVE
            )
        for index, constraint in enumerate(self._constraints):
            if not constraint.is_linear():
                raise errors.ProblemNotLinearError(
                    self._name, errors.NonlinearityCause.CONSTRAINT, index
                )

    def constraint_is_redundant_given_others(
        self,
        constraint: Constraint,
        others: Optional[Sequence[Constraint]] = None,
    ) -> bool:
        """Returns true if one of others is known to imply constraint.

        See implies_this_is_also_satisfied(): a False result does not prove that
        the constraint is needed.

        Args:
          constraint: the constraint to test.
          others: the constraints to test against, the constraints of the problem
            if None. constraint itself is skipped.
        """
        if others is None:
            others = self._constraints
        return any(
            other.implies_this_is_also_satisfied(constraint)
            for other in others
            if other is not constraint
        )

    ##############################################################################
    # Matrix extraction
    ##############################################################################

    def linear_inequality_matrices(
        self, *, allow_empty: bool = True
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Returns (A, b) such that the linear inequalities read A x <= b.

        The rows of the scalar constraints come first, then one block per vector
        constraint with one row per entry, both in insertion order.
        GREATER_EQUAL constraints are negated. Non linear constraints are
        skipped.

        Args:
          allow_empty: if false, raise instead of returning an empty matrix.

        Returns:
          A of shape (rows, num_variables()) and b of shape (rows,).

        Raises:
          NoInequalityConstraintsFoundError: if allow_empty is false and there is
            no linear inequality.
        """
        a, b = self._linear_matrices(
            (
                constraints_mod.ConstraintSense.LESS_EQUAL,
                constraints_mod.ConstraintSense.GREATER_EQUAL,
            )
        )
        if not allow_empty and a.shape[0] == 0:
            raise errors.NoInequalityConstraintsFoundError(self._name)
        return a, b

    def linear_equality_matrices(
        self, *, allow_empty: bool = True
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Returns (C, d) such that the linear equalities read C x = d.

        Rows are ordered as in linear_inequality_matrices().

        Args:
          allow_empty: if false, raise instead of returning an empty matrix.

        Returns:
          C of shape (rows, num_variables()) and d of shape (rows,).

        Raises:
          NoEqualityConstraintsFoundError: if allow_empty is false and there is no
            linear equality.
        """
        c, d = self._linear_matrices((constraints_mod.ConstraintSense.EQUAL,))
        if not allow_empty and c.shape[0] == 0:
            raise errors.NoEqualityConstraintsFoundError(self._name)
        return c, d

    def _linear_matrices(
        self, senses: Sequence[constraints_mod.ConstraintSense]
    ) -> Tuple[np.ndarray, np.ndarray]:
        scalar_rows = []
        vector_blocks = []
        for index, constraint in enumerate(self._constraints):
            if constraint.sense not in senses:
                continue
            if not constraint.is_linear():
                logging.vlog(
                    1,
                    "Skipping constraint #%d of problem %r, it is not linear: %s",
                    index,
                    self._name,
                    constraint,
                )
                continue
            if isinstance(constraint, constraints_mod.ScalarConstraint):
                row, bound = constraint.linear_row(self._column_index)
                matrix = row[np.newaxis, :]
                bound = np.array([bound])
                blocks = scalar_rows
            else:
                matrix, bound = constraint.linear_rows(self._column_index)
                blocks = vector_blocks
            if constraint.sense == constraints_mod.ConstraintSense.GREATER_EQUAL:
                matrix, bound = -matrix, -bound
            logging.vlog(
                2,
                "Constraint #%d of problem %r gives %d row(s)",
                index,
                self._name,
                matrix.shape[0],
            )
            blocks.append((matrix, bound))
        # Scalar rows come first, then the vector blocks, each in insertion order.
        blocks = scalar_rows + vector_blocks
        if not blocks:
            return np.zeros((0, len(self._variables))), np.zeros(0)
        return (
            np.vstack([matrix for matrix, _ in blocks]),
            np.concatenate([bound for _, bound in blocks]),
        )

    def copy(self) -> "OptimizationProblem":
        """Returns a copy sharing the (immutable) variables and constraints."""
        result = OptimizationProblem(self._name)
        result._variables = list(self._variables)
        result._constraints = list(self._constraints)
        result._objective = self._objective
        result._column_index = dict(self._column_index)
        return result

    def __str__(self):
        lines = [f"Problem {self._name!r}"]
        if self._objective is None:
            lines.append("  no objective")
        else:
            lines.append(f"  {self._objective!s}")
        lines.append(f"  {len(self._variables)} variable(s):")
        for v in self._variables:
            lines.append(
                f"    {v!s} in [{v.lower_bound}, {v.upper_bound}]"
                f" ({v.var_type.name.lower()})"
            )
        lines.append(f"  {len(self._constraints)} constraint(s):")
        for c in self._constraints:
            lines.append(f"    {c!s}")
        return "\n".join(lines)

    def __repr__(self):
        return (
            f"<OptimizationProblem name: {self._name!r}, variables:"
            f" {len(self._variables)}, constraints: {len(self._constraints)}>"
        )
