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

"""Module exporting all classes and functions needed for mathprog.

This module defines aliases to all classes and functions needed for regular use
of mathprog. It removes the need for users to have multiple imports for
specific sub-modules.

For example instead of:
  from mathprog.python import objectives
  from mathprog.python import problem

  p = problem.OptimizationProblem()
  x = p.add_variable_vector(2)
  p.set_objective(x[0] + x[1], objectives.ObjectiveSense.MAXIMIZE)

we can simply do:
  from mathprog.python import mathprog

  p = mathprog.OptimizationProblem()
  x = p.add_variable_vector(2)
  p.set_objective(x[0] + x[1], mathprog.ObjectiveSense.MAXIMIZE)
"""

# pylint: disable=unused-import
# pylint: disable=g-importing-member

from mathprog.python.constraints import ConstraintSense
from mathprog.python.constraints import ScalarConstraint
from mathprog.python.constraints import VectorConstraint
from mathprog.python.errors import DegreeExceededError
from mathprog.python.errors import DimensionMismatchError
from mathprog.python.errors import MalformedExpressionError
from mathprog.python.errors import MathProgError
from mathprog.python.errors import NoEqualityConstraintsFoundError
from mathprog.python.errors import NoInequalityConstraintsFoundError
from mathprog.python.errors import NonlinearityCause
from mathprog.python.errors import NoObjectiveDefinedError
from mathprog.python.errors import NotWellDefinedError
from mathprog.python.errors import ObjectiveNotScalarError
from mathprog.python.errors import OrientationMismatchError
from mathprog.python.errors import ProblemNotLinearError
from mathprog.python.errors import UnexpectedInputError
from mathprog.python.errors import VariableNotFoundError
from mathprog.python.expressions import as_expression
from mathprog.python.expressions import comparison
from mathprog.python.expressions import eq
from mathprog.python.expressions import evaluate_expression
from mathprog.python.expressions import fast_sum
from mathprog.python.expressions import greater_eq
from mathprog.python.expressions import less_eq
from mathprog.python.expressions import multiply
from mathprog.python.expressions import plus
from mathprog.python.expressions import transpose
from mathprog.python.matrix_expressions import KMatrix
from mathprog.python.matrix_expressions import VarMatrix
from mathprog.python.objectives import as_objective_expression
from mathprog.python.objectives import Objective
from mathprog.python.objectives import ObjectiveSense
from mathprog.python.parameters import SolveParameters
from mathprog.python.problem import Constraint
from mathprog.python.problem import OptimizationProblem
from mathprog.python.solution import evaluate
from mathprog.python.solution import objective_value_of
from mathprog.python.solution import Solution
from mathprog.python.solution import SolutionStatus
from mathprog.python.solution import value_of
from mathprog.python.solver import solve
from mathprog.python.solver import Solver
from mathprog.python.variables import Expression
from mathprog.python.variables import index_map
from mathprog.python.variables import index_of
from mathprog.python.variables import is_a_number
from mathprog.python.variables import K
from mathprog.python.variables import NumberT
from mathprog.python.variables import ScalarExpression
from mathprog.python.variables import ScalarLinearExpression
from mathprog.python.variables import ScalarQuadraticExpression
from mathprog.python.variables import ScalarTypes
from mathprog.python.variables import unique_variables
from mathprog.python.variables import values_of
from mathprog.python.variables import VarEqVar
from mathprog.python.variables import Variable
from mathprog.python.variables import VarType
from mathprog.python.vector_expressions import KVector
from mathprog.python.vector_expressions import Orientation
from mathprog.python.vector_expressions import rewrite_columns
from mathprog.python.vector_expressions import VarVector
from mathprog.python.vector_expressions import VectorExpression
from mathprog.python.vector_expressions import VectorLinearExpression

# pylint: enable=unused-import
# pylint: enable=g-importing-member
