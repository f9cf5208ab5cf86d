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

"""Tests for mathprog."""
import inspect
import types
import typing
from typing import Any, List, Set, Tuple

from absl.testing import absltest
import numpy as np
from numpy import testing as np_testing

from mathprog.python import constraints
from mathprog.python import errors
from mathprog.python import expressions
from mathprog.python import mathprog
from mathprog.python import matrix_expressions
from mathprog.python import objectives
from mathprog.python import parameters
from mathprog.python import problem
from mathprog.python import solution
from mathprog.python import solver
from mathprog.python import variables
from mathprog.python import vector_expressions

_MODULES_TO_CHECK: List[types.ModuleType] = [
    constraints,
    errors,
    expressions,
    matrix_expressions,
    objectives,
    parameters,
    problem,
    solution,
    solver,
    variables,
    vector_expressions,
]

# Some symbols are not meant to be exported; we exclude them here.
_EXCLUDED_SYMBOLS: Set[Tuple[types.ModuleType, str]] = {
    (constraints, "T"),
}

_TYPING_PUBLIC_CONTENT = [
    getattr(typing, name) for name in dir(typing) if not name.startswith("_")
]


def _is_actual_export(v: Any) -> bool:
    if inspect.ismodule(v):
        return False
    if getattr(v, "__module__", None) != typing.__name__:
        return True
    return v not in _TYPING_PUBLIC_CONTENT


def _get_public_api(module: types.ModuleType) -> List[Tuple[str, Any]]:
    tuple_list = inspect.getmembers(module, _is_actual_export)
    return [(name, obj) for name, obj in tuple_list if not name.startswith("_")]


class MathprogTest(absltest.TestCase):

    def test_imports(self) -> None:
        missing_imports: List[str] = []
        for module in _MODULES_TO_CHECK:
            for name, obj in _get_public_api(module):
                if (module, name) in _EXCLUDED_SYMBOLS:
                    continue
                if hasattr(mathprog, name):
                    self.assertIs(
                        getattr(mathprog, name),
                        obj,
                        msg=f"module: {module.__name__} name: {name}",
                    )
                else:
                    missing_imports.append(f"from {module.__name__} import {name}")
        nl = "\n"
        self.assertFalse(
            bool(missing_imports),
            msg=f"missing imports:\n{nl.join(missing_imports)}",
        )

    def test_small_problem(self) -> None:
        p = mathprog.OptimizationProblem("small")
        x = p.add_variable_vector_classic(2, 0.0, 10.0, mathprog.VarType.INTEGER)
        p.add_constraint(np.array([[1.0, 1.0]]) @ x <= np.array([4.0]))
        p.add_constraint(x[0] >= 1)
        p.set_objective(mathprog.fast_sum(x), mathprog.ObjectiveSense.MAXIMIZE)
        p.check_linear()
        a, b = p.linear_inequality_matrices()
        np_testing.assert_array_equal(a, [[-1.0, 0.0], [1.0, 1.0]])
        np_testing.assert_array_equal(b, [-1.0, 4.0])
        s = mathprog.Solution({0: 1.0, 1: 3.0}, 4.0, mathprog.SolutionStatus.OPTIMAL)
        self.assertEqual(mathprog.objective_value_of(s, p), 4.0)


if __name__ == "__main__":
    absltest.main()
