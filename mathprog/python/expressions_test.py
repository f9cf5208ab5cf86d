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

from absl.testing import absltest
from absl.testing import parameterized
import numpy as np
from numpy import testing as np_testing

from mathprog.python import constraints
from mathprog.python import errors
from mathprog.python import expressions
from mathprog.python import matrix_expressions
from mathprog.python import variables
from mathprog.python import vector_expressions


class AsExpressionTest(parameterized.TestCase):

    def test_number(self) -> None:
        e = expressions.as_expression(2)
        self.assertIsInstance(e, variables.K)
        self.assertEqual(e.value, 2.0)

    def test_expression_unchanged(self) -> None:
        x = variables.Variable(0)
        self.assertIs(expressions.as_expression(x), x)

    def test_arrays(self) -> None:
        self.assertIsInstance(
            expressions.as_expression(np.array([1.0, 2.0])), vector_expressions.KVector
        )
        self.assertIsInstance(
            expressions.as_expression(np.identity(2)), matrix_expressions.KMatrix
        )

    @parameterized.named_parameters(
        ("string", "a"),
        ("bool", True),
        ("three_dimensions", np.zeros((2, 2, 2))),
    )
    def test_unexpected(self, value) -> None:
        with self.assertRaises(errors.UnexpectedInputError):
            expressions.as_expression(value)


class FastSumTest(absltest.TestCase):

    def test_empty(self) -> None:
        e = expressions.fast_sum([])
        self.assertIsInstance(e, variables.K)
        self.assertEqual(e.value, 0.0)

    def test_numbers(self) -> None:
        e = expressions.fast_sum([1, 2.5])
        self.assertIsInstance(e, variables.K)
        self.assertEqual(e.value, 3.5)

    def test_linear(self) -> None:
        x = variables.Variable(0)
        y = variables.Variable(1)
        e = expressions.fast_sum([x, 2 * y, 1.0, x + 3])
        self.assertIsInstance(e, variables.ScalarLinearExpression)
        self.assertEqual(e.variable_ids(), [0, 1])
        np_testing.assert_array_equal(e.l, [2.0, 2.0])
        self.assertEqual(e.c, 4.0)

    def test_generator(self) -> None:
        xs = [variables.Variable(i) for i in range(4)]
        e = expressions.fast_sum(i * x for i, x in enumerate(xs))
        np_testing.assert_array_equal(e.l, [0.0, 1.0, 2.0, 3.0])

    def test_quadratic(self) -> None:
        x = variables.Variable(0)
        e = expressions.fast_sum([x * x, x, 1.0])
        self.assertIsInstance(e, variables.ScalarQuadraticExpression)
        self.assertEqual(e.evaluate({0: 2.0}), 7.0)

    def test_vectors(self) -> None:
        x = vector_expressions.VarVector([variables.Variable(0), variables.Variable(1)])
        e = expressions.fast_sum([x, x, np.array([1.0, 2.0])])
        self.assertIsInstance(e, vector_expressions.VectorLinearExpression)
        np_testing.assert_array_equal(e.l, 2 * np.identity(2))
        np_testing.assert_array_equal(e.c, [1.0, 2.0])


class FunctionsTest(absltest.TestCase):

    def test_plus_and_multiply_promote_numbers(self) -> None:
        x = variables.Variable(0)
        e = expressions.plus(1, x)
        self.assertIsInstance(e, variables.ScalarLinearExpression)
        self.assertEqual(e.c, 1.0)
        m = expressions.multiply(np.identity(2), vector_expressions.KVector([1, 2]))
        np_testing.assert_array_equal(m.values, [1.0, 2.0])

    def test_comparisons(self) -> None:
        x = vector_expressions.VarVector([variables.Variable(0), variables.Variable(1)])
        c = expressions.less_eq(np.array([1.0, 2.0]), x)
        self.assertIsInstance(c, constraints.VectorConstraint)
        self.assertEqual(c.sense, constraints.ConstraintSense.LESS_EQUAL)
        self.assertIsInstance(c.lhs, vector_expressions.KVector)
        self.assertEqual(
            expressions.greater_eq(x, 0).sense,
            constraints.ConstraintSense.GREATER_EQUAL,
        )
        self.assertEqual(
            expressions.eq(variables.Variable(0), 1).sense,
            constraints.ConstraintSense.EQUAL,
        )

    def test_transpose(self) -> None:
        t = expressions.transpose(np.array([1.0, 2.0]))
        self.assertEqual(t.orientation, vector_expressions.Orientation.ROW)


class EvaluateExpressionTest(absltest.TestCase):

    def test_scalar(self) -> None:
        x0 = variables.Variable(0)
        x1 = variables.Variable(1)
        self.assertEqual(
            expressions.evaluate_expression(2 * x0 + x1 + 1, {0: 2.0, 1: 3.0}), 8.0
        )

    def test_number(self) -> None:
        self.assertEqual(expressions.evaluate_expression(3, {}), 3.0)

    def test_vector(self) -> None:
        x = vector_expressions.VarVector([variables.Variable(0), variables.Variable(1)])
        np_testing.assert_array_equal(
            expressions.evaluate_expression(
                np.array([[1.0, 1.0], [1.0, -1.0]]) @ x, {0: 3.0, 1: 1.0}
            ),
            [4.0, 2.0],
        )

    def test_missing_value(self) -> None:
        x = variables.Variable(4)
        with self.assertRaises(errors.VariableNotFoundError):
            expressions.evaluate_expression(x + 1, {0: 1.0})


if __name__ == "__main__":
    absltest.main()
