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
from mathprog.python import matrix_expressions
from mathprog.python import variables
from mathprog.python import vector_expressions

_COLUMN = vector_expressions.Orientation.COLUMN
_ROW = vector_expressions.Orientation.ROW


def _var_vector(n: int, first_id: int = 0) -> vector_expressions.VarVector:
    return vector_expressions.VarVector(
        [variables.Variable(first_id + i) for i in range(n)]
    )


def _ids(expression: variables.Expression):
    return [v.id for v in expression.variable_vector()]


class KVectorTest(absltest.TestCase):

    def test_properties(self) -> None:
        k = vector_expressions.KVector([1, 2, 3])
        self.assertLen(k, 3)
        self.assertEqual(k.orientation, _COLUMN)
        self.assertEqual(k.dimensions(), (3, 1))
        self.assertEqual(k.transpose().dimensions(), (1, 3))
        self.assertEqual(k.variable_ids(), [])
        self.assertEqual(k.linear_coeff().shape, (3, 0))
        np_testing.assert_array_equal(k.constant(), [1.0, 2.0, 3.0])
        self.assertEqual(k.at(1).value, 2.0)
        self.assertEqual(k[2].value, 3.0)
        self.assertEqual(str(k), "[1.0, 2.0, 3.0]")
        self.assertEqual(str(k.transpose()), "[1.0, 2.0, 3.0]'")

    def test_not_one_dimensional(self) -> None:
        with self.assertRaises(errors.MalformedExpressionError):
            vector_expressions.KVector([[1.0, 2.0]])

    def test_values_are_read_only(self) -> None:
        k = vector_expressions.KVector(np.array([1.0, 2.0]))
        self.assertFalse(k.values.flags.writeable)
        e = vector_expressions.VectorLinearExpression(
            [variables.Variable(0)], [[1.0], [2.0]]
        )
        self.assertFalse(e.l.flags.writeable)
        self.assertFalse(e.c.flags.writeable)

    def test_transpose_twice(self) -> None:
        k = vector_expressions.KVector([1, 2])
        self.assertEqual(k.transpose().transpose().orientation, _COLUMN)
        np_testing.assert_array_equal(k.transpose().transpose().values, k.values)

    def test_plus(self) -> None:
        k = vector_expressions.KVector([1, 2]) + vector_expressions.KVector([3, 4])
        self.assertIsInstance(k, vector_expressions.KVector)
        np_testing.assert_array_equal(k.values, [4.0, 6.0])
        k = vector_expressions.KVector([1, 2]) + np.array([1.0, 1.0])
        np_testing.assert_array_equal(k.values, [2.0, 3.0])

    def test_scaling(self) -> None:
        k = 2 * vector_expressions.KVector([1, 2])
        self.assertIsInstance(k, vector_expressions.KVector)
        np_testing.assert_array_equal(k.values, [2.0, 4.0])
        k = vector_expressions.KVector([1, 2]) * variables.K(3)
        np_testing.assert_array_equal(k.values, [3.0, 6.0])
        k = variables.K(3) * vector_expressions.KVector([1, 2])
        np_testing.assert_array_equal(k.values, [3.0, 6.0])
        np_testing.assert_array_equal((-vector_expressions.KVector([1, 2])).values, [-1, -2])

    def test_times_variable(self) -> None:
        x = variables.Variable(4)
        e = vector_expressions.KVector([1, 2]) * x
        self.assertIsInstance(e, vector_expressions.VectorLinearExpression)
        self.assertEqual(_ids(e), [4])
        np_testing.assert_array_equal(e.l, [[1.0], [2.0]])
        np_testing.assert_array_equal(e.c, [0.0, 0.0])
        e = (x + 1) * vector_expressions.KVector([1, 2]).transpose()
        self.assertEqual(e.orientation, _ROW)
        np_testing.assert_array_equal(e.l, [[1.0], [2.0]])
        np_testing.assert_array_equal(e.c, [1.0, 2.0])

    def test_times_quadratic_not_supported(self) -> None:
        x = variables.Variable(0)
        with self.assertRaises(NotImplementedError):
            vector_expressions.KVector([1, 2]) * (x * x)  # pylint: disable=pointless-statement

    def test_dot_product(self) -> None:
        row = vector_expressions.KVector([1, 2], _ROW)
        col = vector_expressions.KVector([3, 4])
        e = row @ col
        self.assertIsInstance(e, variables.K)
        self.assertEqual(e.value, 11.0)

    def test_evaluate(self) -> None:
        np_testing.assert_array_equal(
            vector_expressions.KVector([1, 2]).evaluate({}), [1.0, 2.0]
        )


class VarVectorTest(absltest.TestCase):

    def test_properties(self) -> None:
        x = _var_vector(3)
        self.assertLen(x, 3)
        self.assertEqual(x.dimensions(), (3, 1))
        self.assertEqual(x.variable_ids(), [0, 1, 2])
        self.assertEqual(x.num_vars(), 3)
        self.assertEqual(x.at(1).id, 1)
        self.assertEqual(x[-1].id, 2)
        self.assertEqual([v.id for v in x[1:]], [1, 2])
        self.assertIsInstance(x[1:], vector_expressions.VarVector)
        np_testing.assert_array_equal(x.linear_coeff(), np.identity(3))
        np_testing.assert_array_equal(x.constant(), np.zeros(3))
        self.assertEqual(str(x), "[x_0, x_1, x_2]")
        self.assertEqual([v.id for v in x], [0, 1, 2])

    def test_not_variables(self) -> None:
        with self.assertRaises(errors.MalformedExpressionError):
            vector_expressions.VarVector([variables.Variable(0), 1.0])

    def test_repeated_variables(self) -> None:
        v = variables.Variable(0)
        x = vector_expressions.VarVector([v, v])
        self.assertEqual(x.variable_ids(), [0])
        self.assertLen(x.variable_vector(), 2)

    def test_plus_var_vector_accumulates(self) -> None:
        x = _var_vector(2)
        e = x + x
        self.assertIsInstance(e, vector_expressions.VectorLinearExpression)
        self.assertEqual(_ids(e), [0, 1])
        np_testing.assert_array_equal(e.l, [[2.0, 0.0], [0.0, 2.0]])

    def test_plus_constant(self) -> None:
        x = _var_vector(2)
        e = x + vector_expressions.KVector([1, 2])
        self.assertIsInstance(e, vector_expressions.VectorLinearExpression)
        np_testing.assert_array_equal(e.l, np.identity(2))
        np_testing.assert_array_equal(e.c, [1.0, 2.0])
        e = vector_expressions.KVector([1, 2]) + x
        np_testing.assert_array_equal(e.l, np.identity(2))
        np_testing.assert_array_equal(e.c, [1.0, 2.0])
        e = np.array([1.0, 2.0]) + x
        np_testing.assert_array_equal(e.c, [1.0, 2.0])

    def test_plus_disjoint(self) -> None:
        x = _var_vector(2)
        y = _var_vector(2, first_id=2)
        e = x + y
        self.assertEqual(_ids(e), [0, 1, 2, 3])
        np_testing.assert_array_equal(
            e.l, [[1.0, 0.0, 1.0, 0.0], [0.0, 1.0, 0.0, 1.0]]
        )

    def test_subtraction(self) -> None:
        x = _var_vector(2)
        e = x - np.array([1.0, 1.0])
        np_testing.assert_array_equal(e.l, np.identity(2))
        np_testing.assert_array_equal(e.c, [-1.0, -1.0])
        e = np.array([1.0, 1.0]) - x
        np_testing.assert_array_equal(e.l, -np.identity(2))
        np_testing.assert_array_equal(e.c, [1.0, 1.0])

    def test_scaling(self) -> None:
        x = _var_vector(2)
        e = 3 * x
        self.assertIsInstance(e, vector_expressions.VectorLinearExpression)
        np_testing.assert_array_equal(e.l, 3 * np.identity(2))

    def test_times_variable_not_supported(self) -> None:
        x = _var_vector(2)
        with self.assertRaises(NotImplementedError):
            x * variables.Variable(5)  # pylint: disable=pointless-statement
        with self.assertRaises(NotImplementedError):
            variables.Variable(5) * x  # pylint: disable=pointless-statement

    def test_times_quadratic_degree_exceeded(self) -> None:
        x = _var_vector(2)
        y = variables.Variable(5)
        with self.assertRaises(errors.DegreeExceededError):
            (y * y) * x  # pylint: disable=pointless-statement

    def test_inner_product_with_constant(self) -> None:
        x = _var_vector(3)
        e = np.array([1.0, 2.0, 3.0]) @ x
        self.assertIsInstance(e, variables.ScalarLinearExpression)
        self.assertEqual(_ids(e), [0, 1, 2])
        np_testing.assert_array_equal(e.l, [1.0, 2.0, 3.0])
        self.assertEqual(e.c, 0.0)
        e = x.transpose() @ vector_expressions.KVector([1.0, 2.0, 3.0])
        np_testing.assert_array_equal(e.l, [1.0, 2.0, 3.0])

    def test_quadratic_form(self) -> None:
        x = _var_vector(2)
        e = x.transpose() @ x
        self.assertIsInstance(e, variables.ScalarQuadraticExpression)
        np_testing.assert_array_equal(e.q, np.identity(2))
        np_testing.assert_array_equal(e.l, [0.0, 0.0])
        self.assertEqual(e.evaluate({0: 3.0, 1: 4.0}), 25.0)

    def test_outer_product_not_supported(self) -> None:
        x = _var_vector(2)
        with self.assertRaises(NotImplementedError):
            x @ x.transpose()  # pylint: disable=pointless-statement

    def test_matrix_times_vector(self) -> None:
        x = _var_vector(3)
        a = np.array([[1.0, 2.0, 2.0], [3.0, 0.0, 4.0]])
        e = a @ x
        self.assertIsInstance(e, vector_expressions.VectorLinearExpression)
        self.assertEqual(e.orientation, _COLUMN)
        np_testing.assert_array_equal(e.l, a)
        np_testing.assert_array_equal(e.c, [0.0, 0.0])

    def test_row_vector_times_matrix(self) -> None:
        x = _var_vector(2).transpose()
        a = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        e = x @ a
        self.assertEqual(e.orientation, _ROW)
        self.assertLen(e, 3)
        np_testing.assert_array_equal(e.evaluate({0: 1.0, 1: 1.0}), [5.0, 7.0, 9.0])

    def test_matrix_shape_mismatch(self) -> None:
        x = _var_vector(3)
        with self.assertRaises(errors.DimensionMismatchError):
            np.ones((2, 2)) @ x  # pylint: disable=pointless-statement

    def test_transpose(self) -> None:
        x = _var_vector(2)
        self.assertEqual(x.transpose().orientation, _ROW)
        self.assertEqual(x.transpose().transpose().orientation, _COLUMN)
        self.assertEqual(x.transpose().dimensions(), (1, 2))

    def test_evaluate(self) -> None:
        x = _var_vector(2)
        np_testing.assert_array_equal(x.evaluate({0: 1.0, 1: 2.0}), [1.0, 2.0])
        with self.assertRaises(errors.VariableNotFoundError):
            x.evaluate({0: 1.0})


class VectorLinearExpressionTest(parameterized.TestCase):

    def test_properties(self) -> None:
        x = _var_vector(2)
        e = vector_expressions.VectorLinearExpression(
            x.elements, [[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]], [1.0, 0.0, -1.0]
        )
        self.assertLen(e, 3)
        self.assertEqual(e.dimensions(), (3, 1))
        self.assertTrue(e.is_linear())
        row = e.at(1)
        self.assertIsInstance(row, variables.ScalarLinearExpression)
        np_testing.assert_array_equal(row.l, [3.0, 4.0])
        self.assertEqual(row.c, 0.0)
        np_testing.assert_array_equal(
            e.evaluate({0: 1.0, 1: 1.0}), [4.0, 7.0, 10.0]
        )

    def test_default_constant(self) -> None:
        x = _var_vector(2)
        e = vector_expressions.VectorLinearExpression(x.elements, np.identity(2))
        np_testing.assert_array_equal(e.c, [0.0, 0.0])

    def test_malformed(self) -> None:
        x = _var_vector(2)
        with self.assertRaises(errors.MalformedExpressionError):
            vector_expressions.VectorLinearExpression(
                x.elements, np.identity(3), np.zeros(3)
            )
        with self.assertRaises(errors.MalformedExpressionError):
            vector_expressions.VectorLinearExpression(
                x.elements, np.identity(2), np.zeros(3)
            )

    def test_rewrite_in_terms_of(self) -> None:
        x = _var_vector(2)
        z = variables.Variable(7)
        e = vector_expressions.VectorLinearExpression(
            x.elements, [[1.0, 2.0], [3.0, 4.0]], [1.0, 2.0]
        )
        rewritten = e.rewrite_in_terms_of([x[1], z, x[0]])
        self.assertEqual(_ids(rewritten), [1, 7, 0])
        np_testing.assert_array_equal(rewritten.l, [[2.0, 0.0, 1.0], [4.0, 0.0, 3.0]])
        np_testing.assert_array_equal(rewritten.c, [1.0, 2.0])
        with self.assertRaises(errors.VariableNotFoundError):
            e.rewrite_in_terms_of([z])

    def test_rewrite_onto_same_variables_is_identity(self) -> None:
        x = _var_vector(2)
        e = vector_expressions.VectorLinearExpression(
            x.elements, [[1.0, 2.0], [3.0, 4.0]]
        )
        np_testing.assert_array_equal(e.rewrite_in_terms_of(e.x).l, e.l)

    def test_plus_is_associative(self) -> None:
        x = _var_vector(2)
        y = _var_vector(2, first_id=2)
        k = vector_expressions.KVector([1.0, -1.0])
        left = (x + y) + k
        right = x + (y + k)
        order = list(x.elements) + list(y.elements)
        np_testing.assert_array_equal(
            left.rewrite_in_terms_of(order).l, right.rewrite_in_terms_of(order).l
        )
        np_testing.assert_array_equal(left.c, right.c)

    def test_linear_dot_linear(self) -> None:
        x = _var_vector(2)
        a = x + np.array([1.0, 0.0])
        e = a.transpose() @ a
        self.assertIsInstance(e, variables.ScalarQuadraticExpression)
        # (x0 + 1)^2 + x1^2 = x0^2 + x1^2 + 2 x0 + 1
        np_testing.assert_array_equal(e.q, np.identity(2))
        np_testing.assert_array_equal(e.l, [2.0, 0.0])
        self.assertEqual(e.c, 1.0)

    @parameterized.named_parameters(
        ("plus", lambda a, b: a + b),
        ("less_eq", lambda a, b: a <= b),
        ("eq", lambda a, b: a == b),
    )
    def test_length_mismatch(self, operation) -> None:
        with self.assertRaises(errors.DimensionMismatchError):
            operation(_var_vector(2), _var_vector(3))

    @parameterized.named_parameters(
        ("plus", lambda a, b: a + b),
        ("greater_eq", lambda a, b: a >= b),
    )
    def test_orientation_mismatch(self, operation) -> None:
        with self.assertRaises(errors.OrientationMismatchError):
            operation(_var_vector(2), _var_vector(2).transpose())

    def test_same_orientation_product(self) -> None:
        with self.assertRaises(errors.DimensionMismatchError):
            _var_vector(2) @ vector_expressions.KVector([1.0, 2.0])  # pylint: disable=pointless-statement
        with self.assertRaises(errors.DimensionMismatchError):
            vector_expressions.KVector([1.0, 2.0], _ROW) @ vector_expressions.KVector(
                [1.0, 2.0, 3.0]
            )  # pylint: disable=pointless-statement

    def test_scalar_plus_vector(self) -> None:
        with self.assertRaises(errors.DimensionMismatchError):
            _var_vector(2) + 1.0  # pylint: disable=pointless-statement
        with self.assertRaises(errors.DimensionMismatchError):
            variables.Variable(5) + _var_vector(2)  # pylint: disable=pointless-statement

    def test_unexpected_input(self) -> None:
        with self.assertRaises(errors.UnexpectedInputError):
            _var_vector(2) + "a"  # pylint: disable=pointless-statement
        with self.assertRaises(errors.UnexpectedInputError):
            _var_vector(2) * "a"  # pylint: disable=pointless-statement


class ScalarTimesArrayTest(absltest.TestCase):

    def setUp(self) -> None:
        super().setUp()
        self.x = variables.Variable(4)
        self.values = np.array([1.0, 2.0])

    def test_variable_times_array(self) -> None:
        for e in (self.x * self.values, self.values * self.x):
            self.assertIsInstance(e, vector_expressions.VectorLinearExpression)
            self.assertEqual(e.orientation, _COLUMN)
            self.assertEqual(_ids(e), [4])
            np_testing.assert_array_equal(e.l, [[1.0], [2.0]])
            np_testing.assert_array_equal(e.c, [0.0, 0.0])

    def test_linear_times_array(self) -> None:
        e = (self.x + 1) * self.values
        self.assertIsInstance(e, vector_expressions.VectorLinearExpression)
        np_testing.assert_array_equal(e.l, [[1.0], [2.0]])
        np_testing.assert_array_equal(e.c, [1.0, 2.0])

    def test_constant_times_array(self) -> None:
        for k in (variables.K(2.0) * self.values, self.values * variables.K(2.0)):
            self.assertIsInstance(k, vector_expressions.KVector)
            self.assertEqual(k.orientation, _COLUMN)
            np_testing.assert_array_equal(k.values, [2.0, 4.0])
        m = variables.K(2.0) * np.identity(2)
        self.assertIsInstance(m, matrix_expressions.KMatrix)
        np_testing.assert_array_equal(m.values, [[2.0, 0.0], [0.0, 2.0]])

    def test_zero_dimensional_array(self) -> None:
        e = self.x * np.array(3.0)
        self.assertIsInstance(e, variables.ScalarLinearExpression)
        np_testing.assert_array_equal(e.l, [3.0])

    def test_not_supported(self) -> None:
        with self.assertRaises(NotImplementedError):
            (self.x * self.x) * self.values  # pylint: disable=pointless-statement
        with self.assertRaises(NotImplementedError):
            self.x * np.identity(2)  # pylint: disable=pointless-statement
        with self.assertRaises(errors.DimensionMismatchError):
            self.x * np.zeros((2, 2, 2))  # pylint: disable=pointless-statement


class VectorComparisonTest(absltest.TestCase):

    def test_matrix_constraint(self) -> None:
        x = _var_vector(3)
        c = np.array([[1.0, 2.0, 2.0], [3.0, 0.0, 4.0]]) @ x <= np.array([4.0, 6.0])
        self.assertIsInstance(c, constraints.VectorConstraint)
        self.assertEqual(c.sense, constraints.ConstraintSense.LESS_EQUAL)
        self.assertIsInstance(c.rhs, vector_expressions.KVector)
        self.assertLen(c, 2)

    def test_number_is_broadcast(self) -> None:
        x = _var_vector(3)
        c = x >= 0
        self.assertIsInstance(c, constraints.VectorConstraint)
        np_testing.assert_array_equal(c.rhs.values, [0.0, 0.0, 0.0])
        self.assertEqual(c.rhs.orientation, _COLUMN)
        c = x.transpose() == 1.0
        self.assertEqual(c.rhs.orientation, _ROW)

    def test_array_on_the_left(self) -> None:
        x = _var_vector(2)
        c = np.array([1.0, 2.0]) <= x
        self.assertIsInstance(c, constraints.VectorConstraint)
        self.assertEqual(c.sense, constraints.ConstraintSense.GREATER_EQUAL)

    def test_scalar_rhs(self) -> None:
        with self.assertRaises(errors.DimensionMismatchError):
            _var_vector(2) <= variables.Variable(5)  # pylint: disable=pointless-statement


if __name__ == "__main__":
    absltest.main()
