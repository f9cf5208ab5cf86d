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

"""Utilities for working with scalar, vector and matrix expressions."""

from typing import Any, Dict, Iterable, Mapping, Union

import numpy as np

from mathprog.python import constraints
from mathprog.python import errors
from mathprog.python import matrix_expressions
from mathprog.python import variables
from mathprog.python import vector_expressions


def as_expression(value: Any) -> variables.Expression:
    """Promotes value to an expression.

    Numbers become K, 1-D numpy arrays become column KVector and 2-D numpy
    arrays become KMatrix. Expressions are returned unchanged.

    Raises:
      UnexpectedInputError: for any other input.
    """
    if isinstance(value, variables.Expression):
        return value
    if variables.is_a_number(value):
        return variables.K(value)
    if isinstance(value, np.ndarray):
        if value.ndim == 1:
            return vector_expressions.KVector(value)
        if value.ndim == 2:
            return matrix_expressions.KMatrix(value)
    raise errors.UnexpectedInputError("as_expression", value)


def fast_sum(summands: Iterable[Any]) -> variables.Expression:
    """Sums the elements of summands into a single expression.

    Similar to Python's sum function, but faster for long lists of linear terms:
    they are accumulated in a single pass instead of being aligned pair by pair.

    Unlike sum(), the function returns an expression when all inputs are numbers
    and K(0.0) when summands is empty. Importantly, the code:
      problem.add_constraint(fast_sum(maybe_empty_list) <= 1.0)
    is safe to call, while:
      problem.add_constraint(sum(maybe_empty_list) <= 1.0)
    fails at runtime when the list is empty.

    Args:
      summands: numbers or expressions to add up.

    Returns:
      An expression with the sum of the elements of summands.
    """
    summands_tuple = tuple(as_expression(s) for s in summands)
    if not summands_tuple:
        return variables.K(0.0)
    if not all(
        isinstance(s, variables.ScalarExpression) and s.is_linear()
        for s in summands_tuple
    ):
        result = summands_tuple[0]
        for s in summands_tuple[1:]:
            result = result.plus(s)
        return result
    coefficients: Dict[int, float] = {}
    by_id: Dict[int, variables.Variable] = {}
    offset = 0.0
    for s in summands_tuple:
        offset += s.constant()
        for v, coefficient in zip(s.variable_vector(), s.coefficients()):
            by_id.setdefault(v.id, v)
            coefficients[v.id] = coefficients.get(v.id, 0.0) + coefficient
    if not coefficients:
        return variables.K(offset)
    return variables.ScalarLinearExpression(
        [by_id[vid] for vid in coefficients], list(coefficients.values()), offset
    )


def plus(lhs: Any, rhs: Any) -> variables.Expression:
    return as_expression(lhs).plus(rhs)


def multiply(lhs: Any, rhs: Any) -> variables.Expression:
    return as_expression(lhs).multiply(rhs)


def comparison(
    lhs: Any, rhs: Any, sense: constraints.ConstraintSense
) -> Union[constraints.ScalarConstraint, constraints.VectorConstraint]:
    """Returns the constraint `lhs sense rhs`, promoting lhs if needed."""
    return as_expression(lhs).comparison(rhs, sense)


def less_eq(lhs: Any, rhs: Any) -> Any:
    return comparison(lhs, rhs, constraints.ConstraintSense.LESS_EQUAL)


def greater_eq(lhs: Any, rhs: Any) -> Any:
    return comparison(lhs, rhs, constraints.ConstraintSense.GREATER_EQUAL)


def eq(lhs: Any, rhs: Any) -> Any:
    return comparison(lhs, rhs, constraints.ConstraintSense.EQUAL)


def transpose(value: Any) -> variables.Expression:
    return as_expression(value).transpose()


def evaluate_expression(
    expression: Any,
    variable_values: Mapping[int, float],
) -> Union[float, np.ndarray]:
    """Evaluates an expression for given variable values.

    E.g. if expression = 2 * x0 + x1 + 1 and variable_values = {0: 2.0, 1: 3.0},
    then evaluate_expression(expression, variable_values) equals 8.0.

    Args:
      expression: The expression to evaluate, numbers are accepted too.
      variable_values: Must contain a value for every variable id in expression.

    Returns:
      A float for scalar expressions, a numpy array for vectors and matrices.

    Raises:
      VariableNotFoundError: if a variable of expression has no value.
    """
    return as_expression(expression).evaluate(variable_values)
