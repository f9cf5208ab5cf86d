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

"""Define Variables and scalar expressions of degree at most two.

The scalar expressions form a closed set of variants:

  * K: a constant.
  * Variable: a single decision variable.
  * ScalarLinearExpression: l . x + c.
  * ScalarQuadraticExpression: x' Q x + l . x + c.

Every binary operation promotes its operands along
  real -> K -> ScalarLinearExpression -> ScalarQuadraticExpression
and returns the smallest variant that represents the result. Operations that
would create a polynomial of degree three or more raise DegreeExceededError.

Expressions store their variables by value, as a tuple x, together with dense
numpy coefficient arrays. When two expressions over different variable tuples
are combined, both are first rewritten onto the union of their variables (see
unique_variables() and rewrite_in_terms_of()).

All expressions are immutable.
"""

import abc
import enum
import math
import numbers
import typing
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    NoReturn,
    Optional,
    Sequence,
    Tuple,
    Union,
)

import numpy as np
import numpy.typing as npt

from mathprog.python import constraints
from mathprog.python import errors

NumberT = Union[int, float, np.integer, np.floating]
ScalarTypes = Union[NumberT, "ScalarExpression"]


def is_a_number(x: Any) -> bool:
    """Checks if x is a real number (python or numpy), booleans excluded."""
    if isinstance(x, (bool, np.bool_)):
        return False
    return isinstance(x, (numbers.Real, np.integer, np.floating))


def _raise_ne_not_supported() -> NoReturn:
    raise TypeError("!= constraints are not supported")


def _read_only(array: npt.ArrayLike, ndim: int, what: str) -> np.ndarray:
    result = np.array(array, dtype=np.double)
    if result.ndim != ndim:
        raise errors.MalformedExpressionError(
            f"{what} should have {ndim} dimension(s), got shape {result.shape}"
        )
    result.flags.writeable = False
    return result


@enum.unique
class VarType(enum.Enum):
    """The domain of a variable, using Gurobi's encoding."""

    CONTINUOUS = "C"
    BINARY = "B"
    INTEGER = "I"


class Expression(metaclass=abc.ABCMeta):
    """Interface shared by scalar, vector and matrix expressions.

    Numpy arrays defer to the operators of this class (e.g. `A @ x` calls
    `x.__rmatmul__(A)`) because __array_ufunc__ is None.
    """

    __slots__ = ()

    __array_ufunc__ = None

    @abc.abstractmethod
    def dimensions(self) -> Tuple[int, int]:
        """Returns (rows, columns); scalars are (1, 1)."""

    @abc.abstractmethod
    def variable_vector(self) -> Tuple["Variable", ...]:
        """Returns the variables the coefficients of the expression refer to.

        The tuple may contain repeated variables. Use variables() to get each
        variable once.
        """

    @abc.abstractmethod
    def plus(self, rhs: Any) -> "Expression":
        """Returns self + rhs."""

    @abc.abstractmethod
    def multiply(self, rhs: Any) -> "Expression":
        """Returns self * rhs."""

    @abc.abstractmethod
    def comparison(self, rhs: Any, sense: constraints.ConstraintSense) -> Any:
        """Returns the constraint `self sense rhs`."""

    @abc.abstractmethod
    def check(self) -> None:
        """Raises MalformedExpressionError if the internal data is inconsistent."""

    @abc.abstractmethod
    def transpose(self) -> "Expression":
        """Returns the transposed expression."""

    @abc.abstractmethod
    def is_linear(self) -> bool:
        """Returns true if the expression has degree at most one."""

    @abc.abstractmethod
    def evaluate(self, variable_values: Mapping[int, float]) -> Any:
        """Returns the value of the expression, variable_values is keyed by id."""

    def variables(self) -> List["Variable"]:
        return unique_variables(self.variable_vector())

    def variable_ids(self) -> List[int]:
        return [v.id for v in self.variables()]

    def num_vars(self) -> int:
        return len(self.variables())

    def less_eq(self, rhs: Any) -> Any:
        return self.comparison(rhs, constraints.ConstraintSense.LESS_EQUAL)

    def greater_eq(self, rhs: Any) -> Any:
        return self.comparison(rhs, constraints.ConstraintSense.GREATER_EQUAL)

    def eq(self, rhs: Any) -> Any:
        return self.comparison(rhs, constraints.ConstraintSense.EQUAL)

    def _reflected_multiply(self, lhs: Any) -> "Expression":
        """Returns lhs * self when lhs does not know how to compute it."""
        raise errors.UnexpectedInputError("multiply", lhs)

    def __eq__(self, rhs: Any) -> Any:  # pytype: disable=signature-mismatch
        return self.eq(rhs)

    def __ne__(self, rhs: Any) -> NoReturn:  # pytype: disable=signature-mismatch
        _raise_ne_not_supported()

    def __le__(self, rhs: Any) -> Any:
        return self.less_eq(rhs)

    def __ge__(self, rhs: Any) -> Any:
        return self.greater_eq(rhs)

    def __add__(self, rhs: Any) -> "Expression":
        return self.plus(rhs)

    def __radd__(self, lhs: Any) -> "Expression":
        return self.plus(lhs)

    def __sub__(self, rhs: Any) -> "Expression":
        if is_a_number(rhs):
            return self.plus(-rhs)
        return self.plus(_negate(rhs))

    def __rsub__(self, lhs: Any) -> "Expression":
        return self.multiply(-1.0).plus(lhs)

    def __mul__(self, rhs: Any) -> "Expression":
        return self.multiply(rhs)

    def __rmul__(self, lhs: Any) -> "Expression":
        # Only numbers and numpy arrays reach here, a product with a scalar commutes.
        return self.multiply(lhs)

    def __matmul__(self, rhs: Any) -> "Expression":
        return self.multiply(rhs)

    def __truediv__(self, constant: NumberT) -> "Expression":
        if not is_a_number(constant):
            raise errors.UnexpectedInputError("divide", constant)
        return self.multiply(1.0 / constant)

    def __neg__(self) -> "Expression":
        return self.multiply(-1.0)


def _negate(value: Any) -> Any:
    if isinstance(value, Expression):
        return value.multiply(-1.0)
    if isinstance(value, np.ndarray):
        return -value
    raise errors.UnexpectedInputError("subtract", value)


class ScalarExpression(Expression):
    """Interface of the scalar expression variants."""

    __slots__ = ()

    @abc.abstractmethod
    def coefficients(self) -> np.ndarray:
        """Returns the linear coefficients, aligned with variable_vector()."""

    @abc.abstractmethod
    def constant(self) -> float:
        """Returns the constant term."""

    def dimensions(self) -> Tuple[int, int]:
        return (1, 1)

    def transpose(self) -> "ScalarExpression":
        return self

    def variable_part(self) -> "ScalarExpression":
        """Returns the expression without its constant term."""
        return self.plus(-self.constant())

    def constant_part(self) -> "K":
        return K(self.constant())

    def comparison(
        self, rhs: Any, sense: constraints.ConstraintSense
    ) -> constraints.ScalarConstraint:
        return constraints.ScalarConstraint(
            self, _as_scalar_operand("comparison", self, rhs), sense
        )

    def _as_linear(self) -> "ScalarLinearExpression":
        return ScalarLinearExpression(
            self.variable_vector(), self.coefficients(), self.constant()
        )

    def _as_quadratic(self) -> "ScalarQuadraticExpression":
        n = len(self.variable_vector())
        return ScalarQuadraticExpression(
            self.variable_vector(),
            np.zeros((n, n)),
            self.coefficients(),
            self.constant(),
        )


def _as_scalar_operand(operation: str, lhs: Expression, rhs: Any) -> ScalarExpression:
    """Promotes numbers and 0-d arrays to K, rejects anything but scalars."""
    if is_a_number(rhs):
        return K(rhs)
    if isinstance(rhs, np.ndarray) and rhs.ndim == 0:
        return K(rhs.item())
    if isinstance(rhs, ScalarExpression):
        return rhs
    if isinstance(rhs, np.ndarray):
        raise errors.DimensionMismatchError(
            operation, lhs.dimensions(), rhs.shape if rhs.ndim == 2 else (len(rhs), 1)
        )
    if isinstance(rhs, Expression):
        raise errors.DimensionMismatchError(
            operation, lhs.dimensions(), rhs.dimensions()
        )
    raise errors.UnexpectedInputError(operation, rhs)


class K(ScalarExpression):
    """A constant scalar expression.

    This class is immutable.
    """

    __slots__ = ("_value",)

    def __init__(self, value: NumberT) -> None:
        if not is_a_number(value):
            raise errors.UnexpectedInputError("K", value)
        self._value: float = float(value)

    @property
    def value(self) -> float:
        return self._value

    def variable_vector(self) -> Tuple["Variable", ...]:
        return ()

    def coefficients(self) -> np.ndarray:
        return np.zeros(0)

    def constant(self) -> float:
        return self._value

    def variable_part(self) -> "K":
        return K(0.0)

    def check(self) -> None:
        pass

    def is_linear(self) -> bool:
        return True

    def evaluate(self, variable_values: Mapping[int, float]) -> float:
        return self._value

    def plus(self, rhs: Any) -> Expression:
        if is_a_number(rhs):
            return K(self._value + rhs)
        if isinstance(rhs, K):
            return K(self._value + rhs.value)
        if isinstance(rhs, Variable):
            return ScalarLinearExpression((rhs,), [1.0], self._value)
        if isinstance(rhs, ScalarLinearExpression):
            return ScalarLinearExpression(rhs.x, rhs.l, rhs.c + self._value)
        if isinstance(rhs, ScalarQuadraticExpression):
            return ScalarQuadraticExpression(rhs.x, rhs.q, rhs.l, rhs.c + self._value)
        return self.plus(_as_scalar_operand("plus", self, rhs))

    def multiply(self, rhs: Any) -> Expression:
        if is_a_number(rhs):
            return K(self._value * rhs)
        if isinstance(rhs, K):
            return K(self._value * rhs.value)
        if isinstance(rhs, Variable):
            return ScalarLinearExpression((rhs,), [self._value], 0.0)
        if isinstance(rhs, ScalarLinearExpression):
            return ScalarLinearExpression(
                rhs.x, self._value * rhs.l, self._value * rhs.c
            )
        if isinstance(rhs, ScalarQuadraticExpression):
            return ScalarQuadraticExpression(
                rhs.x, self._value * rhs.q, self._value * rhs.l, self._value * rhs.c
            )
        if isinstance(rhs, (Expression, np.ndarray)):
            # Scaling commutes, let the vector or matrix do it.
            return _multiply_non_scalar(rhs, self)
        raise errors.UnexpectedInputError("multiply", rhs)

    def __str__(self):
        return str(self._value)

    def __repr__(self):
        return f"K({self._value!r})"


def _multiply_non_scalar(non_scalar: Any, scalar: ScalarExpression) -> Expression:
    if isinstance(non_scalar, np.ndarray):
        # Both modules import this one.
        from mathprog.python import matrix_expressions
        from mathprog.python import vector_expressions

        if non_scalar.ndim == 0:
            return scalar.multiply(non_scalar.item())
        if non_scalar.ndim == 1:
            non_scalar = vector_expressions.KVector(
                non_scalar, vector_expressions.Orientation.COLUMN
            )
        elif non_scalar.ndim == 2:
            non_scalar = matrix_expressions.KMatrix(non_scalar)
        else:
            raise errors.DimensionMismatchError(
                "multiply", scalar.dimensions(), non_scalar.shape
            )
    return non_scalar.multiply(scalar)


class VarEqVar:
    """The result of the equality comparison between two Variable.

    We use an object here to delay the evaluation of equality so that we can use
    the operator== in two use-cases:

      1. when the user want to test that two Variable values references the same
         variable. This is supported by having this object support implicit
         conversion to bool.

      2. when the user want to use the equality to create a constraint of equality
         between two variables, see to_constraint().
    """

    __slots__ = "_first_variable", "_second_variable"

    def __init__(
        self,
        first_variable: "Variable",
        second_variable: "Variable",
    ) -> None:
        self._first_variable: "Variable" = first_variable
        self._second_variable: "Variable" = second_variable

    @property
    def first_variable(self) -> "Variable":
        return self._first_variable

    @property
    def second_variable(self) -> "Variable":
        return self._second_variable

    def to_constraint(self) -> constraints.ScalarConstraint:
        return constraints.ScalarConstraint(
            self._first_variable,
            self._second_variable,
            constraints.ConstraintSense.EQUAL,
        )

    def __bool__(self) -> bool:
        return self._first_variable.id == self._second_variable.id

    def __str__(self):
        return f"{self._first_variable!s} == {self._second_variable!s}"

    def __repr__(self):
        return f"{self._first_variable!r} == {self._second_variable!r}"


class Variable(ScalarExpression):
    """A decision variable for an optimization problem.

    A decision variable takes a value from a domain, either the real numbers or
    the integers, and restricted to be in some interval [lb, ub] (where lb and ub
    can be infinite). Binary variables are integer variables in [0, 1].

    Variables are identified by their id, which is unique in the
    OptimizationProblem that created them. Do not create a Variable directly, use
    OptimizationProblem.add_variable() and its variants instead.

    This class is immutable.
    """

    __slots__ = "_id", "_lower_bound", "_upper_bound", "_var_type", "_name"

    def __init__(
        self,
        vid: int,
        lower_bound: float = -math.inf,
        upper_bound: float = math.inf,
        var_type: VarType = VarType.CONTINUOUS,
        name: str = "",
    ) -> None:
        """Internal only, prefer OptimizationProblem functions."""
        if not isinstance(vid, (int, np.integer)) or vid < 0:
            raise TypeError(f"vid should be a non negative int, was: {vid!r}")
        self._id: int = int(vid)
        self._lower_bound: float = float(lower_bound)
        self._upper_bound: float = float(upper_bound)
        self._var_type: VarType = var_type
        self._name: str = name

    @property
    def id(self) -> int:
        return self._id

    @property
    def lower_bound(self) -> float:
        return self._lower_bound

    @property
    def upper_bound(self) -> float:
        return self._upper_bound

    @property
    def var_type(self) -> VarType:
        return self._var_type

    @property
    def integer(self) -> bool:
        return self._var_type != VarType.CONTINUOUS

    @property
    def name(self) -> str:
        return self._name

    def variable_vector(self) -> Tuple["Variable", ...]:
        return (self,)

    def coefficients(self) -> np.ndarray:
        return np.ones(1)

    def constant(self) -> float:
        return 0.0

    def variable_part(self) -> "Variable":
        return self

    def check(self) -> None:
        if math.isnan(self._lower_bound) or math.isnan(self._upper_bound):
            raise errors.MalformedExpressionError(f"{self} has a NaN bound")
        if self._lower_bound > self._upper_bound:
            raise errors.MalformedExpressionError(
                f"{self} has lower bound {self._lower_bound} greater than its upper"
                f" bound {self._upper_bound}"
            )
        if self._var_type == VarType.BINARY and (
            self._lower_bound != 0.0 or self._upper_bound != 1.0
        ):
            raise errors.MalformedExpressionError(
                f"binary {self} must have bounds [0, 1], got"
                f" [{self._lower_bound}, {self._upper_bound}]"
            )

    def is_linear(self) -> bool:
        return True

    def evaluate(self, variable_values: Mapping[int, float]) -> float:
        if self._id not in variable_values:
            raise errors.VariableNotFoundError(self._id, "the variable values")
        return float(variable_values[self._id])

    def plus(self, rhs: Any) -> Expression:
        if is_a_number(rhs):
            return ScalarLinearExpression((self,), [1.0], rhs)
        if isinstance(rhs, K):
            return ScalarLinearExpression((self,), [1.0], rhs.value)
        if isinstance(rhs, Variable):
            if rhs.id == self._id:
                return ScalarLinearExpression((self,), [2.0], 0.0)
            return ScalarLinearExpression((self, rhs), [1.0, 1.0], 0.0)
        if isinstance(rhs, ScalarLinearExpression):
            return self._as_linear().plus(rhs)
        if isinstance(rhs, ScalarQuadraticExpression):
            return self._as_quadratic().plus(rhs)
        return self.plus(_as_scalar_operand("plus", self, rhs))

    def multiply(self, rhs: Any) -> Expression:
        if is_a_number(rhs):
            return ScalarLinearExpression((self,), [rhs], 0.0)
        if isinstance(rhs, K):
            return rhs.multiply(self)
        if isinstance(rhs, (Variable, ScalarLinearExpression)):
            return self._as_linear().multiply(rhs)
        if isinstance(rhs, ScalarQuadraticExpression):
            raise errors.DegreeExceededError(self, rhs)
        if isinstance(rhs, (Expression, np.ndarray)):
            return _multiply_non_scalar(rhs, self)
        raise errors.UnexpectedInputError("multiply", rhs)

    def __str__(self):
        """Returns the name, or a string containing the id if the name is empty."""
        return self._name if self._name else f"x_{self._id}"

    def __repr__(self):
        return f"<Variable id: {self._id}, name: {self._name!r}>"

    @typing.overload
    def __eq__(self, rhs: "Variable") -> VarEqVar: ...

    @typing.overload
    def __eq__(self, rhs: Any) -> constraints.ScalarConstraint: ...

    def __eq__(self, rhs):
        if isinstance(rhs, Variable):
            return VarEqVar(self, rhs)
        return super().__eq__(rhs)

    @typing.overload
    def __ne__(self, rhs: "Variable") -> bool: ...

    @typing.overload
    def __ne__(self, rhs: Any) -> NoReturn: ...

    def __ne__(self, rhs):
        if isinstance(rhs, Variable):
            return not self == rhs
        _raise_ne_not_supported()

    def __hash__(self) -> int:
        return hash(self._id)


class ScalarLinearExpression(ScalarExpression):
    """For variables x, an expression: l . x + c.

    This class is immutable.
    """

    __slots__ = "_x", "_l", "_c"

    def __init__(
        self,
        x: Iterable[Variable],
        l: npt.ArrayLike,
        c: NumberT = 0.0,
    ) -> None:
        self._x: Tuple[Variable, ...] = tuple(x)
        self._l: np.ndarray = _read_only(l, 1, "L")
        self._c: float = float(c)
        self.check()

    @property
    def x(self) -> Tuple[Variable, ...]:
        return self._x

    @property
    def l(self) -> np.ndarray:
        return self._l

    @property
    def c(self) -> float:
        return self._c

    def variable_vector(self) -> Tuple[Variable, ...]:
        return self._x

    def coefficients(self) -> np.ndarray:
        return self._l

    def constant(self) -> float:
        return self._c

    def variable_part(self) -> "ScalarLinearExpression":
        return ScalarLinearExpression(self._x, self._l, 0.0)

    def check(self) -> None:
        for v in self._x:
            if not isinstance(v, Variable):
                raise errors.MalformedExpressionError(
                    f"X should only contain Variables, found {type(v).__name__!r}"
                )
        if len(self._l) != len(self._x):
            raise errors.MalformedExpressionError(
                f"the length of L ({len(self._l)}) does not match that of X"
                f" ({len(self._x)})"
            )

    def is_linear(self) -> bool:
        return True

    def evaluate(self, variable_values: Mapping[int, float]) -> float:
        return float(np.dot(self._l, values_of(self._x, variable_values))) + self._c

    def rewrite_in_terms_of(self, x: Sequence[Variable]) -> "ScalarLinearExpression":
        """Returns the same expression written over the variables x.

        Args:
          x: must contain every variable of this expression.

        Raises:
          VariableNotFoundError: if a variable of the expression is not in x.
        """
        x = tuple(x)
        return ScalarLinearExpression(
            x, _rewrite_vector(self._l, self._x, x), self._c
        )

    def plus(self, rhs: Any) -> Expression:
        if is_a_number(rhs):
            return ScalarLinearExpression(self._x, self._l, self._c + rhs)
        if isinstance(rhs, K):
            return ScalarLinearExpression(self._x, self._l, self._c + rhs.value)
        if isinstance(rhs, (Variable, ScalarLinearExpression)):
            rhs = rhs._as_linear()
            x = unique_variables(self._x + rhs.x)
            return ScalarLinearExpression(
                x,
                _rewrite_vector(self._l, self._x, x)
                + _rewrite_vector(rhs.l, rhs.x, x),
                self._c + rhs.c,
            )
        if isinstance(rhs, ScalarQuadraticExpression):
            return self._as_quadratic().plus(rhs)
        return self.plus(_as_scalar_operand("plus", self, rhs))

    def multiply(self, rhs: Any) -> Expression:
        if is_a_number(rhs):
            return K(rhs).multiply(self)
        if isinstance(rhs, K):
            return rhs.multiply(self)
        if isinstance(rhs, (Variable, ScalarLinearExpression)):
            return _linear_times_linear(self, rhs._as_linear())
        if isinstance(rhs, ScalarQuadraticExpression):
            raise errors.DegreeExceededError(self, rhs)
        if isinstance(rhs, (Expression, np.ndarray)):
            return _multiply_non_scalar(rhs, self)
        raise errors.UnexpectedInputError("multiply", rhs)

    def _as_linear(self) -> "ScalarLinearExpression":
        return self

    def __str__(self):
        return _format_terms(_linear_term_strings(self._x, self._l), self._c)

    def __repr__(self):
        return f"ScalarLinearExpression({list(self._x)!r}, {self._l.tolist()!r}, {self._c!r})"


class ScalarQuadraticExpression(ScalarExpression):
    """For variables x, an expression: x' Q x + l . x + c.

    Q is stored symmetric: the constructor replaces Q by (Q + Q') / 2, which
    does not change the value of the expression.

    This class is immutable.
    """

    __slots__ = "_x", "_q", "_l", "_c"

    def __init__(
        self,
        x: Iterable[Variable],
        q: npt.ArrayLike,
        l: Optional[npt.ArrayLike] = None,
        c: NumberT = 0.0,
    ) -> None:
        self._x: Tuple[Variable, ...] = tuple(x)
        q = np.array(q, dtype=np.double)
        if q.ndim == 2 and q.shape[0] == q.shape[1]:
            q = 0.5 * (q + q.T)
        self._q: np.ndarray = _read_only(q, 2, "Q")
        self._l: np.ndarray = _read_only(
            np.zeros(len(self._x)) if l is None else l, 1, "L"
        )
        self._c: float = float(c)
        self.check()

    @property
    def x(self) -> Tuple[Variable, ...]:
        return self._x

    @property
    def q(self) -> np.ndarray:
        return self._q

    @property
    def l(self) -> np.ndarray:
        return self._l

    @property
    def c(self) -> float:
        return self._c

    def variable_vector(self) -> Tuple[Variable, ...]:
        return self._x

    def coefficients(self) -> np.ndarray:
        return self._l

    def constant(self) -> float:
        return self._c

    def variable_part(self) -> "ScalarQuadraticExpression":
        return ScalarQuadraticExpression(self._x, self._q, self._l, 0.0)

    def check(self) -> None:
        for v in self._x:
            if not isinstance(v, Variable):
                raise errors.MalformedExpressionError(
                    f"X should only contain Variables, found {type(v).__name__!r}"
                )
        n = len(self._x)
        if self._q.shape != (n, n):
            raise errors.MalformedExpressionError(
                f"Q has shape {self._q.shape} but X has length {n}; Q must be"
                " square with the length of X"
            )
        if len(self._l) != n:
            raise errors.MalformedExpressionError(
                f"the length of L ({len(self._l)}) does not match that of X ({n})"
            )
        if not np.array_equal(self._q, self._q.T):
            raise errors.MalformedExpressionError("Q is not symmetric")

    def is_linear(self) -> bool:
        return False

    def evaluate(self, variable_values: Mapping[int, float]) -> float:
        values = values_of(self._x, variable_values)
        return (
            float(values @ self._q @ values)
            + float(np.dot(self._l, values))
            + self._c
        )

    def rewrite_in_terms_of(
        self, x: Sequence[Variable]
    ) -> "ScalarQuadraticExpression":
        """Returns the same expression written over the variables x.

        Args:
          x: must contain every variable of this expression.

        Raises:
          VariableNotFoundError: if a variable of the expression is not in x.
        """
        x = tuple(x)
        return ScalarQuadraticExpression(
            x,
            _rewrite_matrix(self._q, self._x, x),
            _rewrite_vector(self._l, self._x, x),
            self._c,
        )

    def plus(self, rhs: Any) -> Expression:
        if is_a_number(rhs):
            return ScalarQuadraticExpression(self._x, self._q, self._l, self._c + rhs)
        if isinstance(rhs, K):
            return ScalarQuadraticExpression(
                self._x, self._q, self._l, self._c + rhs.value
            )
        if isinstance(
            rhs, (Variable, ScalarLinearExpression, ScalarQuadraticExpression)
        ):
            rhs = rhs._as_quadratic()
            x = unique_variables(self._x + rhs.x)
            return ScalarQuadraticExpression(
                x,
                _rewrite_matrix(self._q, self._x, x) + _rewrite_matrix(rhs.q, rhs.x, x),
                _rewrite_vector(self._l, self._x, x)
                + _rewrite_vector(rhs.l, rhs.x, x),
                self._c + rhs.c,
            )
        return self.plus(_as_scalar_operand("plus", self, rhs))

    def multiply(self, rhs: Any) -> Expression:
        if is_a_number(rhs):
            return K(rhs).multiply(self)
        if isinstance(rhs, K):
            return rhs.multiply(self)
        if isinstance(rhs, ScalarExpression):
            # Any other scalar operand carries variables.
            raise errors.DegreeExceededError(self, rhs)
        if isinstance(rhs, (Expression, np.ndarray)):
            return _multiply_non_scalar(rhs, self)
        raise errors.UnexpectedInputError("multiply", rhs)

    def _as_quadratic(self) -> "ScalarQuadraticExpression":
        return self

    def __str__(self):
        terms = []
        n = len(self._x)
        for i in range(n):
            for j in range(i, n):
                # Off diagonal entries appear twice in x' Q x.
                coefficient = self._q[i, j] if i == j else 2.0 * self._q[i, j]
                if coefficient != 0.0:
                    terms.append((coefficient, f"{self._x[i]!s} * {self._x[j]!s}"))
        terms.extend(_linear_term_strings(self._x, self._l))
        return _format_terms(terms, self._c)

    def __repr__(self):
        return (
            f"ScalarQuadraticExpression({list(self._x)!r}, {self._q.tolist()!r},"
            f" {self._l.tolist()!r}, {self._c!r})"
        )


def _linear_times_linear(
    lhs: ScalarLinearExpression, rhs: ScalarLinearExpression
) -> ScalarQuadraticExpression:
    """Returns the product of two linear expressions.

    For each pair of terms (a_i x_i, b_j x_j), a_i b_j is added to Q[i, i] when
    x_i and x_j are the same variable and 0.5 a_i b_j is added to both Q[i, j]
    and Q[j, i] otherwise, keeping Q symmetric.
    """
    x = unique_variables(lhs.x + rhs.x)
    a = _rewrite_vector(lhs.l, lhs.x, x)
    b = _rewrite_vector(rhs.l, rhs.x, x)
    outer = np.outer(a, b)
    # The symmetric part of the outer product puts a_i b_i on the diagonal and
    # (a_i b_j + a_j b_i) / 2 on both off diagonal entries.
    q = 0.5 * (outer + outer.T)
    return ScalarQuadraticExpression(
        x, q, rhs.c * a + lhs.c * b, lhs.c * rhs.c
    )


def unique_variables(variables: Iterable[Variable]) -> List[Variable]:
    """Returns the variables without repetitions, in first occurrence order."""
    seen = set()
    result = []
    for v in variables:
        if v.id not in seen:
            seen.add(v.id)
            result.append(v)
    return result


def index_map(variables: Iterable[Variable]) -> Dict[int, int]:
    """Returns a map from variable id to its first position in variables."""
    result: Dict[int, int] = {}
    for position, v in enumerate(variables):
        result.setdefault(v.id, position)
    return result


def index_of(variable: Variable, variables: Sequence[Variable]) -> int:
    """Returns the first position of variable in variables.

    Raises:
      VariableNotFoundError: if variable is not in variables.
    """
    for position, v in enumerate(variables):
        if v.id == variable.id:
            return position
    raise errors.VariableNotFoundError(variable.id, "the variable vector")


def _target_positions(
    source: Sequence[Variable], target: Sequence[Variable]
) -> np.ndarray:
    positions = index_map(target)
    result = []
    for v in source:
        if v.id not in positions:
            raise errors.VariableNotFoundError(v.id, "the target variable vector")
        result.append(positions[v.id])
    return np.array(result, dtype=np.intp)


def _rewrite_vector(
    l: np.ndarray, source: Sequence[Variable], target: Sequence[Variable]
) -> np.ndarray:
    """Moves the coefficients l over source onto the positions of target."""
    result = np.zeros(len(target))
    # np.add.at accumulates repeated variables of source.
    np.add.at(result, _target_positions(source, target), l)
    return result


def _rewrite_matrix(
    q: np.ndarray, source: Sequence[Variable], target: Sequence[Variable]
) -> np.ndarray:
    """Moves the entries q over source x source onto target x target."""
    positions = _target_positions(source, target)
    result = np.zeros((len(target), len(target)))
    rows, cols = np.meshgrid(positions, positions, indexing="ij")
    np.add.at(result, (rows, cols), q)
    return result


def values_of(
    x: Sequence[Variable], variable_values: Mapping[int, float]
) -> np.ndarray:
    result = np.empty(len(x))
    for position, v in enumerate(x):
        if v.id not in variable_values:
            raise errors.VariableNotFoundError(v.id, "the variable values")
        result[position] = variable_values[v.id]
    return result


def _linear_term_strings(
    x: Sequence[Variable], l: np.ndarray
) -> List[Tuple[float, str]]:
    return [(coef, str(v)) for v, coef in zip(x, l) if coef != 0.0]


def _format_terms(terms: Sequence[Tuple[float, str]], offset: float) -> str:
    result = ""
    for coefficient, term in terms:
        if not result:
            result = ("-" if coefficient < 0 else "") + f"{abs(coefficient)} * {term}"
            continue
        result += " - " if coefficient < 0 else " + "
        result += f"{abs(coefficient)} * {term}"
    if not result:
        return str(offset)
    if offset != 0.0:
        result += (" - " if offset < 0 else " + ") + str(abs(offset))
    return result
