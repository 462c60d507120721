from savage.types.numbers import ComplexRational, RationalRepresentation
from savage.types.expression import (
    Expression, Integer, Rational, Complex, Boolean, Vector, Matrix, Variable, Call,
    FunctionValue, Negation, Not, Sum, Difference, Product, Quotient, Remainder, Power,
    Equal, NotEqual, LessThan, LessThanOrEqual, GreaterThan, GreaterThanOrEqual, And, Or,
    Associativity,
)
from savage.types.environment import Environment
from savage.types.function_value import UserFunction, define_function
