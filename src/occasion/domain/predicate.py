"""Safe interpreter for condition predicates.

Predicates are small boolean expressions over the calendar variables
(``DAY_IN_WEEK``, ``DAY_OF_MONTH``, ``WEEK``, ``MONTH``, ``YEAR``), e.g.::

    DAY_OF_MONTH % 2 == 0 && MONTH != 12
    not (DAY_IN_WEEK >= 5) or YEAR == 2025

Only a subset of Python's expression grammar is interpreted: literals,
``true``/``false``, the known variables, ``and``/``or``/``not`` (also spelled
``&&``/``||``/``!``), comparisons, and integer arithmetic. Nothing is ever
passed to :func:`eval`. Any failure raises :class:`PredicateError`.
"""

from __future__ import annotations

import ast
import operator
import re
from collections.abc import Callable, Mapping
from typing import Any


class PredicateError(ValueError):
    """The predicate could not be parsed or did not evaluate to a boolean."""


_BINARY_OPS: dict[type[ast.operator], Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
}

_COMPARE_OPS: dict[type[ast.cmpop], Callable[[Any, Any], bool]] = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
}

_LITERALS: dict[str, bool] = {"true": True, "false": False}

# String literals are matched first so operators inside them stay untouched.
_C_STYLE = re.compile(
    r"""(?P<literal>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')"""
    r"|(?P<op>&&|\|\||!(?!=))"
)
_C_STYLE_WORDS = {"&&": " and ", "||": " or ", "!": " not "}


def _rewrite_operator(match: re.Match[str]) -> str:
    op = match.group("op")
    if op is None:
        return match.group("literal")
    return _C_STYLE_WORDS[op]


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class _PredicateEvaluator(ast.NodeVisitor):
    def __init__(self, variables: Mapping[str, object]) -> None:
        self._variables = {name.upper(): value for name, value in variables.items()}

    def visit(self, node: ast.AST) -> Any:
        method = "visit_" + node.__class__.__name__
        visitor = getattr(self, method, None)
        if visitor is None:
            msg = f"unsupported expression element '{node.__class__.__name__}'"
            raise PredicateError(msg)
        return visitor(node)

    def visit_Expression(self, node: ast.Expression) -> Any:
        return self.visit(node.body)

    def visit_Constant(self, node: ast.Constant) -> Any:
        if isinstance(node.value, (str, int, float, bool)):
            return node.value
        msg = f"unsupported constant type '{type(node.value).__name__}'"
        raise PredicateError(msg)

    def visit_Name(self, node: ast.Name) -> Any:
        lowered = node.id.lower()
        if lowered in _LITERALS:
            return _LITERALS[lowered]
        upper = node.id.upper()
        if upper in self._variables:
            return self._variables[upper]
        msg = f"unknown symbol '{node.id}' in predicate"
        raise PredicateError(msg)

    def visit_UnaryOp(self, node: ast.UnaryOp) -> Any:
        operand = self.visit(node.operand)
        if isinstance(node.op, ast.Not):
            return not self._boolean(operand)
        if isinstance(node.op, ast.USub) and _is_number(operand):
            return -operand
        if isinstance(node.op, ast.UAdd) and _is_number(operand):
            return operand
        msg = f"unsupported unary operator '{node.op.__class__.__name__}'"
        raise PredicateError(msg)

    def visit_BoolOp(self, node: ast.BoolOp) -> bool:
        if isinstance(node.op, ast.And):
            return all(self._boolean(self.visit(value)) for value in node.values)
        return any(self._boolean(self.visit(value)) for value in node.values)

    def visit_BinOp(self, node: ast.BinOp) -> Any:
        op = _BINARY_OPS.get(type(node.op))
        if op is None:
            msg = f"unsupported operator '{node.op.__class__.__name__}'"
            raise PredicateError(msg)
        left = self.visit(node.left)
        right = self.visit(node.right)
        if not (_is_number(left) and _is_number(right)):
            msg = "arithmetic needs numeric operands"
            raise PredicateError(msg)
        try:
            return op(left, right)
        except ArithmeticError as exc:
            raise PredicateError(str(exc)) from exc

    def visit_Compare(self, node: ast.Compare) -> bool:
        left = self.visit(node.left)
        for op_node, comparator in zip(node.ops, node.comparators, strict=True):
            op = _COMPARE_OPS.get(type(op_node))
            if op is None:
                msg = f"unsupported comparison '{op_node.__class__.__name__}'"
                raise PredicateError(msg)
            right = self.visit(comparator)
            try:
                holds = op(left, right)
            except TypeError as exc:
                raise PredicateError(str(exc)) from exc
            if not holds:
                return False
            left = right
        return True

    @staticmethod
    def _boolean(value: object) -> bool:
        if not isinstance(value, bool):
            msg = f"expected a boolean, got {type(value).__name__}"
            raise PredicateError(msg)
        return value


def compile_predicate(text: str) -> ast.Expression:
    """Parse *text* after rewriting the C-style logical operators."""
    normalised = _C_STYLE.sub(_rewrite_operator, text)
    try:
        return ast.parse(normalised.strip(), mode="eval")
    except SyntaxError as exc:
        msg = f"invalid predicate syntax {text!r}: {exc.msg}"
        raise PredicateError(msg) from exc
    except (RecursionError, MemoryError) as exc:
        msg = "predicate is nested too deeply"
        raise PredicateError(msg) from exc


def evaluate_predicate(text: str, variables: Mapping[str, object]) -> bool:
    """Evaluate *text* against *variables*; the result must be a boolean."""
    tree = compile_predicate(text)
    try:
        result = _PredicateEvaluator(variables).visit(tree)
    except RecursionError as exc:
        msg = "predicate is nested too deeply"
        raise PredicateError(msg) from exc
    if not isinstance(result, bool):
        msg = f"predicate {text!r} evaluated to {type(result).__name__}, not a boolean"
        raise PredicateError(msg)
    return result
