"""Safe expression evaluator for line rule conditions."""

from __future__ import annotations

import ast
import functools
import operator
from typing import Any, Callable


class SafeExpressionEvaluator:
    """Safe evaluator for rule condition expressions.

    Conditions are parsed with Python's AST and walked node by node;
    nothing is passed to eval(). Only a small, text-oriented subset of
    Python is accepted, which is all a line rule needs.

    Supported operations:
    - Comparisons: ==, !=, <, <=, >, >=, in, not in
    - Boolean: and, or, not
    - String methods: line.lower(), line.count('x'), line.startswith(...)
    - Built-ins: len, any, all, min, max, int, str, bool
    - Literals: strings, numbers, booleans, None, lists, tuples
    - Single-loop comprehensions: any(a in line for a in ['x', 'y'])

    Example:
        evaluator = SafeExpressionEvaluator()
        evaluator.evaluate("'<img' in line and 'alt=' not in line", {"line": '<img src="x">'})
    """

    COMPARE_OPS: dict[type, Callable[[Any, Any], bool]] = {
        ast.Eq: operator.eq,
        ast.NotEq: operator.ne,
        ast.Lt: operator.lt,
        ast.LtE: operator.le,
        ast.Gt: operator.gt,
        ast.GtE: operator.ge,
        ast.In: lambda a, b: a in b,
        ast.NotIn: lambda a, b: a not in b,
    }

    BINARY_OPS: dict[type, Callable[[Any, Any], Any]] = {
        ast.Add: operator.add,
        ast.Sub: operator.sub,
    }

    UNARY_OPS: dict[type, Callable[[Any], Any]] = {
        ast.Not: operator.not_,
        ast.USub: operator.neg,
    }

    ALLOWED_FUNCTIONS: dict[str, Callable[..., Any]] = {
        "len": len,
        "str": str,
        "int": int,
        "bool": bool,
        "min": min,
        "max": max,
        "all": all,
        "any": any,
    }

    ALLOWED_STRING_METHODS = {
        "startswith",
        "endswith",
        "lower",
        "upper",
        "strip",
        "lstrip",
        "rstrip",
        "split",
        "find",
        "count",
    }

    def __init__(self, max_depth: int = 12) -> None:
        """Initialize the evaluator.

        Args:
            max_depth: Maximum AST depth to prevent stack overflow
        """
        self._max_depth = max_depth

    def compile(self, expression: str) -> ast.expr:
        """Parse an expression, raising ValueError on invalid syntax.

        Parsed trees are cached, so rules evaluated once per line only pay
        for parsing once.
        """
        return _parse(expression)

    def evaluate(self, expression: str, context: dict[str, Any]) -> Any:
        """Evaluate an expression with the given context.

        Args:
            expression: Python expression string
            context: Variables available in the expression

        Returns:
            Result of evaluating the expression

        Raises:
            ValueError: If expression is invalid or unsafe
        """
        return self._eval_node(self.compile(expression), context, depth=0)

    def _eval_node(self, node: ast.AST, context: dict[str, Any], depth: int) -> Any:
        if depth > self._max_depth:
            raise ValueError("Expression too deeply nested")

        if isinstance(node, ast.Constant):
            return node.value

        if isinstance(node, ast.Name):
            if node.id in self.ALLOWED_FUNCTIONS:
                return self.ALLOWED_FUNCTIONS[node.id]
            if node.id in context:
                return context[node.id]
            raise ValueError(f"Unknown variable: {node.id}")

        if isinstance(node, ast.Attribute):
            value = self._eval_node(node.value, context, depth + 1)
            if isinstance(value, str) and node.attr in self.ALLOWED_STRING_METHODS:
                return getattr(value, node.attr)
            raise ValueError(f"Cannot access attribute '{node.attr}'")

        if isinstance(node, ast.Subscript):
            value = self._eval_node(node.value, context, depth + 1)
            key = self._eval_node(node.slice, context, depth + 1)
            return value[key]

        if isinstance(node, ast.Call):
            func = self._eval_node(node.func, context, depth + 1)
            args = [self._eval_node(arg, context, depth + 1) for arg in node.args]
            if node.keywords:
                raise ValueError("Keyword arguments are not supported")
            return func(*args)

        if isinstance(node, ast.Compare):
            left = self._eval_node(node.left, context, depth + 1)
            for op, comparator in zip(node.ops, node.comparators):
                op_func = self.COMPARE_OPS.get(type(op))
                if op_func is None:
                    raise ValueError(f"Unsupported comparison operator: {type(op).__name__}")
                right = self._eval_node(comparator, context, depth + 1)
                if not op_func(left, right):
                    return False
                left = right
            return True

        if isinstance(node, ast.BoolOp):
            if isinstance(node.op, ast.And):
                for value in node.values:
                    if not self._eval_node(value, context, depth + 1):
                        return False
                return True
            for value in node.values:
                if self._eval_node(value, context, depth + 1):
                    return True
            return False

        if isinstance(node, ast.UnaryOp):
            op_func = self.UNARY_OPS.get(type(node.op))
            if op_func is None:
                raise ValueError(f"Unsupported unary operator: {type(node.op).__name__}")
            return op_func(self._eval_node(node.operand, context, depth + 1))

        if isinstance(node, ast.BinOp):
            op_func = self.BINARY_OPS.get(type(node.op))
            if op_func is None:
                raise ValueError(f"Unsupported binary operator: {type(node.op).__name__}")
            left = self._eval_node(node.left, context, depth + 1)
            right = self._eval_node(node.right, context, depth + 1)
            return op_func(left, right)

        if isinstance(node, (ast.List, ast.Tuple)):
            return [self._eval_node(elt, context, depth + 1) for elt in node.elts]

        if isinstance(node, ast.IfExp):
            if self._eval_node(node.test, context, depth + 1):
                return self._eval_node(node.body, context, depth + 1)
            return self._eval_node(node.orelse, context, depth + 1)

        if isinstance(node, (ast.ListComp, ast.GeneratorExp)):
            return self._eval_comprehension(node, context, depth)

        raise ValueError(f"Unsupported expression type: {type(node).__name__}")

    def _eval_comprehension(
        self, node: ast.ListComp | ast.GeneratorExp, context: dict[str, Any], depth: int
    ) -> list[Any]:
        """Evaluate a single-loop comprehension eagerly."""
        if len(node.generators) != 1:
            raise ValueError("Only single-loop comprehensions are supported")

        gen = node.generators[0]
        if not isinstance(gen.target, ast.Name):
            raise ValueError("Only simple loop variables are supported")

        iterable = self._eval_node(gen.iter, context, depth + 1)
        result = []
        for item in iterable:
            local_context = {**context, gen.target.id: item}
            if all(self._eval_node(cond, local_context, depth + 1) for cond in gen.ifs):
                result.append(self._eval_node(node.elt, local_context, depth + 1))
        return result


@functools.lru_cache(maxsize=512)
def _parse(expression: str) -> ast.expr:
    try:
        return ast.parse(expression, mode="eval").body
    except SyntaxError as e:
        raise ValueError(f"Invalid expression syntax: {e}")


_evaluator = SafeExpressionEvaluator()


def safe_eval(expression: str, context: dict[str, Any]) -> Any:
    """Safely evaluate an expression.

    Args:
        expression: Python expression string
        context: Variables available in the expression

    Returns:
        Result of evaluating the expression
    """
    return _evaluator.evaluate(expression, context)
