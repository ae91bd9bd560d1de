"""Unit tests for the SafeExpressionEvaluator."""

import pytest

from a11y_audit.utils.expression import SafeExpressionEvaluator, safe_eval


class TestSafeExpressionEvaluator:
    """Tests for SafeExpressionEvaluator."""

    @pytest.fixture
    def evaluator(self):
        """Create an evaluator instance."""
        return SafeExpressionEvaluator()

    @pytest.fixture
    def line(self):
        return {"line": '  <img src="logo.png" onClick={open}>'}

    def test_evaluate_literals(self, evaluator):
        """Test evaluating literals."""
        assert evaluator.evaluate("'hello'", {}) == "hello"
        assert evaluator.evaluate("-5", {}) == -5
        assert evaluator.evaluate("True", {}) is True
        assert evaluator.evaluate("None", {}) is None

    def test_substring_checks(self, evaluator, line):
        """Test in / not in against the line."""
        assert evaluator.evaluate("'<img' in line", line) is True
        assert evaluator.evaluate("'alt=' not in line", line) is True
        assert evaluator.evaluate("'<input' in line", line) is False

    def test_boolean_operators(self, evaluator, line):
        assert evaluator.evaluate("'<img' in line and 'alt=' not in line", line) is True
        assert evaluator.evaluate("'<input' in line or 'onClick' in line", line) is True
        assert evaluator.evaluate("not 'onClick' in line", line) is False

    def test_string_methods(self, evaluator, line):
        """Test the allowed string methods."""
        assert evaluator.evaluate("line.strip().startswith('<img')", line) is True
        assert evaluator.evaluate("'ONCLICK' in line.upper()", line) is True
        assert evaluator.evaluate("line.count('=')", line) == 2

    def test_builtins_and_comprehension(self, evaluator, line):
        assert evaluator.evaluate("len(line) > 10", line) is True
        assert evaluator.evaluate("any(h in line for h in ['onKeyDown', 'onKeyPress'])", line) is False
        assert evaluator.evaluate("[w for w in ['a', 'bb'] if len(w) > 1]", {}) == ["bb"]

    def test_conditional_expression(self, evaluator, line):
        assert evaluator.evaluate("'img' if '<img' in line else 'other'", line) == "img"

    def test_subscript(self, evaluator, line):
        assert evaluator.evaluate("line.split('=')[0]", line) == "  <img src"

    def test_chained_comparison(self, evaluator):
        assert evaluator.evaluate("1 < 2 < 3", {}) is True
        assert evaluator.evaluate("1 < 3 < 2", {}) is False

    def test_unknown_variable(self, evaluator):
        with pytest.raises(ValueError, match="Unknown variable"):
            evaluator.evaluate("source", {"line": ""})

    @pytest.mark.parametrize(
        "expression",
        [
            "line.__class__",
            "line.format",
            "__import__('os')",
            "open('/etc/passwd')",
            "lambda: 1",
            "line * 2",
        ],
    )
    def test_rejects_unsafe(self, evaluator, expression):
        with pytest.raises(ValueError):
            evaluator.evaluate(expression, {"line": "x"})

    def test_keyword_arguments_rejected(self, evaluator):
        with pytest.raises(ValueError, match="Keyword arguments"):
            evaluator.evaluate("line.split(sep='=')", {"line": "a=b"})

    def test_syntax_error(self, evaluator):
        with pytest.raises(ValueError, match="Invalid expression syntax"):
            evaluator.compile("'<img' in")

    def test_depth_limit(self):
        evaluator = SafeExpressionEvaluator(max_depth=3)
        with pytest.raises(ValueError, match="too deeply nested"):
            evaluator.evaluate("not not not not not True", {})

    def test_compile_cached(self, evaluator):
        assert evaluator.compile("'x' in line") is evaluator.compile("'x' in line")


def test_safe_eval():
    """Test the module-level convenience function."""
    assert safe_eval("'<button' in line", {"line": "<button>"}) is True
