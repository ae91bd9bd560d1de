"""RuleEngine for line-based accessibility checks."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from a11y_audit.core.analyzers import Analyzer, AnalyzerMode, validate_analyzer_output
from a11y_audit.core.rules import BUILTIN_RULESET
from a11y_audit.models.audit import AccessibilityIssue, AuditResult
from a11y_audit.models.rules import LineRule, RuleSet
from a11y_audit.utils.errors import AnalyzerError
from a11y_audit.utils.expression import SafeExpressionEvaluator
from a11y_audit.utils.logging import get_logger

logger = get_logger("engine")


def split_lines(content: str) -> list[str]:
    """Split file text into lines on line feeds only.

    Carriage returns stay part of the line text, so CRLF files report the
    same line numbers as LF files.
    """
    return content.split("\n")


class RuleEngine:
    """Evaluates line rules, and optionally an analyzer, against one file.

    Every enabled rule is tested against every line; each match appends
    one finding. Findings are ordered by line, then by rule order.
    ``evaluate`` never raises: an unexpected error becomes a failure
    result with a single synthetic finding.

    Example:
        engine = RuleEngine()
        result = engine.evaluate("Button.tsx", source)
        for issue in result.issues:
            print(f"{result.file}:{issue.line} {issue.issue}")

        # With a seeded heuristic pass
        engine = RuleEngine(analyzer=HeuristicAnalyzer(random.Random(42)))
    """

    def __init__(
        self,
        ruleset: RuleSet | None = None,
        analyzer: Analyzer | None = None,
        mode: AnalyzerMode | str = AnalyzerMode.AUGMENT,
        analyzer_timeout: float = 30.0,
        max_analyzer_calls: int = 8,
    ) -> None:
        """Initialize the engine.

        Args:
            ruleset: Rules to apply (defaults to the built-in rules)
            analyzer: Optional supplementary analyzer
            mode: Whether analyzer findings augment or replace rule findings
            analyzer_timeout: Seconds to wait for the analyzer per file
            max_analyzer_calls: Maximum simultaneous analyzer calls, usually the
                orchestrator worker count
        """
        self.ruleset = ruleset or BUILTIN_RULESET
        self.analyzer = analyzer
        self.mode = AnalyzerMode(mode)
        self.analyzer_timeout = analyzer_timeout
        self._max_analyzer_calls = max_analyzer_calls
        self._evaluator = SafeExpressionEvaluator()
        self._failing_rules: set[str] = set()
        self._lock = threading.Lock()
        self._slots = threading.BoundedSemaphore(max_analyzer_calls)
        self._executor: ThreadPoolExecutor | None = None

        for rule in self.ruleset.enabled_rules:
            # Fail fast on syntax errors in loaded rule packs
            self._evaluator.compile(rule.condition)

    def __enter__(self) -> "RuleEngine":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the analyzer thread pool, abandoning hung calls."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)

    def evaluate(self, path: str, content: str) -> AuditResult:
        """Audit one file.

        Args:
            path: Display path of the file
            content: File text

        Returns:
            AuditResult with findings in detection order
        """
        try:
            issues = self.check_lines(content)
            if self.analyzer is not None:
                extra = self._run_analyzer(path, content)
                if self.mode is AnalyzerMode.REPLACE and extra:
                    issues = extra
                else:
                    issues.extend(extra)
            return AuditResult.ok(path, issues)
        except Exception as e:
            logger.warning(f"Audit of {path} failed: {e}")
            return AuditResult.failure(path, e)

    def check_lines(self, content: str) -> list[AccessibilityIssue]:
        """Apply the enabled rules to every line of ``content``."""
        rules = self.ruleset.enabled_rules
        issues: list[AccessibilityIssue] = []

        for number, line in enumerate(split_lines(content), start=1):
            for rule in rules:
                if self._matches(rule, line):
                    issues.append(
                        AccessibilityIssue(
                            line=number,
                            issue=rule.issue,
                            suggestion=rule.suggestion,
                            rule=rule.id,
                        )
                    )
        return issues

    def _matches(self, rule: LineRule, line: str) -> bool:
        try:
            return bool(self._evaluator.evaluate(rule.condition, {"line": line}))
        except Exception as e:
            # no match for this line; later lines still evaluate the rule
            with self._lock:
                first = rule.id not in self._failing_rules
                self._failing_rules.add(rule.id)
            if first:
                logger.warning(f"Rule {rule.id} condition failed on a line, treating it as no match: {e}")
            return False

    def _run_analyzer(self, path: str, content: str) -> list[AccessibilityIssue]:
        """Call the analyzer under a timeout and validate its output.

        A call slot is taken before submitting and held until the call
        returns, even after a timeout, so the timeout counts from the start
        of the call. Any failure yields no supplementary findings.
        """
        assert self.analyzer is not None
        name = getattr(self.analyzer, "name", type(self.analyzer).__name__)

        if not self._slots.acquire(timeout=self.analyzer_timeout):
            logger.warning(f"Analyzer {name} busy for {self.analyzer_timeout}s, skipping {path}")
            return []
        try:
            future = self._get_executor().submit(self.analyzer.analyze, path, content)
        except Exception:
            self._slots.release()
            raise
        future.add_done_callback(lambda _: self._slots.release())

        try:
            raw = future.result(timeout=self.analyzer_timeout)
            return validate_analyzer_output(raw, name)
        except FutureTimeoutError:
            future.cancel()
            logger.warning(f"Analyzer {name} timed out after {self.analyzer_timeout}s on {path}")
        except AnalyzerError as e:
            logger.warning(f"Discarding {name} output for {path}: {e.message}")
        except Exception as e:
            logger.warning(f"Analyzer {name} failed on {path}: {e}")
        return []

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_analyzer_calls,
                    thread_name_prefix="a11y-analyzer",
                )
            return self._executor
