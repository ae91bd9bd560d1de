"""Supplementary analyzers that run alongside the line rules."""

from __future__ import annotations

import json
import random
import re
import threading
from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import ValidationError as SchemaError

from a11y_audit.models.audit import AccessibilityIssue, AuditResult
from a11y_audit.utils.errors import AnalyzerError, retry
from a11y_audit.utils.logging import get_logger

logger = get_logger("analyzers")


class AnalyzerMode(str, Enum):
    """How analyzer findings combine with rule findings."""

    AUGMENT = "augment"
    REPLACE = "replace"


@runtime_checkable
class Analyzer(Protocol):
    """Protocol for supplementary analyzers.

    An analyzer gives a second, possibly non-deterministic opinion about
    one file. Its output is untrusted: the rule engine validates whatever
    ``analyze`` returns against the finding schema before using it.

    Example:
        class TodoAnalyzer:
            @property
            def name(self) -> str:
                return "todo"

            def analyze(self, path: str, content: str) -> AuditResult:
                issues = [
                    AccessibilityIssue(line=n, issue="TODO left in component", suggestion="Resolve it")
                    for n, line in enumerate(content.split("\\n"), start=1)
                    if "TODO" in line
                ]
                return AuditResult.ok(path, issues)
    """

    @property
    def name(self) -> str:
        """Unique name for this analyzer."""
        ...

    def analyze(self, path: str, content: str) -> Any:
        """Analyze a file.

        Args:
            path: Display path of the file
            content: File text

        Returns:
            An AuditResult, a mapping with an ``issues`` list, or a list
            of issue mappings
        """
        ...


def validate_analyzer_output(raw: Any, analyzer: str) -> list[AccessibilityIssue]:
    """Validate analyzer output against the finding schema.

    Args:
        raw: Whatever the analyzer returned
        analyzer: Analyzer name, recorded on each finding

    Returns:
        Validated findings tagged with the analyzer name

    Raises:
        AnalyzerError: If the output does not match the schema
    """
    if isinstance(raw, AuditResult):
        issues: Any = raw.issues
    elif isinstance(raw, Mapping):
        issues = raw.get("issues")
    else:
        issues = raw

    if not isinstance(issues, (list, tuple)):
        raise AnalyzerError(f"Expected a list of issues, got {type(issues).__name__}", analyzer=analyzer)

    validated: list[AccessibilityIssue] = []
    for item in issues:
        if isinstance(item, AccessibilityIssue):
            item = item.model_dump()
        if not isinstance(item, Mapping):
            raise AnalyzerError(f"Issue is not an object: {item!r}", analyzer=analyzer)
        try:
            issue = AccessibilityIssue.model_validate(
                {
                    "line": item.get("line"),
                    "issue": item.get("issue"),
                    "suggestion": item.get("suggestion"),
                    "rule": item.get("rule") or analyzer,
                }
            )
        except SchemaError as e:
            raise AnalyzerError(f"Invalid issue {item!r}: {e}", analyzer=analyzer)
        validated.append(issue)
    return validated


class HeuristicAnalyzer:
    """Random heuristic pass standing in for an AI reviewer.

    Flags a possible missing focus indicator with probability 0.5 and
    possibly insufficient contrast with probability 0.3, each at a random
    line.

    With ``seed`` set, each file draws from its own generator seeded by
    ``seed`` and the file path, so output does not depend on the order in
    which worker threads reach the files. Otherwise draws come from
    ``rng`` (shared, guarded by a lock).
    """

    FOCUS_PROBABILITY = 0.5
    CONTRAST_PROBABILITY = 0.3

    def __init__(self, rng: random.Random | None = None, seed: int | None = None) -> None:
        self._rng = rng or random.Random()
        self._seed = seed
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "heuristic"

    def analyze(self, path: str, content: str) -> AuditResult:
        line_count = len(content.split("\n"))
        if self._seed is not None:
            return AuditResult.ok(path, self._draw(random.Random(f"{self._seed}:{path}"), line_count))
        with self._lock:
            return AuditResult.ok(path, self._draw(self._rng, line_count))

    def _draw(self, rng: random.Random, line_count: int) -> list[AccessibilityIssue]:
        issues: list[AccessibilityIssue] = []

        if rng.random() < self.FOCUS_PROBABILITY:
            issues.append(
                AccessibilityIssue(
                    line=rng.randint(1, line_count),
                    issue="Missing focus indicator",
                    suggestion="Add visible focus styles for keyboard navigation",
                    rule="focus-indicator",
                )
            )

        if rng.random() < self.CONTRAST_PROBABILITY:
            issues.append(
                AccessibilityIssue(
                    line=rng.randint(1, line_count),
                    issue="Color contrast may be insufficient",
                    suggestion="Check color contrast ratio meets WCAG AA standards",
                    rule="color-contrast",
                )
            )

        return issues


PROMPT_TEMPLATE = """You are an accessibility expert. Audit the following React component for accessibility issues based on WCAG 2.1 Level AA. List each issue with line number, description, and suggestion for fix.

File: {path}
Content:
{content}

Please respond with a JSON object in this format:
{{
  "file": "{path}",
  "issues": [
    {{
      "line": 12,
      "issue": "Missing label on input",
      "suggestion": "Wrap the input in a <label> element or use aria-label."
    }}
  ]
}}"""

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class LLMAnalyzer:
    """Analyzer backed by an OpenAI-compatible chat completions endpoint.

    The reply is expected to contain a JSON object with an ``issues`` list.
    The parsed object is returned as-is; the rule engine validates it.

    Example:
        analyzer = LLMAnalyzer("https://api.openai.com", model="gpt-4o-mini", api_key="...")
        engine = RuleEngine(analyzer=analyzer)
    """

    def __init__(
        self,
        endpoint: str,
        model: str = "gpt-4o-mini",
        api_key: str | None = None,
        timeout_seconds: float = 30.0,
        max_tokens: int = 2048,
    ) -> None:
        """Initialize the analyzer.

        Args:
            endpoint: Base URL of the endpoint
            model: Model name sent with each request
            api_key: Bearer token, if the endpoint needs one
            timeout_seconds: HTTP timeout for each request
            max_tokens: Completion token limit
        """
        self._endpoint = endpoint.rstrip("/")
        self._model = model
        self._api_key = api_key
        self._timeout = timeout_seconds
        self._max_tokens = max_tokens

    @property
    def name(self) -> str:
        return "llm"

    def analyze(self, path: str, content: str) -> Any:
        prompt = PROMPT_TEMPLATE.format(path=path, content=content)
        try:
            data = self._complete(prompt)
        except httpx.HTTPError as e:
            raise AnalyzerError(f"Request to {self._endpoint} failed: {e}", analyzer=self.name)

        reply = data.get("choices", [{}])[0].get("message", {}).get("content", "")
        return self._parse_reply(reply)

    @retry(max_attempts=3, delay=1.0, exceptions=(httpx.TransportError,))
    def _complete(self, prompt: str) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        with httpx.Client(timeout=self._timeout) as client:
            response = client.post(
                f"{self._endpoint}/v1/chat/completions",
                headers=headers,
                json={
                    "model": self._model,
                    "messages": [{"role": "user", "content": prompt}],
                    "max_tokens": self._max_tokens,
                    "temperature": 0,
                },
            )
            response.raise_for_status()
            return response.json()

    def _parse_reply(self, reply: str) -> Any:
        match = _JSON_OBJECT.search(reply or "")
        if match is None:
            raise AnalyzerError("Reply contains no JSON object", analyzer=self.name)
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise AnalyzerError(f"Reply is not valid JSON: {e}", analyzer=self.name)
