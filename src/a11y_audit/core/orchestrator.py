"""AuditOrchestrator: concurrent fan-out of the rule engine over a workspace."""

from __future__ import annotations

import random
import threading
import time
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Iterator

from a11y_audit.core.analyzers import Analyzer, HeuristicAnalyzer, LLMAnalyzer
from a11y_audit.core.discovery import FileDiscoverer
from a11y_audit.core.engine import RuleEngine
from a11y_audit.core.rules import build_ruleset
from a11y_audit.core.workspace import WorkspaceProvider, open_workspace
from a11y_audit.models.audit import AuditResult, AuditRun, ComponentFile
from a11y_audit.models.common import AuditError
from a11y_audit.utils.config import A11yAuditConfig
from a11y_audit.utils.errors import A11yAuditError, AuditCancelledError, NoComponentFilesError
from a11y_audit.utils.logging import get_logger, get_logger_with_context

logger = get_logger("orchestrator")


class AuditOrchestrator:
    """Runs the rule engine over every discovered file.

    Files are evaluated on a bounded thread pool. Each worker returns its
    result to the orchestrator, which alone writes the result slots, and
    the run is reassembled in discovery order whatever the completion
    order. A file that could not be read, or whose evaluation failed, gets a
    failure result; other files are unaffected.

    Example:
        orchestrator = AuditOrchestrator(max_workers=4)

        run = orchestrator.run("/tmp/checkout")
        for result in run.results:
            print(result.file, result.issue_count)

        # Clone, audit and clean up
        run = orchestrator.audit(GitWorkspace("https://github.com/org/app"))
    """

    def __init__(
        self,
        engine: RuleEngine | None = None,
        discoverer: FileDiscoverer | None = None,
        max_workers: int = 8,
        timeout: float | None = None,
        poll_interval: float = 0.05,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            engine: Rule engine to run per file
            discoverer: File discoverer
            max_workers: Maximum simultaneous evaluations
            timeout: Default whole-run deadline in seconds
            poll_interval: How often to check for cancellation, in seconds
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.engine = engine or RuleEngine()
        self.discoverer = discoverer or FileDiscoverer()
        self.max_workers = max_workers
        self.timeout = timeout
        self._poll_interval = poll_interval

    @classmethod
    def from_config(cls, config: A11yAuditConfig) -> "AuditOrchestrator":
        """Build an orchestrator and its collaborators from configuration."""
        discoverer = FileDiscoverer(
            search_dirs=config.discovery.search_dirs,
            extensions=config.discovery.extensions,
        )
        engine = RuleEngine(
            ruleset=build_ruleset(config.engine.include_builtin, config.engine.rules_file),
            analyzer=create_analyzer(config),
            mode=config.analyzer.mode,
            analyzer_timeout=config.analyzer.timeout,
            max_analyzer_calls=config.concurrency.max_workers,
        )
        return cls(
            engine=engine,
            discoverer=discoverer,
            max_workers=config.concurrency.max_workers,
            timeout=config.concurrency.timeout,
        )

    def __enter__(self) -> "AuditOrchestrator":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release engine resources."""
        self.engine.close()

    def discover(self, workspace_root: Path | str) -> list[ComponentFile]:
        """Discover files, treating an empty result as an error.

        Raises:
            WorkspaceError: If the workspace root is missing or unreadable
            NoComponentFilesError: If nothing was found
        """
        files = self.discoverer.discover(workspace_root)
        if not files:
            raise NoComponentFilesError(self.discoverer.search_dirs)
        return files

    def run(
        self,
        workspace_root: Path | str,
        cancel_event: threading.Event | None = None,
        timeout: float | None = None,
    ) -> AuditRun:
        """Audit every component file under a workspace.

        Args:
            workspace_root: Existing directory holding the tree
            cancel_event: Set to abandon the run
            timeout: Whole-run deadline in seconds (defaults to ``self.timeout``)

        Returns:
            AuditRun with one result per discovered file, in discovery order

        Raises:
            WorkspaceError: If the workspace root is missing or unreadable
            NoComponentFilesError: If nothing was found
            AuditCancelledError: If cancelled or past the deadline
        """
        files = self.discover(workspace_root)
        slots: list[AuditResult | None] = [None] * len(files)
        errors: dict[int, AuditError] = {}

        for index, result, error in self._dispatch(workspace_root, files, cancel_event, timeout):
            slots[index] = result
            if error is not None:
                errors[index] = error

        results = [r for r in slots if r is not None]
        if len(results) != len(files):
            raise RuntimeError("Audit finished with missing results")

        return AuditRun(results=results, errors=[errors[i] for i in sorted(errors)])

    def stream(
        self,
        workspace_root: Path | str,
        cancel_event: threading.Event | None = None,
        timeout: float | None = None,
    ) -> Iterator[tuple[int, AuditResult]]:
        """Yield ``(discovery_index, result)`` pairs as files complete.

        Closing the iterator early abandons the remaining files.
        """
        files = self.discover(workspace_root)
        for index, result, _ in self._dispatch(workspace_root, files, cancel_event, timeout):
            yield index, result

    def audit(
        self,
        provider: WorkspaceProvider,
        cancel_event: threading.Event | None = None,
        timeout: float | None = None,
    ) -> AuditRun:
        """Acquire a workspace, audit it, and always release it."""
        with open_workspace(provider) as root:
            return self.run(root, cancel_event=cancel_event, timeout=timeout)

    def _dispatch(
        self,
        workspace_root: Path | str,
        files: list[ComponentFile],
        cancel_event: threading.Event | None,
        timeout: float | None,
    ) -> Iterator[tuple[int, AuditResult, AuditError | None]]:
        if timeout is None:
            timeout = self.timeout
        deadline = time.monotonic() + timeout if timeout is not None else None
        workers = min(self.max_workers, len(files))

        log = get_logger_with_context("orchestrator", workspace=str(workspace_root))
        log.info(f"Auditing {len(files)} files with {workers} workers")

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="a11y-audit")
        futures = {executor.submit(self._evaluate_one, f): i for i, f in enumerate(files)}
        pending = set(futures)

        try:
            while pending:
                self._check_cancelled(cancel_event, deadline, timeout)

                wait_for = self._poll_interval
                if deadline is not None:
                    wait_for = max(0.0, min(wait_for, deadline - time.monotonic()))

                done, pending = wait(pending, timeout=wait_for, return_when=FIRST_COMPLETED)
                for future in done:
                    result, error = future.result()
                    yield futures[future], result, error
        finally:
            if pending:
                log.warning(f"Abandoning {len(pending)} unfinished files")
            executor.shutdown(wait=not pending, cancel_futures=True)

        log.debug("All files audited")

    def _evaluate_one(self, file: ComponentFile) -> tuple[AuditResult, AuditError | None]:
        if file.read_error is not None:
            return AuditResult.failure(file.path, file.read_error), AuditError(
                code="FILE_READ_ERROR",
                message=file.read_error,
                details={"file": str(file.full_path)},
            )

        try:
            result = self.engine.evaluate(file.path, file.content)
        except A11yAuditError as e:
            logger.warning(f"Audit of {file.full_path} raised: {e.message}")
            error = e.to_audit_error()
            details = {**error.details, "file": str(file.full_path)}
            return AuditResult.failure(file.path, e), error.model_copy(update={"details": details})
        except Exception as e:
            logger.warning(f"Audit of {file.full_path} raised: {e}")
            return AuditResult.failure(file.path, e), AuditError.for_file(str(file.full_path), e)

        if result.failed:
            message = result.issues[0].issue if result.issues else "Audit failed"
            return result, AuditError(
                code="FILE_AUDIT_ERROR",
                message=message,
                details={"file": str(file.full_path)},
            )
        return result, None

    @staticmethod
    def _check_cancelled(
        cancel_event: threading.Event | None,
        deadline: float | None,
        timeout: float | None,
    ) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise AuditCancelledError()
        if deadline is not None and time.monotonic() >= deadline:
            raise AuditCancelledError(f"Audit exceeded its {timeout}s deadline", timeout=timeout)


def create_analyzer(config: A11yAuditConfig) -> Analyzer | None:
    """Pick the supplementary analyzer described by configuration.

    An analyzer endpoint takes precedence over the heuristic pass.
    """
    if config.analyzer.endpoint:
        logger.debug(f"Using LLM analyzer at {config.analyzer.endpoint}")
        return LLMAnalyzer(
            config.analyzer.endpoint,
            model=config.analyzer.model,
            api_key=config.analyzer.resolved_api_key(),
            timeout_seconds=config.analyzer.timeout,
        )
    if config.engine.heuristics:
        seed = config.engine.seed
        return HeuristicAnalyzer(rng=random.Random(seed), seed=seed)
    return None
