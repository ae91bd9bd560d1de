"""Workspace providers that put a repository tree on local disk."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Protocol, runtime_checkable

from a11y_audit.utils.errors import WorkspaceError
from a11y_audit.utils.logging import get_logger

logger = get_logger("workspace")


@runtime_checkable
class WorkspaceProvider(Protocol):
    """Protocol for workspace providers.

    ``release`` is called exactly once for every successful ``acquire``.
    Use ``open_workspace`` rather than calling the pair directly.
    """

    def acquire(self) -> Path:
        """Materialize the tree and return its root directory."""
        ...

    def release(self, path: Path) -> None:
        """Remove whatever ``acquire`` created."""
        ...


class GitWorkspace:
    """Shallow-clones a repository into a temporary directory.

    Example:
        with open_workspace(GitWorkspace("https://github.com/org/app")) as root:
            run = orchestrator.run(root)
    """

    def __init__(
        self,
        repo_url: str,
        git_executable: str = "git",
        depth: int = 1,
        timeout: float = 300.0,
    ) -> None:
        """Initialize the provider.

        Args:
            repo_url: Repository to clone
            git_executable: git binary to run
            depth: Shallow clone depth
            timeout: Seconds before the clone is abandoned
        """
        self.repo_url = repo_url
        self._git = git_executable
        self._depth = depth
        self._timeout = timeout

    def acquire(self) -> Path:
        """Clone the repository.

        Raises:
            WorkspaceError: If git is missing, fails, or times out
        """
        temp_dir = Path(tempfile.mkdtemp(prefix="a11y-audit-"))
        cmd = [self._git, "clone", "--depth", str(self._depth), "--", self.repo_url, str(temp_dir)]
        logger.info(f"Cloning {self.repo_url}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self._timeout)
        except FileNotFoundError:
            self._remove(temp_dir)
            raise WorkspaceError(f"git executable not found: {self._git}")
        except subprocess.TimeoutExpired:
            self._remove(temp_dir)
            raise WorkspaceError(f"Cloning {self.repo_url} timed out after {self._timeout}s")

        if result.returncode != 0:
            self._remove(temp_dir)
            message = result.stderr.strip() or f"git exited with status {result.returncode}"
            raise WorkspaceError(f"Failed to clone {self.repo_url}: {message}")

        return temp_dir

    def release(self, path: Path) -> None:
        self._remove(path)

    @staticmethod
    def _remove(path: Path) -> None:
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to clean up temp directory {path}: {e}")


class LocalWorkspace:
    """Uses an existing directory as the workspace; nothing to clean up."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def acquire(self) -> Path:
        if not self.path.is_dir():
            raise WorkspaceError(f"Not a directory: {self.path}", path=str(self.path))
        return self.path

    def release(self, path: Path) -> None:
        logger.debug(f"Leaving local workspace {path} in place")


@contextmanager
def open_workspace(provider: WorkspaceProvider) -> Iterator[Path]:
    """Acquire a workspace and release it on every exit path.

    Args:
        provider: The workspace provider

    Yields:
        Root directory of the workspace
    """
    path = provider.acquire()
    try:
        yield path
    finally:
        provider.release(path)
