"""Component file discovery over a workspace tree."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Iterator, NamedTuple

from a11y_audit.models.audit import ComponentFile
from a11y_audit.utils.errors import WorkspaceError
from a11y_audit.utils.logging import get_logger

logger = get_logger("discovery")

DEFAULT_SEARCH_DIRS = ("components", "pages", "src/components", "src/pages")
DEFAULT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")


class EntryKind(str, Enum):
    """Kind of a directory listing entry."""

    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


class DirEntry(NamedTuple):
    """One entry of a directory listing, tagged with its kind."""

    kind: EntryKind
    path: Path


def list_directory(directory: Path) -> list[DirEntry]:
    """List a directory as tagged entries sorted by name.

    Symlinks are followed, so a link to a directory is a DIRECTORY entry.
    """
    entries: list[DirEntry] = []
    with os.scandir(directory) as it:
        for entry in it:
            path = Path(entry.path)
            try:
                if entry.is_dir():
                    kind = EntryKind.DIRECTORY
                elif entry.is_file():
                    kind = EntryKind.FILE
                else:
                    kind = EntryKind.OTHER
            except OSError:
                kind = EntryKind.OTHER
            entries.append(DirEntry(kind, path))
    entries.sort(key=lambda e: e.path.name)
    return entries


class FileDiscoverer:
    """Finds UI component source files under a workspace.

    Each candidate root (e.g. ``components`` or ``src/pages``) that exists
    under the workspace is walked recursively. Files are returned in a
    stable order: roots in configured order, then depth first with entries
    sorted by name.

    Example:
        discoverer = FileDiscoverer()
        for component in discoverer.discover(Path("/tmp/checkout")):
            print(component.path, len(component.content))
    """

    def __init__(
        self,
        search_dirs: list[str] | tuple[str, ...] = DEFAULT_SEARCH_DIRS,
        extensions: list[str] | tuple[str, ...] = DEFAULT_EXTENSIONS,
    ) -> None:
        """Initialize the discoverer.

        Args:
            search_dirs: Candidate roots relative to the workspace, in search order
            extensions: Allowed file extensions, matched case-insensitively
        """
        self.search_dirs = list(search_dirs)
        self.extensions = {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions}

    def discover(self, workspace_root: Path | str) -> list[ComponentFile]:
        """Discover component files under a workspace.

        Args:
            workspace_root: Existing directory holding the repository tree

        Returns:
            Component files in deterministic order

        Raises:
            WorkspaceError: If the workspace root is missing or unreadable
        """
        root = Path(workspace_root)
        if not root.is_dir():
            raise WorkspaceError(f"Workspace root is not a directory: {root}", path=str(root))
        if not os.access(root, os.R_OK | os.X_OK):
            raise WorkspaceError(f"Workspace root is not readable: {root}", path=str(root))

        files: list[ComponentFile] = []
        seen_files: set[Path] = set()
        visited_dirs: set[str] = set()

        for search_dir in self.search_dirs:
            candidate = root / search_dir
            if not candidate.is_dir():
                logger.debug(f"Skipping missing search directory: {search_dir}")
                continue

            for file_path in self._walk(candidate, visited_dirs):
                full_path = file_path.absolute()
                if full_path in seen_files:
                    continue
                seen_files.add(full_path)
                files.append(self._read(candidate, full_path))

        logger.debug(f"Discovered {len(files)} component files under {root}")
        return files

    def is_component(self, path: Path) -> bool:
        """Check whether a file name carries an allowed extension."""
        return path.suffix.lower() in self.extensions

    def _walk(self, directory: Path, visited_dirs: set[str]) -> Iterator[Path]:
        real = os.path.realpath(directory)
        if real in visited_dirs:
            logger.debug(f"Skipping already visited directory: {directory}")
            return
        visited_dirs.add(real)

        try:
            entries = list_directory(directory)
        except OSError as e:
            logger.warning(f"Cannot list directory {directory}: {e}")
            return

        for entry in entries:
            if entry.kind is EntryKind.DIRECTORY:
                yield from self._walk(entry.path, visited_dirs)
            elif entry.kind is EntryKind.FILE and self.is_component(entry.path):
                yield entry.path

    def _read(self, search_root: Path, full_path: Path) -> ComponentFile:
        """Snapshot one file.

        Undecodable bytes become U+FFFD so rules still see the rest of the
        line. A file that cannot be opened is kept with ``read_error`` set
        and is not evaluated.
        """
        path = full_path.relative_to(search_root.absolute()).as_posix()
        # newline="" keeps carriage returns in the snapshot
        try:
            with open(full_path, encoding="utf-8", errors="replace", newline="") as f:
                content = f.read()
        except OSError as e:
            logger.warning(f"Cannot read {full_path}: {e}")
            return ComponentFile(path=path, full_path=full_path, read_error=f"{type(e).__name__}: {e}")

        return ComponentFile(path=path, full_path=full_path, content=content)
