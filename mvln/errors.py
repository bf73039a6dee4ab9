"""
Exception types raised by :mod:`mvln`.

Every failure of a move-and-link operation is reported as a subclass of
:class:`MvlnError`.  Each class carries the paths involved as attributes so
that callers (the command line interface, or a script) can build their own
messages or recovery instructions without re-deriving any path logic.

Two classes describe *partial* success and must not be treated like the
others:

* :class:`RemoveError` - the data was copied to the destination but the
  original could not be removed.  It now exists in both places.
* :class:`SymlinkError` - the data was moved to the destination but the
  replacement link could not be created.  ``destination`` says where the
  data lives.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

__all__ = [
    "MvlnError",
    "SourceNotFoundError",
    "SourceAccessError",
    "DestinationExistsError",
    "IsDirectoryError",
    "SameSourceAndDestError",
    "DestinationInsideSourceError",
    "TypeMismatchError",
    "MoveError",
    "CopyError",
    "RemoveError",
    "SymlinkError",
    "CreateDirError",
    "InvalidDestinationError",
    "InvalidPathError",
    "GlobExpansionError",
    "BatchOperationError",
]


class MvlnError(Exception):
    """Base class for all mvln errors."""

    #: Set on errors raised after the filesystem was modified.
    partial = False


class SourceNotFoundError(MvlnError):
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"source not found: {self.path}")


class SourceAccessError(MvlnError):
    """The source exists but could not be inspected (permission denied, ...)."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot access source {self.path}: {reason}")


class DestinationExistsError(MvlnError):
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"destination already exists: {self.path}")


class IsDirectoryError(MvlnError):
    """A directory source was given without permission to move whole directories."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"source is a directory: {self.path}")


class SameSourceAndDestError(MvlnError):
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"source and destination are the same: {self.path}")


class DestinationInsideSourceError(MvlnError):
    def __init__(self, source: Path, destination: Path) -> None:
        self.source = Path(source)
        self.destination = Path(destination)
        super().__init__(f"cannot move directory into itself: {self.source} -> {self.destination}")


class TypeMismatchError(MvlnError):
    def __init__(self, source: Path, destination: Path, source_type: str, destination_type: str) -> None:
        self.source = Path(source)
        self.destination = Path(destination)
        self.source_type = source_type
        self.destination_type = destination_type
        super().__init__(
            f"type mismatch: cannot replace {destination_type} with {source_type}: "
            f"{self.source} -> {self.destination}"
        )


class MoveError(MvlnError):
    """Renaming failed, or an existing destination could not be removed.

    A destination directory being replaced may have been partly removed.
    """

    def __init__(self, source: Path, destination: Path, reason: str) -> None:
        self.source = Path(source)
        self.destination = Path(destination)
        self.reason = reason
        super().__init__(f"failed to move {self.source} to {self.destination}: {reason}")


class CopyError(MvlnError):
    """Cross-filesystem copy failed.  The source is untouched."""

    def __init__(self, source: Path, destination: Path, reason: str) -> None:
        self.source = Path(source)
        self.destination = Path(destination)
        self.reason = reason
        super().__init__(f"failed to copy {self.source} to {self.destination}: {reason}")


class RemoveError(MvlnError):
    """The copy succeeded but the original could not be removed."""

    partial = True

    def __init__(self, source: Path, destination: Path, reason: str) -> None:
        self.source = Path(source)
        self.destination = Path(destination)
        self.reason = reason
        super().__init__(f"copied but failed to remove source {self.source}: {reason}")


class SymlinkError(MvlnError):
    """The data is safe at ``destination`` but ``link`` could not be created."""

    partial = True

    def __init__(
        self,
        link: Path,
        destination: Path,
        reason: str,
        symlink_target: Optional[Path] = None,
    ) -> None:
        self.link = Path(link)
        self.destination = Path(destination)
        self.symlink_target = Path(symlink_target) if symlink_target is not None else self.destination
        self.reason = reason
        super().__init__(f"failed to create symlink {self.link} -> {self.symlink_target}: {reason}")


class CreateDirError(MvlnError):
    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"failed to create directory {self.path}: {reason}")


class InvalidDestinationError(MvlnError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"invalid destination: {reason}")


class InvalidPathError(MvlnError):
    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"invalid path {self.path}: {reason}")


class GlobExpansionError(MvlnError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"glob expansion failed: {reason}")


class BatchOperationError(MvlnError):
    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"{count} operation(s) failed")
