"""
Core routine for moving a file or directory and linking it back.

:func:`move_and_link` relocates ``source`` to ``destination`` and then
creates a symbolic link at ``source`` that points to the new location, so
anything that referred to the old path keeps working.

The operation runs in three phases:

1. *Preflight.*  Read-only checks: the source exists, the effective
   destination is resolved (moving into an existing directory appends the
   source's name), the move is not a self-move, a move of a directory into
   its own subtree or a move onto one of the source's own parents, and
   nothing is in the way unless overwriting was asked for.  The link's
   target value is computed here as well, so a dry run can report it.
2. *Move.*  An atomic :func:`os.rename` is tried first.  Across filesystems
   the data is copied, the copy is checked to be present, and only then is
   the original removed.
3. *Link.*  The replacement symlink is created at the original path.

Failures raise a subclass of :class:`mvln.errors.MvlnError`.  No step is
retried and nothing is rolled back; the exception says exactly what state the
filesystem was left in.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import (
    CopyError,
    CreateDirError,
    DestinationExistsError,
    DestinationInsideSourceError,
    InvalidDestinationError,
    InvalidPathError,
    MoveError,
    RemoveError,
    SameSourceAndDestError,
    SourceAccessError,
    SourceNotFoundError,
    SymlinkError,
)
from .paths import Entry, EntryKind, PathLike, absolute_no_follow, classify, compute_symlink_target

__all__ = [
    "MoveOptions",
    "MoveRequest",
    "MoveOutcome",
    "move_and_link",
    "execute",
    "resolve_destination",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveOptions:
    """Options for a single move-and-link operation."""

    use_absolute_links: bool = False
    force_overwrite: bool = False
    dry_run: bool = False


@dataclass(frozen=True)
class MoveRequest:
    source: Path
    destination: Path
    options: MoveOptions = field(default_factory=MoveOptions)


@dataclass(frozen=True)
class MoveOutcome:
    """Result of a successful (or dry-run) operation.

    ``final_source`` is the original path, now a symlink to
    ``symlink_target``.  ``final_destination`` is where the data lives after
    the move.  When ``dry_run`` is set nothing was touched and the values
    describe what would have happened.
    """

    final_source: Path
    final_destination: Path
    symlink_target: Path
    dry_run: bool = False


def resolve_destination(source: Path, destination: Path) -> Path:
    """Return the path ``source`` will actually be moved to.

    If ``destination`` is an existing directory (a link to a directory
    counts, as it does for ``mv``) the source's name is appended to it.
    Otherwise ``destination`` is returned unchanged.

    Raises
    ------
    InvalidPathError
        If ``destination`` is a directory and ``source`` has no usable name
        (``/``, ``.`` or ``..``).
    """
    if destination.is_dir():
        name = source.name
        if name in ("", ".", ".."):
            raise InvalidPathError(source, "source has no file name")
        return destination / name
    return destination


def move_and_link(
    source: PathLike,
    destination: PathLike,
    options: Optional[MoveOptions] = None,
) -> MoveOutcome:
    """Move ``source`` to ``destination`` and leave a symlink behind.

    The moved data is never lost.  Either the call raises before anything on
    disk has changed, or on return the data is at ``final_destination`` and
    ``source`` is a symlink to it.  The two partial outcomes raise their own
    exception types: :class:`~mvln.errors.RemoveError` (copied, original
    still present) and :class:`~mvln.errors.SymlinkError` (moved, link
    missing).

    Parameters
    ----------
    source: path-like
        The file, directory or symlink to move.  Symlinks are moved as links;
        they are never followed.
    destination: path-like
        Where to move it.  An existing directory receives the source under
        its own name.  Missing parent directories are created.
    options: MoveOptions, optional
        Link style, overwrite and dry-run switches.  Defaults to
        ``MoveOptions()``: relative links, no overwrite, real run.

    Returns
    -------
    MoveOutcome
        The original path, the resolved destination and the link's target.

    Raises
    ------
    SourceNotFoundError, SourceAccessError
        The source does not exist or could not be inspected.
    SameSourceAndDestError, DestinationInsideSourceError
        The move would destroy the source or never terminate.
    InvalidDestinationError
        The destination is a directory that contains the source.
    DestinationExistsError
        Something is at the destination and overwriting was not requested.
    InvalidPathError
        The source has no name to append to a directory destination.
    CreateDirError, MoveError, CopyError
        The move failed; the source is intact.
    RemoveError, SymlinkError
        Partial success, see above.
    """
    options = options or MoveOptions()
    source = Path(source)
    destination = Path(destination)

    source_entry = classify(source)
    if source_entry.kind is EntryKind.MISSING:
        raise SourceNotFoundError(source)
    if source_entry.kind is EntryKind.INACCESSIBLE:
        raise SourceAccessError(source, source_entry.reason or "unknown error")

    resolved = resolve_destination(source, destination)
    logger.debug("Resolved destination for %s: %s", source, resolved)

    source_abs = absolute_no_follow(source)
    resolved_abs = absolute_no_follow(resolved)
    if source_abs == resolved_abs or source_abs == absolute_no_follow(destination):
        raise SameSourceAndDestError(source)

    # Only a real directory can contain its destination; a link to one is moved as a link.
    if source_entry.is_real_dir and source_abs in resolved_abs.parents:
        raise DestinationInsideSourceError(source, resolved)

    # Overwriting one of the source's ancestors would delete the source.
    if resolved_abs in source_abs.parents:
        raise InvalidDestinationError(f"{resolved} contains the source {source}")

    dest_entry = classify(resolved)
    if dest_entry.exists and not options.force_overwrite:
        raise DestinationExistsError(resolved)

    symlink_target = compute_symlink_target(source, resolved, options.use_absolute_links)
    logger.debug("Symlink %s will point to %s", source, symlink_target)

    if options.dry_run:
        return MoveOutcome(source, resolved, symlink_target, dry_run=True)

    parent = resolved.parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CreateDirError(parent, str(exc)) from exc

    if dest_entry.exists:
        _remove_existing(source, dest_entry)

    _move(source, source_entry, resolved)
    _create_symlink(source, resolved, symlink_target)
    return MoveOutcome(source, resolved, symlink_target)


def execute(request: MoveRequest) -> MoveOutcome:
    """Run a :class:`MoveRequest`.  See :func:`move_and_link`."""
    return move_and_link(request.source, request.destination, request.options)


def _remove_existing(source: Path, existing: Entry) -> None:
    """Remove whatever occupies the destination before overwriting it.

    ``existing`` must come from :func:`classify`.  A link is unlinked even
    when it points to a directory: removing it recursively would delete the
    directory's contents and leave the link.
    """
    path = existing.path
    logger.debug("Removing existing %s at %s", existing.kind.value, path)
    try:
        if existing.is_real_dir:
            shutil.rmtree(path)
        else:
            os.unlink(path)
    except OSError as exc:
        raise MoveError(source, path, f"failed to remove existing {existing.kind.value}: {exc}") from exc


def _move(source: Path, source_entry: Entry, destination: Path) -> None:
    try:
        os.rename(source, destination)
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            raise MoveError(source, destination, str(exc)) from exc
        logger.debug("%s and %s are on different filesystems, copying", source, destination)
        _copy_and_remove(source, source_entry, destination)
    else:
        logger.debug("Renamed %s to %s", source, destination)


def _copy_and_remove(source: Path, source_entry: Entry, destination: Path) -> None:
    """Copy ``source`` to ``destination``, check the copy, then remove ``source``."""
    try:
        _copy_entry(source_entry, destination)
    except OSError as exc:
        raise CopyError(source, destination, str(exc)) from exc

    if not classify(destination).exists:
        raise CopyError(source, destination, "destination not found after copy")

    try:
        if source_entry.is_real_dir:
            shutil.rmtree(source)
        else:
            os.unlink(source)
    except OSError as exc:
        logger.warning("Copied %s to %s but could not remove the original: %s", source, destination, exc)
        raise RemoveError(source, destination, str(exc)) from exc


def _copy_entry(entry: Entry, destination: Path) -> None:
    """Copy one classified entry.  Links are recreated, never followed."""
    if entry.is_symlink:
        os.symlink(os.readlink(entry.path), destination)
    elif entry.is_real_dir:
        destination.mkdir(parents=True, exist_ok=True)
        with os.scandir(entry.path) as it:
            children = [Path(child.path) for child in it]
        for child in sorted(children):
            _copy_entry(classify(child), destination / child.name)
    elif entry.kind is EntryKind.REGULAR_FILE:
        shutil.copyfile(entry.path, destination, follow_symlinks=False)
        _copy_mtime(entry.path, destination)
    else:
        # Vanished or became unreadable while the tree was being copied.
        raise OSError(errno.ENOENT, f"cannot copy {entry.kind.value} entry", str(entry.path))


def _copy_mtime(source: Path, destination: Path) -> None:
    try:
        st = os.lstat(source)
        os.utime(destination, ns=(st.st_atime_ns, st.st_mtime_ns))
    except OSError as exc:
        logger.debug("Could not preserve modification time of %s: %s", source, exc)


def _create_symlink(source: Path, destination: Path, symlink_target: Path) -> None:
    # The source was just moved away; anything here appeared in between.
    leftover = classify(source)
    if leftover.exists and not leftover.is_real_dir:
        try:
            os.unlink(source)
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise SymlinkError(
                source, destination, f"failed to remove existing file at source: {exc}", symlink_target
            ) from exc
    try:
        os.symlink(symlink_target, source)
    except OSError as exc:
        logger.warning("Moved %s to %s but could not create the symlink: %s", source, destination, exc)
        raise SymlinkError(source, destination, str(exc), symlink_target) from exc
    logger.debug("Linked %s -> %s", source, symlink_target)
