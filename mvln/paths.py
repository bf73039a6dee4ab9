"""
Path inspection and symlink target computation.

Nothing in this module modifies the filesystem.  It answers three questions
for the move engine in :mod:`mvln.mover`:

* what *is* a path, without following it if it is a symbolic link
  (:func:`classify`);
* what is the absolute identity of a path, without resolving the path's own
  final component (:func:`absolute_no_follow`);
* what should a symbolic link store so that it points at a file
  (:func:`compute_symlink_target`).

Symlink state of the *final* component is never followed here.  A convenience
check such as :meth:`pathlib.Path.is_dir` follows links, which is exactly how
a recursive delete ends up inside the target of a link instead of removing
the link itself.
"""

from __future__ import annotations

import enum
import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

__all__ = [
    "EntryKind",
    "Entry",
    "classify",
    "absolute_no_follow",
    "compute_symlink_target",
]

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class EntryKind(enum.Enum):
    REGULAR_FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    MISSING = "missing"
    INACCESSIBLE = "inaccessible"


@dataclass(frozen=True)
class Entry:
    """What :func:`classify` found at ``path``.

    ``reason`` is only set for :attr:`EntryKind.INACCESSIBLE` and holds the
    operating system's explanation.
    """

    path: Path
    kind: EntryKind
    reason: Optional[str] = None

    @property
    def exists(self) -> bool:
        """True for anything that occupies the path, dangling links included."""
        return self.kind not in (EntryKind.MISSING, EntryKind.INACCESSIBLE)

    @property
    def is_real_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_symlink(self) -> bool:
        return self.kind is EntryKind.SYMLINK


def classify(path: PathLike) -> Entry:
    """Classify ``path`` using a non-following stat.

    A symbolic link is reported as :attr:`EntryKind.SYMLINK` whatever it
    points to, including nothing at all.  Anything that is neither a link nor
    a directory (FIFOs and device nodes included) counts as a regular file.
    Errors other than "not found" are reported as
    :attr:`EntryKind.INACCESSIBLE` rather than raised.
    """
    path = Path(path)
    try:
        st = os.lstat(path)
    except FileNotFoundError:
        return Entry(path, EntryKind.MISSING)
    except NotADirectoryError:
        # A parent component is a file: nothing can exist below it.
        return Entry(path, EntryKind.MISSING)
    except OSError as exc:
        return Entry(path, EntryKind.INACCESSIBLE, exc.strerror or str(exc))
    if stat.S_ISLNK(st.st_mode):
        return Entry(path, EntryKind.SYMLINK)
    if stat.S_ISDIR(st.st_mode):
        return Entry(path, EntryKind.DIRECTORY)
    return Entry(path, EntryKind.REGULAR_FILE)


def _lexical_absolute(path: Path) -> Path:
    return path if path.is_absolute() else Path.cwd() / path


def _resolve_existing(path: Path) -> Path:
    """Canonicalize the longest existing prefix of ``path`` and re-append the rest."""
    missing = []
    current = _lexical_absolute(path)
    while True:
        try:
            base = current.resolve(strict=True)
        except (OSError, RuntimeError):
            if current.parent == current:
                return Path(os.path.abspath(path))
            missing.append(current.name)
            current = current.parent
            continue
        if not missing:
            return base
        return Path(os.path.normpath(base.joinpath(*reversed(missing))))


def absolute_no_follow(path: PathLike) -> Path:
    """Return the absolute identity of ``path`` without resolving its leaf.

    The parent directory is canonicalized and the final component is
    re-appended unchanged, so a link is compared as the link and not as
    whatever it points to.  A leaf of ``.`` or ``..`` names a directory
    rather than an entry in one, so such paths are resolved whole.  When the
    parent does not exist yet, its nearest existing ancestor is canonicalized
    and the missing components are appended to it.

    Examples
    --------
    With ``/tmp/data`` a real directory and ``/tmp/link -> /tmp/data``::

        absolute_no_follow("/tmp/link")            # -> /tmp/link
        absolute_no_follow("/tmp/link/file")       # -> /tmp/data/file
        absolute_no_follow("/tmp/link/new/file")   # -> /tmp/data/new/file
    """
    path = Path(path)
    name = path.name
    if name in ("", ".", ".."):
        return _resolve_existing(path)
    return _resolve_existing(path.parent) / name


def compute_symlink_target(link_location: PathLike, target_file: PathLike, absolute: bool = False) -> Path:
    """Compute the value a symlink at ``link_location`` must store to reach ``target_file``.

    Parameters
    ----------
    link_location: path-like
        Where the symbolic link will be created.
    target_file: path-like
        The file or directory the link should point to.
    absolute: bool
        When true the result is ``target_file`` made absolute by joining it
        with the current working directory.  No component of it is resolved:
        ``target_file`` may itself be a link that is about to be replaced, and
        resolving it would point the new link at the old link's target.
        When false (the default) the result is relative to the directory that
        contains ``link_location``.  Both parent directories are
        canonicalized first, since the kernel resolves ``..`` in a stored
        target from the real directory the link sits in.  Neither leaf is
        followed.

    Returns
    -------
    Path
        The link's target value.  If no relative path can be computed (for
        instance the two paths are on different Windows drives)
        ``target_file`` is returned unchanged.

    Examples
    --------
    ::

        compute_symlink_target("/a/b/link", "/a/b/file")       # -> file
        compute_symlink_target("/a/b/link", "/a/c/file")       # -> ../c/file
        compute_symlink_target("/a/b/link", "/x/y/file", True) # -> /x/y/file
    """
    target_file = Path(target_file)
    if absolute:
        return _lexical_absolute(target_file)
    link_dir = absolute_no_follow(link_location).parent
    try:
        relative = os.path.relpath(absolute_no_follow(target_file), link_dir)
    except ValueError as exc:
        logger.debug("No relative path from %s to %s (%s); using it as given", link_dir, target_file, exc)
        return target_file
    return Path(relative)
