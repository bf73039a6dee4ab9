"""
Move files and directories, leaving symbolic links at their old locations.

``mvln`` relocates a file or directory and replaces the original path with a
symlink to the new location, so scripts, configuration and anything else
that refers to the old path keeps working.  The operation is written so that
data is never lost: every check that can fail runs before the filesystem is
touched, cross-filesystem moves copy and verify before deleting, and a
failure after the move reports where the data is.

Example::

    # Move a cache directory to a bigger disk and link it back
    mvln -w ~/.cache/huge /mnt/data/

    # Preview a move with absolute links
    mvln --dry-run --absolute notes.txt archive/

The same operation is available from Python::

    from mvln import MoveOptions, move_and_link

    outcome = move_and_link("notes.txt", "archive/", MoveOptions(use_absolute_links=True))

The CLI is built on top of :mod:`click`.  See ``mvln.cli`` for details.
"""

__version__ = "0.3.0"

__all__ = [
    "move_and_link",
    "execute",
    "compute_symlink_target",
    "MoveOptions",
    "MoveRequest",
    "MoveOutcome",
    "MvlnError",
]

from .errors import MvlnError  # noqa: F401
from .mover import MoveOptions, MoveOutcome, MoveRequest, execute, move_and_link  # noqa: F401
from .paths import compute_symlink_target  # noqa: F401
