"""
Command‑line interface for the mvln package.

This module exposes a single command built with :mod:`click`::

    mvln [OPTIONS] SOURCE... DEST

Each ``SOURCE`` is moved to ``DEST`` and replaced by a symbolic link to its
new location.  When several sources are given ``DEST`` must be an existing
directory.  Quoted glob patterns (``'*.log'``) are expanded by mvln itself.

For every source that was moved the equivalent shell commands are printed
(``mv`` then ``ln -s``) so the effect of a run, or of a ``--dry-run``, can be
read back and replayed by hand.  A failing source does not stop the others;
the exit status is non‑zero if any of them failed.

Every option can also be set from the environment with an ``MVLN_`` prefix,
for example ``MVLN_ABSOLUTE=1`` or ``MVLN_FORCE=1``.  ``MVLN_LANG`` selects
the message language.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .errors import (
    BatchOperationError,
    GlobExpansionError,
    InvalidDestinationError,
    IsDirectoryError,
    MvlnError,
    RemoveError,
    SymlinkError,
)
from .globbing import GlobError, expand_globs, find_original_input
from .messages import Messages, ln_command, mv_command
from .mover import MoveOptions, move_and_link
from .paths import classify


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def fail(messages: Messages, error: MvlnError) -> click.ClickException:
    """Wrap ``error`` in a :class:`click.ClickException` carrying its localized text."""
    return click.ClickException(messages.describe_error(error))


def expand_sources(patterns: tuple[str, ...], messages: Messages) -> list[Path]:
    """Expand glob patterns among the source arguments.

    Plain paths are passed through as typed; whether they exist is checked
    later, per source, by the move engine.
    """
    try:
        return expand_globs(patterns)
    except GlobError as exc:
        raise fail(messages, GlobExpansionError(str(exc))) from exc


@click.command(context_settings={"auto_envvar_prefix": "MVLN", "help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="mvln")
@click.argument("sources", nargs=-1, required=True)
@click.argument("dest")
@click.option("-r", "--relative", is_flag=True, help="Create relative symlinks (the default).")
@click.option("-a", "--absolute", is_flag=True, help="Create absolute symlinks.")
@click.option("-w", "--whole-dir", "whole_dir", is_flag=True, help="Allow moving a directory as a whole.")
@click.option("-f", "--force", is_flag=True, help="Overwrite an existing destination.")
@click.option("-n", "--dry-run", "dry_run", is_flag=True, help="Print what would be done without doing it.")
@click.option("-v", "--verbose", is_flag=True, help="Print each step and debug logging.")
def cli(
    sources: tuple[str, ...],
    dest: str,
    relative: bool,
    absolute: bool,
    whole_dir: bool,
    force: bool,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Move files and create symlinks at original locations.

    SOURCE is moved to DEST and a symbolic link to the new location is left
    at SOURCE, so existing references keep working.  If DEST is an existing
    directory each SOURCE is moved into it under its own name.
    """
    configure_logging(verbose)
    messages = Messages()
    if relative and absolute:
        raise click.UsageError("--relative and --absolute are mutually exclusive")
    options = MoveOptions(use_absolute_links=absolute, force_overwrite=force, dry_run=dry_run)

    source_paths = expand_sources(sources, messages)
    dest_path = Path(dest)
    if len(source_paths) > 1 and not dest_path.is_dir():
        raise fail(messages, InvalidDestinationError(messages.msg("err-multiple-sources")))

    if dry_run:
        click.echo(messages.msg("op-dry-run"))

    files_moved = 0
    links_created = 0
    failures = 0
    for source in source_paths:
        try:
            if classify(source).is_real_dir and not whole_dir:
                raise IsDirectoryError(source)
            outcome = move_and_link(source, dest_path, options)
        except IsDirectoryError as exc:
            failures += 1
            click.echo(messages.describe_error(exc), err=True)
            click.echo("  " + messages.msg("err-is-directory-hint", path=exc.path), err=True)
            continue
        except SymlinkError as exc:
            # The data reached its destination; only the link is missing.
            failures += 1
            files_moved += 1
            click.echo(mv_command(find_original_input(sources, source), exc.destination))
            click.echo(messages.describe_error(exc), err=True)
            for line in messages.recovery_lines(exc):
                click.echo(line, err=True)
            continue
        except RemoveError as exc:
            failures += 1
            click.echo(messages.describe_error(exc), err=True)
            click.echo(messages.remove_warning(exc), err=True)
            continue
        except MvlnError as exc:
            failures += 1
            click.echo(messages.describe_error(exc), err=True)
            continue

        click.echo(mv_command(find_original_input(sources, source), outcome.final_destination))
        click.echo(ln_command(outcome.symlink_target, outcome.final_source))
        files_moved += 1
        if not outcome.dry_run:
            links_created += 1
        if verbose:
            click.echo(messages.moving(outcome.final_source, outcome.final_destination))
            click.echo(messages.linking(outcome.final_source, outcome.symlink_target))

    click.echo()
    if dry_run:
        click.echo(messages.msg("op-dry-run-complete", files=files_moved))
    else:
        click.echo(messages.msg("op-complete", files=files_moved, links=links_created))
    if failures:
        raise fail(messages, BatchOperationError(failures))


def main(argv: list[str] | None = None) -> None:
    """Entrypoint for console_scripts.

    Allows the CLI to be executed via ``python -m mvln`` or when installed
    through a ``console_scripts`` entry point.
    """
    cli.main(args=argv, prog_name="mvln")


if __name__ == "__main__":  # pragma: no cover
    main(sys.argv[1:])
