import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from mvln import __version__, mover
from mvln.cli import cli

from conftest import write


@pytest.fixture
def runner():
    return CliRunner()


def test_single_file_move_and_link(runner, tmp_path):
    src = write(tmp_path / "file.txt", "test content")
    dest_dir = tmp_path / "dest"
    dest_dir.mkdir()

    result = runner.invoke(cli, [str(src), str(dest_dir)])

    assert result.exit_code == 0, result.output
    assert src.is_symlink()
    assert (dest_dir / "file.txt").read_text() == "test content"
    assert f"mv {src} {dest_dir / 'file.txt'}" in result.output
    assert f"ln -s dest/file.txt {src}" in result.output
    assert "1 file(s) moved, 1 symlink(s) created" in result.output


def test_glob_pattern_multiple_files(runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("a.txt", "b.txt", "c.log"):
        write(tmp_path / name, name)
    (tmp_path / "dest").mkdir()

    result = runner.invoke(cli, ["*.txt", "dest"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "a.txt").is_symlink()
    assert (tmp_path / "b.txt").is_symlink()
    assert not (tmp_path / "c.log").is_symlink()
    assert not (tmp_path / "dest" / "c.log").exists()


def test_glob_without_matches_fails(runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "dest").mkdir()

    result = runner.invoke(cli, ["*.nothing", "dest"])

    assert result.exit_code == 1
    assert "Glob expansion failed" in result.output


def test_directory_requires_whole_dir(runner, tmp_path):
    src_dir = tmp_path / "src_dir"
    write(src_dir / "file.txt", "content")
    dest_dir = tmp_path / "dest"
    dest_dir.mkdir()

    result = runner.invoke(cli, [str(src_dir), str(dest_dir)])

    assert result.exit_code == 1
    assert "Source is a directory" in result.output
    assert "--whole-dir" in result.output
    assert "1 operation(s) failed" in result.output
    assert not src_dir.is_symlink()


def test_directory_move_with_whole_dir(runner, tmp_path):
    src_dir = tmp_path / "src_dir"
    write(src_dir / "file.txt", "content")
    dest_dir = tmp_path / "dest"
    dest_dir.mkdir()

    result = runner.invoke(cli, ["-w", str(src_dir), str(dest_dir)])

    assert result.exit_code == 0, result.output
    assert src_dir.is_symlink()
    assert (dest_dir / "src_dir" / "file.txt").read_text() == "content"


def test_absolute_flag(runner, tmp_path):
    src = write(tmp_path / "file.txt", "test")
    dest_dir = tmp_path / "dest"
    dest_dir.mkdir()

    result = runner.invoke(cli, ["-a", str(src), str(dest_dir)])

    assert result.exit_code == 0, result.output
    assert Path(os.readlink(src)).is_absolute()


def test_absolute_from_environment(runner, tmp_path):
    src = write(tmp_path / "file.txt", "test")
    dest_dir = tmp_path / "dest"
    dest_dir.mkdir()

    result = runner.invoke(cli, [str(src), str(dest_dir)], env={"MVLN_ABSOLUTE": "1"})

    assert result.exit_code == 0, result.output
    assert Path(os.readlink(src)).is_absolute()


def test_relative_flag(runner, tmp_path):
    src = write(tmp_path / "file.txt", "test")
    dest_dir = tmp_path / "dest"
    dest_dir.mkdir()

    result = runner.invoke(cli, ["-r", str(src), str(dest_dir)])

    assert result.exit_code == 0, result.output
    assert not Path(os.readlink(src)).is_absolute()


def test_relative_and_absolute_conflict(runner, tmp_path):
    src = write(tmp_path / "file.txt", "test")

    result = runner.invoke(cli, ["-r", "-a", str(src), str(tmp_path / "dest")])

    assert result.exit_code == 2
    assert "mutually exclusive" in result.output
    assert not src.is_symlink()


def test_verbose_output(runner, tmp_path):
    src = write(tmp_path / "file.txt", "test")
    dest_dir = tmp_path / "dest"
    dest_dir.mkdir()

    result = runner.invoke(cli, ["-v", str(src), str(dest_dir)])

    assert result.exit_code == 0, result.output
    assert f"Moving {src} -> {dest_dir / 'file.txt'}" in result.output
    assert f"Linking {src} -> dest/file.txt" in result.output


def test_dry_run(runner, tmp_path):
    src = write(tmp_path / "file.txt", "test")
    dest_dir = tmp_path / "dest"
    dest_dir.mkdir()

    result = runner.invoke(cli, ["--dry-run", str(src), str(dest_dir)])

    assert result.exit_code == 0, result.output
    assert "[DRY-RUN]" in result.output
    assert f"ln -s dest/file.txt {src}" in result.output
    assert "1 file(s) would be moved" in result.output
    assert not src.is_symlink()
    assert list(dest_dir.iterdir()) == []


def test_force_flag(runner, tmp_path):
    src = write(tmp_path / "file.txt", "new")
    existing = write(tmp_path / "dest.txt", "old")

    refused = runner.invoke(cli, [str(src), str(existing)])
    assert refused.exit_code == 1
    assert "Destination already exists" in refused.output
    assert existing.read_text() == "old"

    result = runner.invoke(cli, ["--force", str(src), str(existing)])
    assert result.exit_code == 0, result.output
    assert existing.read_text() == "new"


def test_missing_source_fails_but_others_continue(runner, tmp_path):
    good = write(tmp_path / "good.txt", "good")
    dest_dir = tmp_path / "dest"
    dest_dir.mkdir()

    result = runner.invoke(cli, [str(tmp_path / "missing.txt"), str(good), str(dest_dir)])

    assert result.exit_code == 1
    assert "Source not found" in result.output
    assert "1 operation(s) failed" in result.output
    assert good.is_symlink()
    assert (dest_dir / "good.txt").read_text() == "good"


def test_multiple_sources_need_directory(runner, tmp_path):
    one = write(tmp_path / "one.txt", "1")
    two = write(tmp_path / "two.txt", "2")

    result = runner.invoke(cli, [str(one), str(two), str(tmp_path / "not_a_dir")])

    assert result.exit_code == 1
    assert "destination must be a directory" in result.output
    assert not one.is_symlink()
    assert not two.is_symlink()


def test_destination_created_if_missing(runner, tmp_path):
    src = write(tmp_path / "file.txt", "test")
    dest = tmp_path / "nonexistent_dest"

    result = runner.invoke(cli, [str(src), str(dest)])

    assert result.exit_code == 0, result.output
    assert src.is_symlink()
    assert dest.read_text() == "test"


def test_symlink_failure_prints_recovery(runner, tmp_path, monkeypatch):
    src = write(tmp_path / "file.txt", "safe")
    dest_dir = tmp_path / "dest"
    dest_dir.mkdir()

    def no_symlinks(target, link, *args, **kwargs):
        raise PermissionError(1, "Operation not permitted", str(link))

    monkeypatch.setattr(mover.os, "symlink", no_symlinks)
    result = runner.invoke(cli, [str(src), str(dest_dir)])

    assert result.exit_code == 1
    assert f"Your data is safe at: {dest_dir / 'file.txt'}" in result.output
    assert f"mv {dest_dir / 'file.txt'} {src}" in result.output
    assert "1 file(s) moved, 0 symlink(s) created" in result.output
    assert (dest_dir / "file.txt").read_text() == "safe"


def test_no_args_shows_usage(runner):
    result = runner.invoke(cli, [])
    assert result.exit_code == 2
    assert "Usage" in result.output


def test_help(runner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Move files and create symlinks at original locations" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert f"mvln, version {__version__}" in result.output


def test_rejected_source_prints_no_mv_line(runner, tmp_path):
    src = write(tmp_path / "file.txt", "new")
    existing = write(tmp_path / "dest.txt", "old")

    result = runner.invoke(cli, [str(src), str(existing)])

    assert result.exit_code == 1
    assert "Destination already exists" in result.output
    lines = result.output.splitlines()
    assert not any(line.startswith(("mv ", "ln -s ")) for line in lines)
    assert "0 file(s) moved" in result.output
