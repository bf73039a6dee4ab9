import errno
import os
from pathlib import Path

import pytest

from mvln import mover


@pytest.fixture(autouse=True)
def english_messages(monkeypatch):
    monkeypatch.setenv("MVLN_LANG", "en-US")


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def cross_device(monkeypatch):
    """Make every rename fail as if source and destination were on different filesystems."""
    calls = []

    def fake_rename(src, dst, *args, **kwargs):
        calls.append((Path(src), Path(dst)))
        raise OSError(errno.EXDEV, os.strerror(errno.EXDEV), str(src))

    monkeypatch.setattr(mover.os, "rename", fake_rename)
    return calls
