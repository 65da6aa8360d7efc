from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture()
def workdir(tmp_path: Path) -> Path:
    path = tmp_path / "wp-content"
    path.mkdir()
    return path
