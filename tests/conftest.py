import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from saveload.persistence import SaveLoadManager  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_save_dir(tmp_path, monkeypatch):
    """Point the default save root at a temp dir and free the manager slot after each test."""
    save_dir = tmp_path / "default_saves"
    monkeypatch.setenv("SAVELOAD_SAVE_DIR", str(save_dir))
    monkeypatch.delenv("SAVELOAD_LOG_LEVEL", raising=False)
    yield save_dir
    if SaveLoadManager.is_initialized():
        SaveLoadManager.instance().close()


@pytest.fixture()
def save_root(tmp_path: Path) -> Path:
    return tmp_path / "saves"
