import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'spm_mirror' and tests/ importable as 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from spm_mirror.core.stdlib_logging import reset_logging_for_tests


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch):
    """Drop SPM_MIRROR_* variables from the developer shell and reset logging."""
    for key in list(os.environ):
        if key.startswith("SPM_MIRROR_"):
            monkeypatch.delenv(key, raising=False)
    reset_logging_for_tests()
    yield
    reset_logging_for_tests()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Empty Swift project directory."""
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def mirror_root(tmp_path: Path) -> Path:
    """Empty mirror root directory."""
    path = tmp_path / "mirrors"
    path.mkdir()
    return path
