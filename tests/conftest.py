import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'inkwell'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from inkwell.core.engine import TemplateEngine  # noqa: E402
from inkwell.core.stdlib_logging import reset_logging_for_tests  # noqa: E402
from inkwell.data import clear_caches  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_inkwell_env(monkeypatch: pytest.MonkeyPatch):
    """Keep host INKWELL_* variables and logging handlers out of tests."""
    for key in list(os.environ):
        if key.startswith("INKWELL_"):
            monkeypatch.delenv(key, raising=False)
    yield
    reset_logging_for_tests()
    clear_caches()


@pytest.fixture
def templates_root(tmp_path: Path) -> Path:
    """Empty templates directory."""
    root = tmp_path / "templates"
    root.mkdir()
    return root


@pytest.fixture
def write_template(templates_root: Path):
    """Write a template file under the templates root and return its path."""

    def _write(name: str, text: str) -> Path:
        path = templates_root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def engine(templates_root: Path) -> TemplateEngine:
    """Engine rooted at the temporary templates directory."""
    return TemplateEngine(templates_root)
