import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'refit' and tests/ importable for 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from refit.core.stdlib_logging import reset_stdlib_logging


@pytest.fixture(autouse=True)
def _clean_refit_env(monkeypatch: pytest.MonkeyPatch):
    """Drop REFIT_* overrides leaking in from the outer environment."""
    for key in list(os.environ):
        if key.startswith("REFIT_"):
            monkeypatch.delenv(key, raising=False)
    yield
    reset_stdlib_logging()


@pytest.fixture
def isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A throwaway project root holding ``.refit/`` and an empty ``templates/html``.

    The working directory is moved there so root auto-detection picks it up.
    """
    (tmp_path / ".refit").mkdir()
    (tmp_path / "templates" / "html").mkdir(parents=True)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def templates(isolated_project: Path) -> Path:
    """The default ``paths.root`` directory of :func:`isolated_project`."""
    return isolated_project / "templates" / "html"


@pytest.fixture
def joomla():
    from refit.core.rewrite import load_rule_set

    return load_rule_set("joomla")
