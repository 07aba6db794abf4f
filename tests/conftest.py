import shutil
from pathlib import Path

import pytest

from tests.models import PersonConfig

_REPO_ROOT = Path(__file__).resolve().parents[1]
_FIXTURES = _REPO_ROOT / "tests" / "fixtures"


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path_factory, monkeypatch):
    """
    Per-test isolation:
    - chdir into a unique tmp dir
    - copy tests/fixtures into tmp as tests/ so relative lookups of
      "tests/<name>" see the sample config files and writes stay sandboxed
    """
    tmp_path = tmp_path_factory.mktemp("cwd")
    monkeypatch.chdir(tmp_path)
    shutil.copytree(_FIXTURES, tmp_path / "tests")
    print(f"[isolation] tmp cwd: {tmp_path}")
    yield tmp_path


@pytest.fixture
def daniel() -> PersonConfig:
    return PersonConfig(name="Daniel", age=32)
