"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import os
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local covhtml package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of covhtml modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("covhtml"):
        del sys.modules[module_name]


SAMPLE_PROFILE = (
    "mode: count\n"
    "example.com/org/repo/pkg/file.go:2.1,4.2 1 0\n"
    "example.com/org/repo/pkg/file.go:5.1,5.10 1 3\n"
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Isolate tests from COVHTML__* env vars and the user's global config."""
    for key in list(os.environ):
        if key.startswith("COVHTML__"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(
        "covhtml.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global-config.yaml"
    )
    yield


@pytest.fixture
def go_repo(tmp_path: Path) -> Path:
    """A working directory holding pkg/file.go (6 lines) and coverage.txt."""
    work_dir = tmp_path / "work"
    (work_dir / "pkg").mkdir(parents=True)
    (work_dir / "pkg" / "file.go").write_text(
        "package pkg\n"
        "\n"
        "func Add(a, b int) int {\n"
        "\treturn a + b\n"
        "}\n"
        "// end\n"
    )
    (work_dir / "coverage.txt").write_text(SAMPLE_PROFILE)
    return work_dir
