"""
Shared test fixtures and configuration.
"""

import json
from pathlib import Path

import pytest

from devpack.adapters.mock import MockAdapter
from devpack.adapters.registry import AdapterRegistry
from devpack.core.config.stack_loader import make_loader
from devpack.core.models.runtime import RuntimeConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's DEVPACK_* settings out of the tests."""
    for var in ("DEVPACK_STACKS_DIR", "DEVPACK_LOG_LEVEL", "DEVPACK_LOG_FILE", "DEVPACK_LOG_FILE_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def stacks_dir(tmp_path: Path) -> Path:
    """Return an empty stacks directory."""
    d = tmp_path / "stacks"
    d.mkdir()
    return d


@pytest.fixture
def write_stack(stacks_dir: Path):
    """Write ``stacks/<id>.json``; returns the written path.

    Packages may be given as bare ids (``linux_cmd`` = ``install <id>``).
    """

    def _write(stack_id: str, packages=None, depends_on=None, name=None, **extra) -> Path:
        if packages is None:
            packages = [f"{stack_id}-tool"]
        records = []
        for pkg in packages:
            if isinstance(pkg, str):
                pkg = {"id": pkg, "display_name": pkg.title(), "linux_cmd": f"install {pkg}"}
            records.append(pkg)
        data = {
            "id": stack_id,
            "name": name or stack_id.title(),
            "packages": records,
            "depends_on": list(depends_on or []),
            **extra,
        }
        path = stacks_dir / f"{stack_id}.json"
        path.write_text(json.dumps(data, indent=2))
        return path

    return _write


@pytest.fixture
def config(stacks_dir: Path) -> RuntimeConfig:
    """Linux host with apt, reading stacks from the temp directory."""
    return RuntimeConfig(platform="linux", package_manager="apt", stacks_dir=stacks_dir)


@pytest.fixture
def mock_adapter() -> MockAdapter:
    return MockAdapter()


@pytest.fixture
def registry(mock_adapter: MockAdapter) -> AdapterRegistry:
    """Registry whose shell adapter is the mock."""
    reg = AdapterRegistry()
    reg.register(mock_adapter)
    return reg


@pytest.fixture
def loader(stacks_dir: Path):
    return make_loader(stacks_dir)
