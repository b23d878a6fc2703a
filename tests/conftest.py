import sys
from pathlib import Path

import pytest

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'appframework'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from appframework.core.config.manager import ENV_PREFIX  # noqa: E402
from appframework.core.context import AppContextModel  # noqa: E402
from appframework.core.domain.models import AppDescriptor, Extension, ExtensionPoint  # noqa: E402
from appframework.core.features.toggles import StaticToggles  # noqa: E402
from appframework.core.resolution import ResolutionEngine  # noqa: E402
from appframework.core.stores import InMemoryDescriptorStore  # noqa: E402


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep APPFRAMEWORK_* variables from the outer shell out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Empty configuration home with the default layout."""
    (tmp_path / "config").mkdir()
    (tmp_path / "apps").mkdir()
    return tmp_path


@pytest.fixture
def descriptor_store() -> InMemoryDescriptorStore:
    """Two apps and free-standing extensions on the 'dashboard' point.

    Orders: app-high 10, app-low 1; ext-a 5, ext-b 20 (attached to app-high),
    ext-c 0 (free-standing, toggle 'beta'), ext-d -3 (free-standing, '!beta').
    """
    app_high = AppDescriptor(
        id="app-high",
        label="High",
        order=10,
        extension_points=[ExtensionPoint("dashboard")],
        extensions=[
            Extension(id="ext-a", app_id="app-high", extension_point_id="dashboard", order=5),
            Extension(id="ext-b", app_id="app-high", extension_point_id="dashboard", order=20),
        ],
    )
    app_low = AppDescriptor(id="app-low", label="Low", order=1, feature_toggle="lowApp")
    return InMemoryDescriptorStore(
        apps=[app_low, app_high],
        extensions=[
            Extension(id="ext-c", extension_point_id="dashboard", order=0, feature_toggle="beta"),
            Extension(id="ext-d", extension_point_id="dashboard", order=-3, feature_toggle="!beta"),
            Extension(id="ext-e", extension_point_id="header", order=7),
        ],
    )


@pytest.fixture
def engine(descriptor_store: InMemoryDescriptorStore) -> ResolutionEngine:
    return ResolutionEngine(descriptor_store, StaticToggles())


@pytest.fixture
def visit_context() -> AppContextModel:
    return AppContextModel(
        visit={"active": True, "admitted": False},
        sessionLocation={
            "uuid": "abc-123",
            "tags": [{"display": "Login Location"}, {"display": "Admission Location"}],
        },
    )
