import sys
from pathlib import Path
from typing import List

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from gamecenter.exceptions import HostBindingError  # noqa: E402
from gamecenter.input import HostMappingSink, MappingRegistry, StaticCapabilityProbe  # noqa: E402


class RecordingSink(HostMappingSink):
    """Host double that records every call and can be told to fail."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.fail_on: set = set()
        self.raise_with = None

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail_on:
            if self.raise_with is not None:
                raise self.raise_with
            raise HostBindingError(op, "rejected by test host")

    def register_catalog(self, catalog) -> None:
        self.calls.append(("register_catalog", catalog))
        self._maybe_fail("register_catalog")

    def set_active_context(self, context) -> None:
        self.calls.append(("set_active_context", context))
        self._maybe_fail("set_active_context")

    def release(self) -> None:
        self.calls.append(("release", None))
        self._maybe_fail("release")

    def ops(self) -> List[str]:
        return [c[0] for c in self.calls]


@pytest.fixture(scope="session")
def registry() -> MappingRegistry:
    return MappingRegistry.default()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def supported() -> StaticCapabilityProbe:
    return StaticCapabilityProbe(True)


@pytest.fixture
def unsupported() -> StaticCapabilityProbe:
    return StaticCapabilityProbe(False)
