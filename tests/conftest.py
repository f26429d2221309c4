from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path
from typing import Iterator, List

import pytest
from loguru import logger

BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

for path in (BASE_DIR, SRC_DIR):
    if str(path) not in sys.path:
        sys.path.append(str(path))

_CORVID_ENV = ("CORVID_SCOPING", "CORVID_DEBUG", "CORVID_DEBUG_PY_TRACE")


@pytest.fixture(autouse=True)
def _clean_corvid_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test under the default scoping policy with debug switches off."""
    for name in _CORVID_ENV:
        monkeypatch.delenv(name, raising=False)

    yield

    # main() points loguru at the per-test captured stderr
    logger.remove()


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Scenario ids must stay unique across parametrized tables."""
    del session, config

    counts = Counter(item.nodeid for item in items)
    duplicates = sorted(nodeid for nodeid, seen in counts.items() if seen > 1)
    if not duplicates:
        return

    lines = "\n".join(f"- {nodeid}" for nodeid in duplicates)
    raise pytest.UsageError(f"Duplicate pytest nodeids detected during collection:\n{lines}")
