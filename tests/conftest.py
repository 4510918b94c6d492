from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, List

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from monkey_ref.utils import DEBUG_PY_TRACE_ENV


@pytest.fixture(autouse=True)
def _no_debug_trace(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests start with Python tracebacks off regardless of the caller's shell."""
    monkeypatch.delenv(DEBUG_PY_TRACE_ENV, raising=False)


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Fail fast if two scenario tables reuse the same id."""
    del session
    del config

    seen: Dict[str, int] = {}
    duplicates: List[str] = []
    for item in items:
        if item.nodeid in seen:
            duplicates.append(item.nodeid)
            continue
        seen[item.nodeid] = 1

    if not duplicates:
        return

    lines = "\n".join(f"- {nodeid}" for nodeid in sorted(set(duplicates)))
    raise pytest.UsageError(f"Duplicate pytest nodeids detected during collection:\n{lines}")
