from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'directory_core.pipeline'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


@pytest.fixture
def make_company():
    from directory_core.data import CompanyRecord

    counter = {"next_id": 1}

    def _make(**kwargs):
        kwargs.setdefault("id", counter["next_id"])
        counter["next_id"] += 1
        return CompanyRecord(**kwargs)

    return _make
