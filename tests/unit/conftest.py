"""
Shared fixtures for the referral network tests.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

# Qt widgets and painters without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from referral_core.domain.models import ClientRecord


NOW = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_record():
    """Factory for ClientRecords created one day before NOW by default."""
    def _make(client_id, referred_by=None, ltv=0.0, name=None, created_at=None, **extra):
        return ClientRecord(
            id=client_id,
            name=name or client_id,
            referred_by=referred_by,
            ltv=ltv,
            created_at=created_at or NOW - timedelta(days=1),
            **extra,
        )
    return _make


@pytest.fixture
def chain_records(make_record):
    """A -> B -> C with LTVs 1000, 500, 0."""
    return [
        make_record("A", None, 1000),
        make_record("B", "A", 500),
        make_record("C", "B", 0),
    ]


@pytest.fixture
def sample_records(make_record):
    """Two roots, three generations."""
    return [
        make_record("r1", None, 5000, "Ana Souza", city="Recife", handle="@ana"),
        make_record("r2", None, 0, "Bruno Lima"),
        make_record("c1", "r1", 1200, "Carla Dias"),
        make_record("c2", "r1", 800, "Diego Melo"),
        make_record("c3", "r1", 0, "Elisa Rocha"),
        make_record("c4", "r2", 300, "Fabio Nunes"),
        make_record("g1", "c1", 0, "Gabi Alves"),
    ]


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for every Qt test."""
    from PyQt6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app
