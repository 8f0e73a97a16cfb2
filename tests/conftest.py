"""
Pytest configuration and fixtures
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from rescue365.alerts.notifier import MockNotifier
from rescue365.core.geo_utils import Coordinate
from rescue365.database.connection import DatabaseConnection
from rescue365.reports.models import RescueReport
from rescue365.reports.store import MockReportStore, SQLReportStore


@pytest.fixture
def sample_rows():
    """Rows as returned by the rescue_reports table."""
    return [
        {
            "id": 1,
            "animal_type": "Dog",
            "description": "Injured leg, hiding under a car",
            "location_lat": 0.0,
            "location_lng": 0.1,
            "address": "Main St, Springfield, IL",
            "image_url": "file:///photos/dog.jpg",
            "status": "Pending",
            "created_at": "2026-10-01T12:00:00+00:00",
        },
        {
            "id": 2,
            "animal_type": "Cat",
            "description": "Stuck in a tree",
            "location_lat": 0.05,
            "location_lng": 0.05,
            "address": "Oak Ave, Springfield, IL",
            "image_url": "file:///photos/cat.jpg",
            "status": "Rescue In Progress",
            "created_at": "2026-10-01T13:00:00+00:00",
        },
        {
            "id": 3,
            "animal_type": "Bird",
            "description": "Broken wing",
            "location_lat": 0.02,
            "location_lng": 0.0,
            "address": None,
            "image_url": "file:///photos/bird.jpg",
            "status": "Rescue Complete",
            "created_at": "2026-10-01T14:00:00+00:00",
        },
        {
            "id": 4,
            "animal_type": "Horse",
            "description": "Loose on the highway",
            "location_lat": 1.0,
            "location_lng": 1.0,
            "address": "Route 9",
            "image_url": "file:///photos/horse.jpg",
            "status": "Pending",
            "created_at": "2026-10-01T15:00:00+00:00",
        },
        {
            "id": 5,
            "animal_type": "Goat",
            "description": "Tangled in fence, far away",
            "location_lat": 1.0,
            "location_lng": 1.0,
            "address": "Farm Rd",
            "image_url": "file:///photos/goat.jpg",
            "status": "Rescue In Progress",
            "created_at": "2026-10-01T16:00:00+00:00",
        },
    ]


@pytest.fixture
def sample_reports(sample_rows):
    """Sample reports around the origin."""
    return [RescueReport.from_row(row) for row in sample_rows]


@pytest.fixture
def origin():
    """Rescuer position used throughout the tests."""
    return Coordinate(latitude=0.0, longitude=0.0)


@pytest.fixture
def mock_store(sample_reports):
    """In-memory store preloaded with the sample reports."""
    return MockReportStore(sample_reports)


@pytest.fixture
def mock_notifier():
    return MockNotifier()


@pytest.fixture
def sql_store():
    """SQL store on an in-memory SQLite database."""
    db = DatabaseConnection(database_url="sqlite://")
    db.create_tables()
    yield SQLReportStore(db)
    db.drop_tables()
    db.close()
