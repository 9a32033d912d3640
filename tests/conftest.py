"""Shared fixtures: an in-memory database per test and unsaved entity factories."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shared.core.database import Base
from shared.models import users  # noqa: F401
from maintenance_service.app.enum.maintenance_enum import CategoryType, PriorityLevel, RequestStatus
from maintenance_service.app.lifecycle.request_lifecycle import RequestLifecycle
from maintenance_service.app.lifecycle.staff_assignment_pool import StaffAssignmentPool
from maintenance_service.app.models import (  # noqa: F401
    notifications,
    request_assignment,
    request_workflow,
)
from maintenance_service.app.models.maintenance_request import MaintenanceRequest
from maintenance_service.app.models.maintenance_staff import MaintenanceStaff
from maintenance_service.app.services.request_lifecycle_service import RequestLifecycleService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


class RecordingNotifier:
    """Notifier that remembers every (contact, request_id, status) it was handed."""

    def __init__(self):
        self.calls = []

    def __call__(self, recipient_contact, request_id, new_status):
        self.calls.append((recipient_contact, request_id, RequestStatus(new_status)))

    def statuses_for(self, contact):
        return [status for c, _, status in self.calls if c == contact]


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def service(db, notifier):
    return RequestLifecycleService(db, notifier=notifier)


# ---------------- In-memory entities for the core components ----------------

class FakeDirectory:
    def __init__(self, *staff):
        self.staff = list(staff)

    def add(self, staff):
        self.staff.append(staff)
        return staff

    def find_staff(self, staff_id):
        return next((s for s in self.staff if s.staff_id == staff_id), None)

    def list_staff(self):
        return list(self.staff)


@pytest.fixture
def make_staff():
    counter = {"n": 0}

    def _make(staff_id=None, max_capacity=10, current_workload=0, is_available=True):
        counter["n"] += 1
        return MaintenanceStaff(
            id=counter["n"],
            staff_id=staff_id or f"STF{counter['n']:03d}",
            max_capacity=max_capacity,
            current_workload=current_workload,
            is_available=is_available,
        )

    return _make


@pytest.fixture
def make_request():
    def _make(status=RequestStatus.SUBMITTED, staff_id=None, category=CategoryType.PLUMBING, **kwargs):
        return MaintenanceRequest(
            tenant_id=kwargs.pop("tenant_id", "USR00000001"),
            description=kwargs.pop("description", "Kitchen sink leaking"),
            category=category,
            priority=kwargs.pop("priority", PriorityLevel.HIGH),
            status=status,
            assigned_staff_id=staff_id,
            **kwargs,
        )

    return _make


@pytest.fixture
def directory():
    return FakeDirectory()


@pytest.fixture
def pool(directory):
    return StaffAssignmentPool(directory, RequestLifecycle())
