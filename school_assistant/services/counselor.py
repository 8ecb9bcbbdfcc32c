"""
Counselor Conference Service
============================
Books a guidance counselor conference. The student is recorded by name as
free text; it is not checked against the students table, and no guardian
identity is required.
"""
import logging
from datetime import datetime, timezone

from school_assistant.errors import MissingFields, StoreOperationFailed
from school_assistant.services.record_store import COUNSELOR_APPOINTMENTS

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("student_name", "preferred_date", "preferred_time", "reason")

SCHEDULED = "scheduled"


def _timestamp():
    # Same shape as JavaScript's toISOString(): 2024-03-15T10:00:00.000Z
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def missing_fields(values):
    return [name for name in REQUIRED_FIELDS if not values.get(name)]


def check_required(values):
    missing = missing_fields(values)
    if missing:
        logger.warning("Missing required fields: %s", missing)
        raise MissingFields(f"Missing required fields: {', '.join(missing)}")


def schedule_conference(store, student_name=None, preferred_date=None,
                        preferred_time=None, reason=None):
    """Schedule Counselor Conference tool."""
    check_required({
        "student_name": student_name,
        "preferred_date": preferred_date,
        "preferred_time": preferred_time,
        "reason": reason,
    })

    appointment = {
        "student_name": student_name,
        "date": preferred_date,
        "time_slot": preferred_time,
        "reason": reason,
        "status": SCHEDULED,
        "created_at": _timestamp(),
    }
    created = store.create(COUNSELOR_APPOINTMENTS, appointment)
    if created is None:
        logger.error("Appointment create returned no record")
        raise StoreOperationFailed("Failed to create appointment record")

    logger.info("Appointment %s created", created.id)
    return {
        "status": 200,
        "message": "Conference successfully scheduled",
        "appointment": {"id": created.id, **appointment},
    }
