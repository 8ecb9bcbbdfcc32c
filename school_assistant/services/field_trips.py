"""
Field Trip Services
===================
Field Trip Info tool: a single trip by id, or every trip whose grade range
("3-5") covers at least one of the guardian's students.
"""
import logging

from school_assistant.errors import NoTripsFound, TripNotFound
from school_assistant.identity import resolve_identity
from school_assistant.services.filters import Eq, Or, RangeContains
from school_assistant.services.guardians import find_guardian, find_students
from school_assistant.services.record_store import FIELD_TRIPS

logger = logging.getLogger(__name__)


def student_grades(students):
    """Distinct numeric grades across students, in first-seen order.

    Non-numeric grades (e.g. "K") cannot be tested against a numeric range
    and are skipped.
    """
    grades = []
    for student in students:
        raw = student.fields.get("grade")
        try:
            grade = int(str(raw).strip())
        except (TypeError, ValueError):
            logger.warning("Skipping non-numeric grade %r for student %s", raw, student.id)
            continue
        if grade not in grades:
            grades.append(grade)
    return grades


def lookup_field_trips(store, identity_header, trip_id=None):
    identity = resolve_identity(identity_header)

    if trip_id:
        records = store.find(FIELD_TRIPS, Eq("trip_id", trip_id), max_records=1)
        if not records:
            raise TripNotFound()
        return {"status": 200, "field_trips": [r.fields for r in records]}

    guardian = find_guardian(store, identity)
    students = find_students(store, guardian)
    grades = student_grades(students)
    if not grades:
        raise NoTripsFound()

    logger.info("Looking up field trips for grades: %s", ", ".join(str(g) for g in grades))
    match = Or(*(RangeContains("grade_levels", g) for g in grades))
    records = store.find(FIELD_TRIPS, match)
    if not records:
        raise NoTripsFound()

    logger.info("Found %d field trips", len(records))
    return {"status": 200, "field_trips": [r.fields for r in records]}
