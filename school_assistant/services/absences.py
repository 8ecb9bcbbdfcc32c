"""
Absence Services
================
Absence Lookup (read) and Report Absence (create), both scoped to the
students of the guardian behind x-identity.
"""
import logging
import re

from school_assistant.errors import (
    InvalidDateFormat, InvalidStudentName, MissingFields, NoAbsencesFound,
    StoreOperationFailed, StudentNotFound,
)
from school_assistant.identity import resolve_identity
from school_assistant.services.filters import And, Eq, Gte, Lte, Or
from school_assistant.services.guardians import find_guardian, find_students, guardian_id_of
from school_assistant.services.record_store import ABSENCES, STUDENTS

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

PENDING = "pending"


def is_iso_date(value):
    """True for YYYY-MM-DD shaped strings ("2024-03-15", not "2024-3-15")."""
    return isinstance(value, str) and _ISO_DATE.fullmatch(value) is not None


def lookup_absences(store, identity_header, start_date=None, end_date=None):
    """Absence Lookup tool.

    The date range only applies when both ends are supplied; it is inclusive.
    Results are newest first.
    """
    identity = resolve_identity(identity_header)
    guardian = find_guardian(store, identity)
    students = find_students(store, guardian)

    student_ids = [s.fields.get("student_id") for s in students]
    student_ids = [sid for sid in student_ids if sid not in (None, "")]
    if not student_ids:
        raise NoAbsencesFound()

    match = Or(*(Eq("student_id", sid) for sid in student_ids))
    if start_date and end_date:
        if not (is_iso_date(start_date) and is_iso_date(end_date)):
            raise InvalidDateFormat()
        match = And(match, Gte("date", start_date), Lte("date", end_date))

    logger.info("Looking up absences for %d students", len(student_ids))
    records = store.find(ABSENCES, match, sort=[("date", "desc")])
    if not records:
        raise NoAbsencesFound()

    logger.info("Found %d absence records", len(records))
    return {
        "status": 200,
        "absences": [r.fields for r in records],
        "total": len(records),
    }


def split_student_name(student_name):
    """Split "First Last" into (first, last).

    Exactly two tokens separated by a single space; anything else raises
    InvalidStudentName.
    """
    parts = str(student_name).strip().split(" ")
    if len(parts) != 2 or not all(parts):
        raise InvalidStudentName()
    return parts[0], parts[1]


def report_absence(store, identity_header, student_name=None, date=None, reason=None):
    """Report Absence tool. Creates one pending absence row per call."""
    identity = resolve_identity(identity_header)

    if not student_name or not date or not reason:
        raise MissingFields("Missing required fields. Please provide student_name, date, and reason.")
    if not is_iso_date(date):
        raise InvalidDateFormat()

    guardian = find_guardian(store, identity)
    guardian_id = guardian_id_of(guardian)
    first_name, last_name = split_student_name(student_name)

    match = And(
        Eq("guardian_id", guardian_id),
        Eq("first_name", first_name),
        Eq("last_name", last_name),
    )
    students = store.find(STUDENTS, match, max_records=1)
    if not students:
        logger.info("No student named %s for guardian %s", student_name, guardian_id)
        raise StudentNotFound()

    logger.info("Reporting absence for student: %s", student_name)
    created = store.create(ABSENCES, {
        "student_id": students[0].fields.get("student_id"),
        "date": date,
        "reason": reason,
        "reported_by": identity.value,
        "status": PENDING,
    })
    if created is None:
        logger.error("Absence create returned no record for %s", student_name)
        raise StoreOperationFailed("Failed to create absence record.")

    return {
        "status": 200,
        "absence": created.fields,
        "message": "Absence report submitted successfully.",
    }
