"""
Guardian Services
=================
Guardian authentication and the guardian -> students resolution every
scoped lookup starts from.

Scoping rule: students are only ever fetched with
``Eq("guardian_id", <resolved guardian's id>)``, and everything downstream
(absences, field trips) is derived from those students.
"""
import logging

from school_assistant.errors import (
    GuardianNotFound, MissingSecret, NoStudentsFound, Unauthorized,
)
from school_assistant.identity import resolve_identity
from school_assistant.services.filters import And, Eq
from school_assistant.services.record_store import GUARDIANS, STUDENTS

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("guardian_id", "first_name", "last_name", "email", "phone")


def _clean_pin(raw_pin):
    """Stringify the PIN and drop one pair of surrounding double quotes.

    Nothing else is trimmed; " 1234" is compared as given.
    """
    if raw_pin is None:
        return ""
    pin = str(raw_pin)
    if len(pin) >= 2 and pin.startswith('"') and pin.endswith('"'):
        pin = pin[1:-1]
    return pin


def authenticate_guardian(store, identity_header, raw_pin):
    """Verify identity + PIN and return the guardian's profile.

    Any mismatch (unknown identity or wrong PIN) is reported the same way.
    """
    identity = resolve_identity(identity_header)
    pin = _clean_pin(raw_pin)
    if not pin:
        raise MissingSecret()

    logger.info("Authenticating guardian with %s", identity.field)
    # Stored emails sometimes carry stray whitespace
    match = And(
        Eq(identity.field, identity.value, trim=identity.field == "email"),
        Eq("pin", pin),
    )
    records = store.find(GUARDIANS, match, max_records=1)
    if not records:
        logger.info("Authentication failed for %s: %s", identity.field, identity.value)
        raise Unauthorized()

    fields = records[0].fields
    guardian = {name: fields.get(name) for name in PROFILE_FIELDS}
    logger.info("Guardian %s authenticated", guardian["guardian_id"])
    return {"status": 200, "guardian": guardian}


def find_guardian(store, identity):
    """Resolve a guardian row from a resolved Identity."""
    records = store.find(GUARDIANS, Eq(identity.field, identity.value), max_records=1)
    if not records:
        logger.info("No guardian found with %s: %s", identity.field, identity.value)
        raise GuardianNotFound()
    return records[0]


def guardian_id_of(guardian):
    """The id every student query is scoped by.

    A guardian row without an id cannot own anyone, so this raises
    NoStudentsFound rather than letting an empty id match unowned students.
    """
    guardian_id = guardian.fields.get("guardian_id")
    if guardian_id is None or str(guardian_id).strip() == "":
        logger.warning("Guardian record %s has no guardian_id", guardian.id)
        raise NoStudentsFound()
    return guardian_id


def find_students(store, guardian):
    """All students owned by ``guardian``."""
    guardian_id = guardian_id_of(guardian)
    records = store.find(STUDENTS, Eq("guardian_id", guardian_id))
    if not records:
        logger.info("No students found for guardian %s", guardian_id)
        raise NoStudentsFound()
    return records


def lookup_students(store, identity_header):
    """Student Lookup tool."""
    identity = resolve_identity(identity_header)
    guardian = find_guardian(store, identity)
    students = find_students(store, guardian)
    logger.info("Found %d students for guardian %s", len(students), guardian.fields.get("guardian_id"))
    return {"status": 200, "students": [s.fields for s in students]}
