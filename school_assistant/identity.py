"""
Identity resolution for the x-identity header.

    email:parent@example.com   -> ("email", "parent@example.com")
    phone:+15551234567         -> ("phone", "+15551234567")
    whatsapp:+15551234567      -> ("phone", "+15551234567")

Prefixes are case-sensitive and only surrounding whitespace is trimmed from
the value; no other normalization happens here.
"""
from dataclasses import dataclass

from school_assistant.errors import InvalidIdentity

MISSING_IDENTITY_MESSAGE = "Missing x-identity header. Provide email:<email> or phone:<phone>."

# Checked in order
IDENTITY_PREFIXES = (
    ("email:", "email"),
    ("phone:", "phone"),
    ("whatsapp:", "phone"),  # WhatsApp numbers are phone identities
)


@dataclass(frozen=True)
class Identity:
    field: str
    value: str

    @property
    def is_phone(self):
        return self.field == "phone"


def resolve_identity(descriptor) -> Identity:
    """Parse a raw identity descriptor into a (field, value) pair.

    Raises InvalidIdentity with the "missing" message when the descriptor is
    absent or blank, and with the "invalid format" message otherwise.
    """
    if descriptor is None or not str(descriptor).strip():
        raise InvalidIdentity(MISSING_IDENTITY_MESSAGE)

    descriptor = str(descriptor)
    for prefix, field in IDENTITY_PREFIXES:
        if descriptor.startswith(prefix):
            value = descriptor[len(prefix):].strip()
            if not value:
                break
            return Identity(field, value)

    raise InvalidIdentity()
