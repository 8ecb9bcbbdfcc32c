"""Send SMS tool: text the guardian behind a phone/WhatsApp identity."""
import logging
import re

from school_assistant.errors import InvalidPhoneFormat, MissingFields, NotPhoneCapable
from school_assistant.identity import resolve_identity

logger = logging.getLogger(__name__)

_E164 = re.compile(r"\+[0-9]{10,15}")


def to_e164(value):
    """Prefix a "+" if needed and check the result looks like E.164."""
    number = value if value.startswith("+") else f"+{value}"
    if not _E164.fullmatch(number):
        raise InvalidPhoneFormat()
    return number


def send_sms(client, from_number, identity_header, message=None):
    identity = resolve_identity(identity_header)
    if not identity.is_phone:
        raise NotPhoneCapable()
    if not message:
        raise MissingFields("Missing required field: message.")

    to = to_e164(identity.value)
    logger.info("Sending SMS to: %s", to)
    sid = client.send_message(to=to, from_=from_number, body=str(message))
    logger.info("SMS sent successfully. SID: %s", sid)
    return {"status": 200, "message": "SMS sent successfully", "sid": sid}
