"""
Twilio Client
=============
Minimal Twilio REST client over ``requests``: send messages, update live
calls, create Flex interactions, and fetch Conversations users.
"""
import json
import logging
from urllib.parse import quote

import requests

from school_assistant.config import get_config
from school_assistant.errors import ProviderError

logger = logging.getLogger(__name__)

API_BASE = "https://api.twilio.com/2010-04-01"
FLEX_API_BASE = "https://flex-api.twilio.com/v1"
CONVERSATIONS_API_BASE = "https://conversations.twilio.com/v1"


class TwilioClient:
    def __init__(self, account_sid, auth_token, session=None):
        self.account_sid = account_sid
        self.session = session or requests.Session()
        self.session.auth = (account_sid, auth_token)

    def _call(self, method, url, **kwargs):
        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error("Twilio %s %s failed: %s", method, url, e)
            raise ProviderError()
        if resp.status_code >= 300:
            logger.error("Twilio %s %s returned %s: %s", method, url, resp.status_code, resp.text)
            raise ProviderError()
        return resp.json()

    def send_message(self, to, from_, body):
        """Send an SMS/WhatsApp message. Returns the message sid."""
        url = f"{API_BASE}/Accounts/{self.account_sid}/Messages.json"
        data = self._call("POST", url, data={"To": to, "From": from_, "Body": body})
        return data.get("sid")

    def update_call(self, call_sid, twiml):
        """Replace the instructions of an in-progress call."""
        url = f"{API_BASE}/Accounts/{self.account_sid}/Calls/{quote(call_sid, safe='')}.json"
        return self._call("POST", url, data={"Twiml": twiml})

    def create_interaction(self, channel, routing):
        """Create a Flex interaction (routes the conversation to an agent queue)."""
        url = f"{FLEX_API_BASE}/Interactions"
        return self._call("POST", url, data={
            "Channel": json.dumps(channel),
            "Routing": json.dumps(routing),
        })

    def fetch_conversation_user(self, identity):
        """Fetch a Conversations user (web chat participants)."""
        return self._call("GET", f"{CONVERSATIONS_API_BASE}/Users/{quote(identity, safe='')}")


# Process-wide client, built lazily from config and rebuilt when the
# account sid or auth token changes
_client = None
_client_credentials = None


def get_twilio_client():
    """Get or create the Twilio client.

    Raises ConfigurationError when the account sid or auth token is missing.
    """
    global _client, _client_credentials
    config = get_config().require("twilio_account_sid", "twilio_auth_token")
    credentials = (config.twilio_account_sid, config.twilio_auth_token)
    if _client is None or credentials != _client_credentials:
        if _client is not None:
            logger.info("Twilio credentials changed, rebuilding client")
        _client = TwilioClient(config.twilio_account_sid, config.twilio_auth_token)
        _client_credentials = credentials
    return _client
