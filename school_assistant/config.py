"""
Configuration management for the school assistant tools.

Values come from the environment (optionally a .env file loaded at app
start). They are read on every request, so rotating a key only needs an
environment change.
"""
import os

from school_assistant.errors import ConfigurationError

# Server configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
DEBUG = os.getenv("FLASK_DEBUG", "").lower() in ("1", "true", "yes")

DEFAULT_AIRTABLE_API_URL = "https://api.airtable.com/v0"

# Which provider each setting belongs to, for error messages
PROVIDER_LABELS = {
    "airtable_api_key": "Airtable",
    "airtable_base_id": "Airtable",
    "twilio_account_sid": "Twilio",
    "twilio_auth_token": "Twilio",
    "twilio_phone_number": "Twilio",
    "studio_flow_sid": "Twilio",
    "flex_workflow_sid": "Flex",
    "flex_workspace_sid": "Flex",
}


class Config:
    """Application configuration class."""

    def __init__(self, env=None):
        env = os.environ if env is None else env
        self.airtable_api_key = env.get("AIRTABLE_API_KEY", "")
        self.airtable_base_id = env.get("AIRTABLE_BASE_ID", "")
        self.airtable_api_url = env.get("AIRTABLE_API_URL", "") or DEFAULT_AIRTABLE_API_URL
        self.twilio_account_sid = env.get("TWILIO_ACCOUNT_SID", "")
        self.twilio_auth_token = env.get("TWILIO_AUTH_TOKEN", "")
        self.twilio_phone_number = env.get("TWILIO_PHONE_NUMBER", "")
        self.flex_workflow_sid = env.get("FLEX_WORKFLOW_SID", "")
        self.flex_workspace_sid = env.get("FLEX_WORKSPACE_SID", "")
        self.studio_flow_sid = env.get("STUDIO_FLOW_SID", "")
        self.log_level = env.get("LOG_LEVEL", "INFO")

    def missing(self, *names):
        return [name for name in names if not getattr(self, name, "")]

    def require(self, *names):
        """Raise ConfigurationError if any named setting is empty."""
        missing = self.missing(*names)
        if missing:
            provider = PROVIDER_LABELS.get(missing[0], "Service")
            raise ConfigurationError(
                f"{provider} configuration error. Please check environment variables."
            )
        return self

    def to_dict(self):
        # Secrets are reported as present/absent only
        return {
            "airtable_configured": not self.missing("airtable_api_key", "airtable_base_id"),
            "airtable_api_url": self.airtable_api_url,
            "twilio_configured": not self.missing(
                "twilio_account_sid", "twilio_auth_token", "twilio_phone_number"),
            "flex_configured": not self.missing("flex_workflow_sid", "flex_workspace_sid"),
            "log_level": self.log_level,
        }


def get_config():
    """Build a Config from the current environment."""
    return Config()
