"""Typed view over an inbound tool call.

The conversational runtime is inconsistent about where it puts values: some
arrive as headers, some as top-level parameters (query string or form), some
inside a JSON body. Lookups go header first, then top-level parameter, then
body field.
"""
from dataclasses import dataclass, field


@dataclass
class ToolRequest:
    headers: dict = field(default_factory=dict)
    params: dict = field(default_factory=dict)
    body: dict = field(default_factory=dict)

    @classmethod
    def from_flask(cls, request):
        """Build from a Flask/Werkzeug request."""
        headers = {k.lower(): v for k, v in request.headers.items()}
        params = request.values.to_dict()
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            body = {}
        return cls(headers=headers, params=params, body=body)

    def get(self, header=None, *fields):
        """Return the first non-empty value for a tool argument.

        Args:
            header: Header name (case-insensitive), or None if the argument
                    never travels as a header.
            *fields: Parameter/body field names, checked in order.
        """
        if header:
            value = self.headers.get(header.lower())
            if _present(value):
                return value
        names = fields or ((header,) if header else ())
        for name in names:
            value = self.params.get(name)
            if _present(value):
                return value
        for name in names:
            value = self.body.get(name)
            if _present(value):
                return value
        return None

    @property
    def identity(self):
        return self.get("x-identity")


def _present(value):
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    return True
