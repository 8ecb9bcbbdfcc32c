"""
Record Store Gateway
====================
Airtable-backed table store: filtered reads and single-row creates.

Tables used by the tools: guardians, students, absences, field_trips,
counselor_appointments.
"""
import logging
from dataclasses import dataclass, field
from urllib.parse import quote

import requests

from school_assistant.config import get_config
from school_assistant.errors import StoreOperationFailed
from school_assistant.services.filters import Filter

logger = logging.getLogger(__name__)

GUARDIANS = "guardians"
STUDENTS = "students"
ABSENCES = "absences"
FIELD_TRIPS = "field_trips"
COUNSELOR_APPOINTMENTS = "counselor_appointments"


@dataclass
class Record:
    id: str
    fields: dict = field(default_factory=dict)
    created_time: str = None

    @classmethod
    def from_api(cls, data):
        return cls(
            id=data.get("id", ""),
            fields=data.get("fields") or {},
            created_time=data.get("createdTime"),
        )


class AirtableStore:
    """Thin client for the Airtable REST API."""

    def __init__(self, api_key, base_id, api_url="https://api.airtable.com/v0", session=None):
        self.base_url = f"{api_url.rstrip('/')}/{base_id}"
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {api_key}"})

    def _table_url(self, table):
        return f"{self.base_url}/{quote(table, safe='')}"

    def find(self, table, filter=None, max_records=None, sort=None, fields=None):
        """Return every row of ``table`` matching ``filter``.

        Args:
            filter: A Filter, or None for all rows.
            max_records: Upper bound on rows returned.
            sort: List of (field, "asc"|"desc") pairs.
            fields: Field names to project; None returns all fields.

        Returns:
            List of Record; empty when nothing matches.
        """
        params = {}
        if filter is not None:
            if not isinstance(filter, Filter):
                raise TypeError("filter must be a Filter instance")
            params["filterByFormula"] = filter.render()
        if max_records:
            params["maxRecords"] = int(max_records)
        for i, (sort_field, direction) in enumerate(sort or []):
            params[f"sort[{i}][field]"] = sort_field
            params[f"sort[{i}][direction]"] = direction
        if fields:
            params["fields[]"] = list(fields)

        logger.debug("find %s where %s", table, params.get("filterByFormula", "<all>"))
        records = []
        url = self._table_url(table)
        while True:
            data = self._request("GET", url, table, params=params)
            records.extend(Record.from_api(r) for r in data.get("records", []))
            offset = data.get("offset")
            if not offset or (max_records and len(records) >= max_records):
                break
            params = dict(params, offset=offset)
        if max_records:
            records = records[:max_records]
        return records

    def create(self, table, fields):
        """Create one row. Returns the created Record, or None if the API returned none."""
        data = self._request(
            "POST", self._table_url(table), table,
            json={"records": [{"fields": fields}]},
        )
        created = data.get("records") or []
        if not created:
            return None
        return Record.from_api(created[0])

    def _request(self, method, url, table, **kwargs):
        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error("Airtable %s %s failed: %s", method, table, e)
            raise StoreOperationFailed()
        if resp.status_code != 200:
            logger.error("Airtable %s %s returned %s: %s", method, table, resp.status_code, resp.text)
            raise StoreOperationFailed()
        return resp.json()


# Process-wide store, built lazily from config and rebuilt when the
# configured credentials change
_store = None
_store_credentials = None


def get_record_store():
    """Get or create the record store client.

    Raises ConfigurationError when the Airtable key or base id is missing.
    """
    global _store, _store_credentials
    config = get_config().require("airtable_api_key", "airtable_base_id")
    credentials = (config.airtable_api_key, config.airtable_base_id, config.airtable_api_url)
    if _store is None or credentials != _store_credentials:
        if _store is not None:
            logger.info("Airtable configuration changed, rebuilding client")
        _store = AirtableStore(
            config.airtable_api_key,
            config.airtable_base_id,
            api_url=config.airtable_api_url,
        )
        _store_credentials = credentials
    return _store
