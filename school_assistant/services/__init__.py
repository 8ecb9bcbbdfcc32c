"""
School Assistant Services
=========================

Business logic for the webhook tools. Nothing here imports Flask.

Services:
- record_store / filters: Airtable gateway and filter objects
- guardians: authentication and guardian -> student resolution
- absences, field_trips, counselor: scoped lookups and mutations
- messaging / notifications / handoff: Twilio SMS and human handoff
"""

__all__ = [
    'absences',
    'counselor',
    'field_trips',
    'filters',
    'guardians',
    'handoff',
    'messaging',
    'notifications',
    'record_store',
]
