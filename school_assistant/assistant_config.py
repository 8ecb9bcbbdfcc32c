"""
Assistant Configuration
=======================
Tool and knowledge descriptors to register with the conversational
assistant. Tool URLs point back at this service's /tools routes.
"""

TOOL_DEFINITIONS = [
    {
        "key": "guardianAuthentication",
        "name": "Guardian Authentication",
        "description": "Use this tool to authenticate a guardian using their contact information (email or phone) and PIN.",
        "method": "GET",
        "slug": "guardian-authentication",
        "schema": {"pin": "string"},
    },
    {
        "key": "studentLookup",
        "name": "Student Lookup",
        "description": "Use this tool to look up all students associated with a guardian using their contact information.",
        "method": "GET",
        "slug": "student-lookup",
    },
    {
        "key": "absenceLookup",
        "name": "Absence Lookup",
        "description": "Use this tool to look up absence records for students associated with a guardian. You can optionally specify a date range.",
        "method": "GET",
        "slug": "absence-lookup",
        "schema": {"start_date": "string", "end_date": "string"},
    },
    {
        "key": "reportAbsence",
        "name": "Report Absence",
        "description": "Use this tool to report a student absence. The guardian must be authenticated first.",
        "method": "POST",
        "slug": "report-absence",
        "schema": {"student_name": "string", "date": "string", "reason": "string"},
    },
    {
        "key": "fieldTripInfo",
        "name": "Field Trip Information",
        "description": "Use this tool to look up field trip information for students associated with a guardian. Can optionally look up a specific trip using trip_id.",
        "method": "GET",
        "slug": "field-trip-info",
        "schema": {"trip_id": "string"},
    },
    {
        "key": "sendSMS",
        "name": "Send SMS",
        "description": "Use this tool to send an SMS message to a guardian's phone number. Can only be used with phone numbers, not email addresses.",
        "method": "POST",
        "slug": "send-sms",
        "schema": {"message": "string"},
    },
    {
        "key": "scheduleCounselorConference",
        "name": "Schedule Counselor Conference",
        "description": "Use this tool to schedule a conference with the school guidance counselor. The guardian must be authenticated first.",
        "method": "POST",
        "slug": "schedule-counselor-conference",
        "schema": {
            "student_name": "string",
            "preferred_date": "string",   # YYYY-MM-DD
            "preferred_time": "string",   # "morning" or "afternoon"
            "reason": "string",
        },
    },
]

KNOWLEDGE_SOURCES = {
    "schoolPolicies": {
        "name": "Attendance Policies and Guidelines",
        "type": "Web",
        "description": "Core school policies including attendance, behavior, dress code, and academic expectations.",
        "source": "https://ims.mercerislandschools.org/about-us/attendance-information",
    },
    "schoolCalendar": {
        "name": "Activities & Sports 24/25 School Year",
        "type": "Web",
        "description": "School calendar including Activities & Sports.",
        "source": "https://docs.google.com/document/d/1ECayah8gruLzyCmCikuW6lx2yLPb89oc5zkPtoaEAAI/pub",
    },
    "contactDirectory": {
        "name": "School Contact Information",
        "type": "Web",
        "description": "Contact information for school staff, departments, and emergency contacts.",
        "source": "https://ims.mercerislandschools.org/connect/contact-us",
    },
    "parentResources": {
        "name": "School Calendar",
        "type": "Web",
        "description": "Resources for upcoming events and holidays (e.g. when school is closed).",
        "source": "https://resources.finalsite.net/images/v1733785393/mercerislandschoolsorg/ay9qvjiqmcqf12sfh5vf/AcademicCalendar2024-25_Kinder8-28_v5.pdf",
    },
}


def tool_definitions(domain):
    """Tool descriptors keyed like the assistant runtime expects, with URLs on ``domain``."""
    tools = {}
    for td in TOOL_DEFINITIONS:
        tool = {
            "name": td["name"],
            "description": td["description"],
            "type": "WEBHOOK",
            "method": td["method"],
            "url": f"https://{domain}/tools/{td['slug']}",
        }
        if td.get("schema"):
            tool["schema"] = dict(td["schema"])
        tools[td["key"]] = tool
    return tools
