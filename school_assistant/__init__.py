"""
School Assistant Tools
======================
Webhook tools that let a conversational assistant authenticate guardians,
look up their students, report absences, share field trip details, book
counselor conferences, send SMS, and hand a conversation to a human agent.
"""

__version__ = "1.0.0"
