"""chatmock — local stand-in for a chat platform backend.

Impersonates the Helix REST API, the EventSub notification socket and a
browser chat page at the same time, so a chat bot can be developed and
tested without a real account or network access.
"""

__version__ = "0.1.0"
