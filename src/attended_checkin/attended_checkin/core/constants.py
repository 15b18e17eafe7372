"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ADULT_AGE = 18

FAMILY_NAME_SUFFIX = " Family"

PERSON_SEARCH_ACTIVITY = "Person Search"

CHECKIN_NOTE_TYPE = "Check-In"

RECORD_STATUS_ACTIVE = "Active"
RECORD_TYPE_PERSON = "Person"

DEFAULT_FAMILY_PAGE_SIZE = 4
DEFAULT_PERSON_PAGE_SIZE = 8
DEFAULT_VISITOR_PAGE_SIZE = 4
DEFAULT_NEW_FAMILY_PAGE_SIZE = 4
DEFAULT_SESSION_IDLE_MINUTES = 30

DEFAULT_NOT_FOUND_TEXT = "Please add them using one of the buttons on the right"
