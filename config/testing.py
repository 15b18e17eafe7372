import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "checkin_test_db"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

ENABLE_ADD_BUTTONS = True
NOT_FOUND_TEXT = "Please add them using one of the buttons on the right"
DEFAULT_CONNECTION_STATUS = "visitor"

FAMILY_PAGE_SIZE = 4
PERSON_PAGE_SIZE = 8
VISITOR_PAGE_SIZE = 4
NEW_FAMILY_PAGE_SIZE = 4
SESSION_IDLE_MINUTES = 30
