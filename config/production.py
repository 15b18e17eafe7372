import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "checkin_db"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

ENABLE_ADD_BUTTONS = bool(int(os.getenv("ENABLE_ADD_BUTTONS", "1")))
NOT_FOUND_TEXT = os.getenv("NOT_FOUND_TEXT", "Please add them using one of the buttons on the right")
DEFAULT_CONNECTION_STATUS = os.getenv("DEFAULT_CONNECTION_STATUS", "visitor")

FAMILY_PAGE_SIZE = int(os.getenv("FAMILY_PAGE_SIZE", "4"))
PERSON_PAGE_SIZE = int(os.getenv("PERSON_PAGE_SIZE", "8"))
VISITOR_PAGE_SIZE = int(os.getenv("VISITOR_PAGE_SIZE", "4"))
NEW_FAMILY_PAGE_SIZE = int(os.getenv("NEW_FAMILY_PAGE_SIZE", "4"))

# Kiosk sessions untouched for this long are dropped
SESSION_IDLE_MINUTES = int(os.getenv("SESSION_IDLE_MINUTES", "30"))
