"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

REQUIRED_TABLES = ("departments", "team_members", "leave_requests")

DEFAULT_PROBE_TIMEOUT_SECONDS = 10
DEFAULT_UPCOMING_LIMIT = 5

# Lower-cased fragments of driver messages that mean "no such table".
MISSING_RELATION_PATTERNS = ("relation", "does not exist", "doesn't exist", "table", "not found")

NOT_PROVISIONED_MESSAGE = (
    "Database tables not found. Please run the SQL setup scripts (database/schema.sql) "
    "against your database."
)
DEMO_MODE_MESSAGE = (
    "You're currently using local storage. Configure LEAVE_DB_URL and LEAVE_DB_KEY "
    "to enable the shared database."
)
