"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Members at or above this attendance percentage are eligible (inclusive).
ELIGIBILITY_THRESHOLD = 75

DEFAULT_SESSION_DAYS = 7
AUDIT_LOG_LIMIT = 100

UNKNOWN_NAME = "Unknown Name"
IDENTIFIER_HEADER_TOKEN = "qid"
NAME_HEADER_TOKEN = "name"

DEFAULT_BRANCH = "NA"
DEFAULT_HOUSING = "Day Scholar"
DEFAULT_TEAM_CATEGORY = "Core Member"
UID_PREFIX = "P"

DASHBOARD_HISTORY_LIMIT = 10
PULSE_EVENT_COUNT = 5
PULSE_TITLE_LENGTH = 12

EXPORT_COLUMNS = ("S.No", "Name", "QID", "Course", "Branch", "Phone", "Housing", "Attendance")

# Open attendance uploads expire after this long without being committed.
RECONCILIATION_TTL_MINUTES = 120
# Flask session key holding the operator's open upload token.
RECONCILIATION_SESSION_KEY = "reconciliation_token"
