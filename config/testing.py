SECRET_KEY = "test-secret"

# Tests never talk to a real database; local storage is kept in memory.
REMOTE_DB_URL = None
REMOTE_DB_KEY = None
LOCAL_STORAGE_DIR = None

PROBE_TIMEOUT_SECONDS = 1.0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
