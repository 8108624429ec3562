import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Remote database: endpoint URL + access key. Leave either unset to run on local storage.
REMOTE_DB_URL = os.getenv("LEAVE_DB_URL")
REMOTE_DB_KEY = os.getenv("LEAVE_DB_KEY")

# Where local-mode collections are kept (one JSON file per collection).
LOCAL_STORAGE_DIR = os.getenv("LOCAL_STORAGE_DIR", "instance/local_storage")

PROBE_TIMEOUT_SECONDS = float(os.getenv("PROBE_TIMEOUT_SECONDS", "10"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
