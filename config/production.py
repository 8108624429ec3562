import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

REMOTE_DB_URL = os.getenv("LEAVE_DB_URL")
REMOTE_DB_KEY = os.getenv("LEAVE_DB_KEY")

LOCAL_STORAGE_DIR = os.getenv("LOCAL_STORAGE_DIR", "instance/local_storage")

PROBE_TIMEOUT_SECONDS = float(os.getenv("PROBE_TIMEOUT_SECONDS", "10"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
