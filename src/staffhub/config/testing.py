import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "uri": os.getenv("MONGO_URI", "mongodb://localhost:27017"),
    "database": os.getenv("MONGO_DB", "staffhub_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

ROSTER_DEFAULT_LIMIT = 10
ROSTER_MAX_LIMIT = 100

PIN_RESET_TTL_MINUTES = 30
