import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "uri": os.getenv("MONGO_URI", "mongodb://localhost:27017/?replicaSet=rs0"),
    "database": os.getenv("MONGO_DB", "staffhub"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

ROSTER_DEFAULT_LIMIT = int(os.getenv("ROSTER_DEFAULT_LIMIT", "10"))
ROSTER_MAX_LIMIT = int(os.getenv("ROSTER_MAX_LIMIT", "100"))

PIN_RESET_TTL_MINUTES = int(os.getenv("PIN_RESET_TTL_MINUTES", "30"))
