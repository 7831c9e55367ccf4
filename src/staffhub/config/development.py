import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "uri": os.getenv("MONGO_URI", "mongodb://localhost:27017/?replicaSet=rs0"),
    "database": os.getenv("MONGO_DB", "staffhub"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will create collection indexes on startup (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

ROSTER_DEFAULT_LIMIT = int(os.getenv("ROSTER_DEFAULT_LIMIT", "10"))
ROSTER_MAX_LIMIT = int(os.getenv("ROSTER_MAX_LIMIT", "100"))

PIN_RESET_TTL_MINUTES = int(os.getenv("PIN_RESET_TTL_MINUTES", "30"))
