import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "summit_db"),
}

# Payload prefix of attendee check-in QR codes: "<QR_TOKEN>:<mobile>"
QR_TOKEN = os.getenv("QR_TOKEN", "SUMMIT_CHECKIN")

# Back-office login created by the seed step
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@summit.local")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

AUTO_CHECKIN_DELAY_SECONDS = float(os.getenv("AUTO_CHECKIN_DELAY_SECONDS", "2"))
REFRESH_INTERVAL_SECONDS = int(os.getenv("REFRESH_INTERVAL_SECONDS", "30"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = os.getenv("LOG_FILE") or None

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
