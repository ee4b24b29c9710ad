import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "summit_test_db"),
}

QR_TOKEN = "SUMMIT_TEST"

ADMIN_EMAIL = "admin@test.local"
ADMIN_PASSWORD = "admin123"

AUTO_CHECKIN_DELAY_SECONDS = 0.01
REFRESH_INTERVAL_SECONDS = 30

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
LOG_FILE = None

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
