import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance"),
}

# "mysql" or "memory"
STORAGE = os.getenv("STORAGE", "mysql")

# Attendance policy
WORK_START = os.getenv("WORK_START", "08:00")
LATE_TOLERANCE_MINUTES = int(os.getenv("LATE_TOLERANCE_MINUTES", "15"))
CODE_VALIDITY_HOURS = int(os.getenv("CODE_VALIDITY_HOURS", "24"))
# Read work hours/tolerance from the company_settings table instead of the values above
USE_COMPANY_SETTINGS = bool(int(os.getenv("USE_COMPANY_SETTINGS", "0")))

QR_CODE_PREFIX = os.getenv("QR_CODE_PREFIX", "ATTEND")
SCAN_RETRY_ATTEMPTS = int(os.getenv("SCAN_RETRY_ATTEMPTS", "3"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
