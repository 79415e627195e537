import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance_test"),
}

STORAGE = "memory"

WORK_START = "08:00"
LATE_TOLERANCE_MINUTES = 15
CODE_VALIDITY_HOURS = 24
USE_COMPANY_SETTINGS = False

QR_CODE_PREFIX = "TEST"
SCAN_RETRY_ATTEMPTS = 3

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False
