import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "qr_attendance"),
}

STORAGE = os.getenv("STORAGE", "mysql")

WORK_START = os.getenv("WORK_START", "08:00")
LATE_TOLERANCE_MINUTES = int(os.getenv("LATE_TOLERANCE_MINUTES", "15"))
CODE_VALIDITY_HOURS = int(os.getenv("CODE_VALIDITY_HOURS", "24"))
USE_COMPANY_SETTINGS = bool(int(os.getenv("USE_COMPANY_SETTINGS", "1")))

QR_CODE_PREFIX = os.getenv("QR_CODE_PREFIX", "ATTEND")
SCAN_RETRY_ATTEMPTS = int(os.getenv("SCAN_RETRY_ATTEMPTS", "3"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
