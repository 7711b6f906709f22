import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

REST_CONFIG = {
    "url": os.getenv("REST_URL", "http://localhost:54321/rest/v1"),
    "api_key": os.getenv("REST_API_KEY", ""),
    "timeout": float(os.getenv("REST_TIMEOUT", "20")),
}

# Shared secret for the cron trigger of /api/auto-attendance
AUTO_ATTENDANCE_TOKEN = os.getenv("AUTO_ATTENDANCE_TOKEN", "")
AUTO_FILL_COMMENT = os.getenv("AUTO_FILL_COMMENT", "El profesor no registró la asistencia")

# Class windows are local wall-clock times of the academy
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "America/Guayaquil")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True
