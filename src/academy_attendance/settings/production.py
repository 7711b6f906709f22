import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

REST_CONFIG = {
    "url": os.getenv("REST_URL", ""),
    "api_key": os.getenv("REST_API_KEY", ""),
    "timeout": float(os.getenv("REST_TIMEOUT", "20")),
}

AUTO_ATTENDANCE_TOKEN = os.getenv("AUTO_ATTENDANCE_TOKEN", "")
AUTO_FILL_COMMENT = os.getenv("AUTO_FILL_COMMENT", "El profesor no registró la asistencia")

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "America/Guayaquil")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEBUG = False
