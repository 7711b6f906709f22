SECRET_KEY = "test-secret-key"

REST_CONFIG = {
    "url": "http://rest.test/rest/v1",
    "api_key": "test-key",
    "timeout": 5.0,
}

AUTO_ATTENDANCE_TOKEN = "test-cron-token"
AUTO_FILL_COMMENT = "El profesor no registró la asistencia"

APP_TIMEZONE = "America/Guayaquil"

LOG_LEVEL = "DEBUG"

DEBUG = False
TESTING = True
