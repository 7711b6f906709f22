import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module; anything unknown falls back to development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "academy_attendance.settings.production"

    if env in {"test", "testing"}:
        return "academy_attendance.settings.testing"

    return "academy_attendance.settings.development"
