import os

# Maps APP_ENV onto one of the settings modules in this package; main.create_app
# imports the result and reads DB_CONFIG, work hours and LOG_LEVEL from it.
_ALIASES = {
    "prod": "production",
    "production": "production",
    "test": "testing",
    "testing": "testing",
}


def get_settings_module() -> str:
    """Settings module chosen by APP_ENV (default: development)."""
    env = os.getenv("APP_ENV", "development").strip().lower()
    return f"config.{_ALIASES.get(env, 'development')}"
