import os

_ENV_ALIASES = {
    "prod": "production",
    "production": "production",
    "test": "testing",
    "testing": "testing",
    "dev": "development",
    "development": "development",
}


def get_settings_module() -> str:
    """Dotted path of the settings module named by APP_ENV.

    Unknown or missing values fall back to development.
    """
    env = os.getenv("APP_ENV", "").strip().lower()
    return f"config.{_ENV_ALIASES.get(env, 'development')}"
