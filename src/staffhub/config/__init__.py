import os


def get_settings_module() -> str:
    # Settings module is chosen by APP_ENV, defaulting to development
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "staffhub.config.production"

    if env in {"test", "testing"}:
        return "staffhub.config.testing"

    return "staffhub.config.development"
