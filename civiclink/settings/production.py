# Local application imports
from civiclink.settings.common import CommonSettings


class ProductionSettings(CommonSettings):
    DEBUG_MODE: bool = False
    SENTRY_DSN: str | None = None
    JWT_SECRET_KEY: str
    CLASSIFY_DEPARTMENT_ON_REPORT: bool = True
