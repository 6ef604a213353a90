# Standard library imports
from typing import Annotated, Any, Literal

# Third-party imports
from pydantic import AnyUrl, BeforeValidator, computed_field
from pydantic_core import MultiHostUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class CommonSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # General settings
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["dev", "staging", "production"] = "dev"
    DEBUG_MODE: bool = False
    PROJECT_NAME: str = "CivicLink"

    # Database settings
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "civiclink"
    POSTGRES_PASSWORD: str = "civiclink"
    POSTGRES_DB: str = "civiclink"
    # Full async URL override, e.g. sqlite+aiosqlite:///./civiclink.db
    DATABASE_URL: str | None = None
    DATABASE_ECHO: bool = False

    @property
    def SQLALCHEMY_ASYNC_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return str(
            MultiHostUrl.build(
                scheme="postgresql+asyncpg",  # async driver for async queries
                username=self.POSTGRES_USER,
                password=self.POSTGRES_PASSWORD,
                host=self.POSTGRES_SERVER,
                port=self.POSTGRES_PORT,
                path=self.POSTGRES_DB,
            )
        )

    # CORS settings
    BACKEND_CORS_ORIGINS: Annotated[list[AnyUrl] | str, BeforeValidator(parse_cors)] = [
        AnyUrl("http://localhost/"),
        AnyUrl("http://localhost:5173/"),
        AnyUrl("http://localhost:8000/"),
    ]

    @computed_field  # type: ignore[prop-decorator, misc]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    # Optional settings
    SENTRY_DSN: str | None = None

    # JWT settings (tokens are issued by the identity provider)
    JWT_ALGORITHM: str = "HS256"
    JWT_SECRET_KEY: str = "change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 1

    # Redis settings
    REDIS_URL: str = "redis://localhost:6379/0"

    # Realtime fan-out settings
    FANOUT_BACKEND: Literal["redis", "memory"] = "redis"
    FANOUT_CHANNEL_PREFIX: str = "civiclink"

    # Celery settings
    CELERY_BROKER_URL: str = "redis://redis:6379/2"
    CELERY_RESULT_BACKEND: str = "redis://redis:6379/3"
    CELERY_WORKER_CONCURRENCY: int = 4
    CELERY_TASK_ALWAYS_EAGER: bool = False
    CLASSIFY_DEPARTMENT_ON_REPORT: bool = True

    # AI gateway settings
    AI_GATEWAY_URL: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    AI_GATEWAY_API_KEY: str | None = None
    AI_MODEL: str = "google/gemini-2.5-flash"
    AI_REQUEST_TIMEOUT_SECONDS: float = 20.0
    DEFAULT_DEPARTMENT: str = "Public Works"
    DEPARTMENTS: list[str] = [
        "Public Works",
        "Sanitation",
        "Parks & Recreation",
        "Transportation",
        "Public Safety",
        "Environmental Services",
        "Building & Housing",
    ]

    # Engagement rules
    REPORT_ISSUE_POINTS: int = 10
    COMMENT_MIN_LENGTH: int = 1
    COMMENT_MAX_LENGTH: int = 1000
    ISSUE_TITLE_MIN_LENGTH: int = 3
    ISSUE_TITLE_MAX_LENGTH: int = 200
    ISSUE_DESCRIPTION_MIN_LENGTH: int = 10
    ISSUE_DESCRIPTION_MAX_LENGTH: int = 5000

    # Pagination configurations
    NOTIFICATIONS_PAGE_SIZE: int = 20
    LEADERBOARD_SIZE: int = 50
    ISSUES_DEFAULT_PAGE_SIZE: int = 20
    ISSUES_MAX_PAGE_SIZE: int = 100
