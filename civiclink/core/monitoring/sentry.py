# Standard library imports
import logging

# Third-party imports
import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

# Local application imports
from civiclink.settings import settings


def setup_sentry(extra_integrations: list | None = None) -> bool:
    """
    Initialise Sentry when running in production with a DSN configured.

    Warnings become breadcrumbs and errors become events. Returns True when
    a client is active afterwards.
    """
    if settings.ENVIRONMENT != "production" or not settings.SENTRY_DSN:
        return False

    if sentry_sdk.get_client().is_active():
        return True

    sentry_logging = LoggingIntegration(
        level=logging.WARNING,
        event_level=logging.ERROR,
    )
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        integrations=[sentry_logging, *(extra_integrations or [])],
        environment=settings.ENVIRONMENT,
        traces_sample_rate=1.0,
    )
    return True


def capture_exception(exc: BaseException) -> None:
    """Report an exception to Sentry; a no-op when Sentry is not initialised."""
    sentry_sdk.capture_exception(exc)
