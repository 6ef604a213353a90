# Local application imports
from civiclink.core.monitoring.logging import get_contextual_logger, get_logger
from civiclink.core.monitoring.sentry import capture_exception, setup_sentry

__all__ = ["capture_exception", "get_contextual_logger", "get_logger", "setup_sentry"]
