# Standard library imports
from collections.abc import Iterator
from contextlib import contextmanager

# Third-party imports
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError

# Local application imports
from civiclink.core.exceptions import Conflict, UpstreamUnavailable
from civiclink.core.monitoring.logging import get_contextual_logger

logger = get_contextual_logger(__name__)


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """
    Map driver-level failures to the domain taxonomy.

    Uniqueness violations become ``Conflict``; lost or refused connections
    become ``UpstreamUnavailable``. Anything else propagates untouched.
    """
    try:
        yield
    except IntegrityError as e:
        raise Conflict(f"Conflicting write during {operation}") from e
    except (OperationalError, InterfaceError) as e:
        logger.error(f"Store unavailable during {operation}: {e}")
        raise UpstreamUnavailable("The data store is unavailable, please retry") from e
    except DBAPIError as e:
        if e.connection_invalidated:
            logger.error(f"Store connection lost during {operation}: {e}")
            raise UpstreamUnavailable("The data store is unavailable, please retry") from e
        raise
    except (ConnectionError, TimeoutError) as e:
        logger.error(f"Store unreachable during {operation}: {e}")
        raise UpstreamUnavailable("The data store is unavailable, please retry") from e
