# Local application imports
from civiclink.core.celery.celery import celery_app

__all__ = ["celery_app"]
