# Local application imports
from civiclink.api.internal.main import router

__all__ = ["router"]
