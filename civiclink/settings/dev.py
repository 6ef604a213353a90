# Local application imports
from civiclink.settings.common import CommonSettings


class DevSettings(CommonSettings):
    DEBUG_MODE: bool = True
