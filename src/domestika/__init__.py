from .async_api import AsyncDomestika
from .config import Config

__all__ = ["AsyncDomestika", "Config"]
__version__ = "0.1.0"
