"""StyleMorph - virtual try-on studio session core."""

from .config import BatchPolicy, StudioConfig, load_config
from .errors import BusyError, NotFoundError, ServiceError, StudioError, ValidationError
from .studio import TryOnStudio

__all__ = [
    "BatchPolicy",
    "BusyError",
    "NotFoundError",
    "ServiceError",
    "StudioConfig",
    "StudioError",
    "TryOnStudio",
    "ValidationError",
    "load_config",
]

__version__ = "0.1.0"
