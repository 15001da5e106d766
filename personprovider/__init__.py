# personprovider/__init__.py
from .state_manager import ResourceManager
from .provider import provider
from .adapters import PersonSession
from .exceptions import (
    ProviderError, SchemaError, RollbackError, PersonError, PersonDecodeError, ResourceNotFoundError
)

__version__ = "0.1.0"
__all__ = [
    "ResourceManager",
    "provider",
    "PersonSession",
    "ProviderError",
    "SchemaError",
    "RollbackError",
    "PersonError",
    "PersonDecodeError",
    "ResourceNotFoundError"
]
