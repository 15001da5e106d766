# personprovider/adapters/__init__.py
from .rest_session import PersonSession, DEFAULT_API_TIMEOUT, PATCH_OPS

__all__ = [
    "PersonSession",
    "DEFAULT_API_TIMEOUT",
    "PATCH_OPS"
]
