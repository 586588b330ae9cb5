from .client import RegistrarClient
from .config_types import ClientConfig
from .errors import ApiError, AuthError, NetworkError
from .polling import poll_until

__all__ = ["RegistrarClient", "ClientConfig", "ApiError", "AuthError", "NetworkError", "poll_until"]
