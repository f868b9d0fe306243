# Public API exports from canonical locations

from auth.credentials import build_services, get_token_path, load_credentials
from auth.scopes import get_required_scopes

__all__ = [
    "build_services",
    "get_required_scopes",
    "get_token_path",
    "load_credentials",
]
