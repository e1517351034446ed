from .pagination import Page, paginate
from .security import TokenClaims, verify_password, get_password_hash, create_access_token, create_user_token, decode_access_token

__all__ = [
    "Page",
    "paginate",
    "TokenClaims",
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "create_user_token",
    "decode_access_token",
]
