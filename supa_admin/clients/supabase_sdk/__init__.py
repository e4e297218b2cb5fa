from supa_admin.clients.supabase_sdk.auth_client import AuthClient
from supa_admin.clients.supabase_sdk.auth_store import AuthStore
from supa_admin.clients.supabase_sdk.config import ClientConfig, ConfigError, load_config
from supa_admin.clients.supabase_sdk.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    RemoteError,
    ServerError,
    TransportError,
)
from supa_admin.clients.supabase_sdk.http_client import HttpClient
from supa_admin.clients.supabase_sdk.models import AuthUser, OAuthRedirect, SessionData, SignUpResponse, TokenResponse
from supa_admin.clients.supabase_sdk.users_client import UsersClient

__all__ = [
    "AuthClient",
    "AuthError",
    "AuthStore",
    "AuthUser",
    "ClientConfig",
    "ConfigError",
    "ConflictError",
    "HttpClient",
    "NotFoundError",
    "OAuthRedirect",
    "PermissionDeniedError",
    "RemoteError",
    "ServerError",
    "SessionData",
    "SignUpResponse",
    "TokenResponse",
    "TransportError",
    "UsersClient",
    "load_config",
]
