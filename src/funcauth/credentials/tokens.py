"""Bearer token extraction from caller authentication data.

The lifecycle manager accepts any ``TokenExtractor``. The default one
understands the shapes a control plane usually hands over:

- an ``AuthenticationData`` with command data or HTTP headers
- a mapping of HTTP headers
- a raw token string
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from funcauth.credentials.exceptions import TokenExtractionError

HTTP_HEADER_NAME = "Authorization"
HTTP_HEADER_VALUE_PREFIX = "Bearer "

TokenExtractor = Callable[[Any], str | None]


@dataclass(frozen=True)
class AuthenticationData:
    """Authentication data presented by a caller.

    Attributes:
        command_data: Token sent in a binary protocol command, if any
        headers: HTTP request headers, if the call came over HTTP
    """

    command_data: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)


def _from_headers(headers: Mapping[str, str]) -> str:
    value = next(
        (v for k, v in headers.items() if k.lower() == HTTP_HEADER_NAME.lower()),
        None,
    )
    if not isinstance(value, str) or not value.startswith(HTTP_HEADER_VALUE_PREFIX):
        raise TokenExtractionError(
            "Authentication token has to be passed with an Authorization: Bearer header"
        )
    return value[len(HTTP_HEADER_VALUE_PREFIX) :]


def extract_bearer_token(source: Any) -> str | None:
    """Extract a bearer token from caller authentication data.

    Args:
        source: AuthenticationData, header mapping or raw token string

    Returns:
        The token

    Raises:
        TokenExtractionError: If the source carries no usable token
    """
    if source is None:
        raise TokenExtractionError("No authentication data presented")

    if isinstance(source, AuthenticationData):
        token = source.command_data if source.command_data else _from_headers(source.headers)
    elif isinstance(source, Mapping):
        token = _from_headers(source)
    elif isinstance(source, str):
        token = source.removeprefix(HTTP_HEADER_VALUE_PREFIX)
    else:
        raise TokenExtractionError(f"Unsupported authentication data: {type(source).__name__}")

    token = token.strip()
    if not token:
        raise TokenExtractionError("Blank token found")
    return token
