"""Authentication module for loading pages API credentials.

This module loads the CMS base URL and API token from environment variables
using python-dotenv, and reports whether the current operator is an admin.
Missing credentials raise InvalidCredentialsError before any request is made.
"""

import os
from typing import NamedTuple

from dotenv import load_dotenv

from .errors import InvalidCredentialsError

_FALSE_VALUES = {'0', 'false', 'no', 'off'}


class Credentials(NamedTuple):
    """Pages API credentials."""
    url: str
    api_token: str


class Authenticator:
    """Loads and validates pages API credentials from environment variables.

    Credentials are read from the environment (after loading a .env file)
    on every call and are never cached or logged.

    Required environment variables:
        CMS_URL: Base URL of the site (e.g., https://rentals.example.com)
        CMS_API_TOKEN: Bearer token of an admin account

    Optional environment variables:
        CMS_IS_ADMIN: Set to "false" to open sessions without edit rights

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
        >>> print(f"Connecting to {creds.url}")
    """

    def __init__(self):
        """Initialize the authenticator by loading environment variables from .env file."""
        load_dotenv()

    def get_credentials(self) -> Credentials:
        """Get pages API credentials from environment variables.

        Returns:
            Credentials: A named tuple containing url and api_token

        Raises:
            InvalidCredentialsError: If any required credential is missing
        """
        url = os.getenv('CMS_URL', '').strip()
        api_token = os.getenv('CMS_API_TOKEN', '').strip()

        if not url or not api_token:
            raise InvalidCredentialsError(endpoint=url or "unknown")

        return Credentials(url=url.rstrip('/'), api_token=api_token)

    def is_admin(self) -> bool:
        """Whether the operator may enter edit mode.

        The token is what the server actually authorizes; this flag only
        gates the local edit affordances.
        """
        value = os.getenv('CMS_IS_ADMIN', 'true').strip().lower()
        return value not in _FALSE_VALUES
