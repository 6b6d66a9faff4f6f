"""API wrapper for the site's pages REST API.

This module wraps the `/api/pages` endpoints with a requests session and
translates HTTP failures into the typed exception hierarchy. Rate-limited
calls are retried through retry_on_rate_limit.
"""

import logging
import re
from typing import Any, Dict, List, Optional

import requests
from requests.exceptions import ConnectionError, RequestException, Timeout

from src.models.page_document import PageDocument

from .auth import Authenticator
from .errors import (
    APIAccessError,
    APIUnreachableError,
    CMSError,
    InvalidCredentialsError,
    PageNotFoundError,
)
from .retry_logic import retry_on_rate_limit

logger = logging.getLogger(__name__)

PAGES_PATH = "/api/pages"

# Page keys are slugs; dots are reserved as the page/field separator
_PAGE_KEY_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_-]*$')


def validate_page_key(page_key: str) -> None:
    """Validate that a page key is a dot-free slug.

    Args:
        page_key: The page key to validate

    Raises:
        ValueError: If the key is empty or contains other characters
    """
    if not page_key or not str(page_key).strip():
        raise ValueError("page_key cannot be empty")

    if not _PAGE_KEY_PATTERN.match(str(page_key)):
        raise ValueError(
            f"Invalid page_key format: '{page_key}'. "
            f"Page keys may contain only letters, digits, '-' and '_'."
        )


class PagesAPI:
    """Client for reading and partially updating page documents.

    The requests session is created lazily on first use, so constructing
    a PagesAPI never touches the environment or the network.

    Example:
        >>> api = PagesAPI(Authenticator())
        >>> page = api.get_page("homepage")
        >>> api.update_page("homepage", content={**page.content, "heroTitle": "Hi"})
    """

    def __init__(
        self,
        authenticator: Authenticator,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            authenticator: Source of the base URL and API token
            timeout: Per-request timeout in seconds
            session: Pre-built session (tests inject one); created lazily if None
        """
        self._authenticator = authenticator
        self._timeout = timeout
        self._session = session
        self._base_url: Optional[str] = None

    def _get_session(self) -> requests.Session:
        """Get or create the authenticated requests session.

        Raises:
            InvalidCredentialsError: If credentials are missing
        """
        if self._base_url is None:
            creds = self._authenticator.get_credentials()
            self._base_url = creds.url
            if self._session is None:
                self._session = requests.Session()
            self._session.headers.update({
                'Authorization': f'Bearer {creds.api_token}',
                'Accept': 'application/json',
            })
        return self._session  # type: ignore[return-value]

    def _endpoint(self) -> str:
        return self._base_url or "unknown"

    def _sanitize_credentials(self, text: str) -> str:
        """Mask tokens and URL passwords in text that is about to be logged.

        Example:
            >>> api._sanitize_credentials("Authorization: Bearer abc.def")
            "Authorization: ***REDACTED***"
        """
        if not text:
            return text

        sanitized = re.sub(r'://([^:/@\s]+):([^@/\s]+)@', '://***:***@', text)
        sanitized = re.sub(
            r'Authorization:\s*[^\n\r]+',
            'Authorization: ***REDACTED***',
            sanitized,
            flags=re.IGNORECASE,
        )
        sanitized = re.sub(
            r'Bearer\s+[^\s]+',
            'Bearer ***REDACTED***',
            sanitized,
            flags=re.IGNORECASE,
        )
        sanitized = re.sub(
            r'(api_?token|token)(["\']?\s*[:=]\s*["\']?)([^"\'\s&,}]+)',
            r'\1\2***REDACTED***',
            sanitized,
            flags=re.IGNORECASE,
        )
        return sanitized

    def _translate_error(
        self,
        exception: Exception,
        operation: str,
        page_key: Optional[str] = None,
    ) -> Exception:
        """Translate a requests exception into a typed CMSError.

        Args:
            exception: The original exception
            operation: Description of the failed operation (for logging)
            page_key: Page the operation targeted, if any

        Returns:
            Exception: One of the CMSError subclasses
        """
        if isinstance(exception, CMSError):
            return exception

        if isinstance(exception, (Timeout, ConnectionError)):
            return APIUnreachableError(endpoint=self._endpoint())

        status_code = None
        response = getattr(exception, 'response', None)
        if response is not None:
            status_code = getattr(response, 'status_code', None)

        if status_code in (401, 403):
            return InvalidCredentialsError(endpoint=self._endpoint())

        if status_code == 404:
            return PageNotFoundError(page_key=page_key or "unknown")

        safe_error_msg = self._sanitize_credentials(str(exception))
        logger.error(f"API operation failed: {operation} - {safe_error_msg}")
        if status_code:
            return APIAccessError(f"Pages API failure during {operation} (HTTP {status_code})")
        return APIAccessError(f"Pages API failure during {operation}")

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        page_key: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send one request (with rate-limit retry) and return the decoded JSON."""
        session = self._get_session()
        url = f"{self._base_url}{path}"

        def _send():
            response = session.request(method, url, json=payload, timeout=self._timeout)
            response.raise_for_status()
            return response

        try:
            response = retry_on_rate_limit(_send)
        except CMSError:
            raise
        except RequestException as e:
            raise self._translate_error(e, operation, page_key) from e

        try:
            return response.json()
        except ValueError as e:
            raise APIAccessError(
                f"Pages API returned invalid JSON during {operation}"
            ) from e

    def get_page(self, page_key: str) -> PageDocument:
        """Fetch a page document by key.

        Raises:
            ValueError: If page_key is not a valid slug
            PageNotFoundError: If the page does not exist yet
            InvalidCredentialsError: If the token is rejected
            APIUnreachableError: If the API cannot be reached
            APIAccessError: For any other failure
        """
        validate_page_key(page_key)
        logger.debug(f"Fetching page: {page_key}")
        data = self._request('GET', f"{PAGES_PATH}/{page_key}", f"get_page({page_key})", page_key)
        page = PageDocument.from_api(data or {})
        if not page.page_key:
            page.page_key = page_key
        return page

    def find_page(self, page_key: str) -> Optional[PageDocument]:
        """Fetch a page document, returning None when it does not exist."""
        try:
            return self.get_page(page_key)
        except PageNotFoundError:
            return None

    def list_pages(self) -> List[PageDocument]:
        """Fetch every page document."""
        data = self._request('GET', PAGES_PATH, "list_pages()")
        if not isinstance(data, list):
            raise APIAccessError("Pages API returned an unexpected page list")
        return [PageDocument.from_api(item) for item in data if isinstance(item, dict)]

    def update_page(
        self,
        page_key: str,
        title: Optional[str] = None,
        content: Optional[Dict[str, Any]] = None,
        meta_title: Optional[str] = None,
        meta_description: Optional[str] = None,
    ) -> PageDocument:
        """Partially update (or lazily create) a page document.

        Only the fields passed are sent. The server replaces the whole
        content field, so callers must send fully merged content.

        Raises:
            ValueError: If page_key is not a valid slug
            InvalidCredentialsError: If the token is rejected
            APIUnreachableError: If the API cannot be reached
            APIAccessError: For any other failure
        """
        validate_page_key(page_key)

        payload: Dict[str, Any] = {}
        if title is not None:
            payload['title'] = title
        if content is not None:
            payload['content'] = content
        if meta_title is not None:
            payload['metaTitle'] = meta_title
        if meta_description is not None:
            payload['metaDescription'] = meta_description

        logger.info(f"Updating page {page_key} ({', '.join(sorted(payload)) or 'no fields'})")
        data = self._request(
            'PATCH',
            f"{PAGES_PATH}/{page_key}",
            f"update_page({page_key})",
            page_key,
            payload=payload,
        )
        page = PageDocument.from_api(data or {})
        if not page.page_key:
            page.page_key = page_key
        return page
