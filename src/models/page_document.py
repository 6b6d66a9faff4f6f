"""Page document data model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


def display_title(page_key: str) -> str:
    """Derive a page's display title from its key.

    Only the first letter is upper-cased; the rest of the key is kept
    as-is, so "aboutUs" becomes "AboutUs" rather than "Aboutus".
    """
    return page_key[:1].upper() + page_key[1:]


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None


@dataclass
class PageDocument:
    """Persisted editable content of one page.

    Attributes:
        page_key: Stable slug identifying the page (e.g. "homepage")
        title: Display title
        content: Flat map of field key to value (string, HTML string or primitive)
        meta_title: SEO title, None if unset
        meta_description: SEO description, None if unset
        status: Publication status reported by the server
        id: Server-side record id
        last_edited_by: Id of the last editor, if known
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """
    page_key: str
    title: str = ""
    content: Dict[str, Any] = field(default_factory=dict)
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    status: str = "published"
    id: Optional[str] = None
    last_edited_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'PageDocument':
        """Build a PageDocument from the camelCase JSON returned by the API.

        A content value that is not a mapping is read as an empty map.
        """
        content = data.get('content')
        if not isinstance(content, dict):
            content = {}

        return cls(
            page_key=data.get('pageKey', ''),
            title=data.get('title') or '',
            content=dict(content),
            meta_title=data.get('metaTitle'),
            meta_description=data.get('metaDescription'),
            status=data.get('status') or 'published',
            id=data.get('id'),
            last_edited_by=data.get('lastEditedBy'),
            created_at=_parse_timestamp(data.get('createdAt')),
            updated_at=_parse_timestamp(data.get('updatedAt')),
        )
