"""
Enums used across the application.
"""

from enum import Enum


class ContentType(str, Enum):
    """Kind of saved item."""

    DOCUMENT = "document"
    TWEET = "tweet"
    YOUTUBE = "youtube"
    LINK = "link"


class AuthProvider(str, Enum):
    """How a user signs in."""

    CREDENTIALS = "credentials"
    GOOGLE = "google"


class SearchResultType(str, Enum):
    """Origin of a search hit, so clients can render content and tags apart."""

    CONTENT = "content"
    TAG = "tag"
