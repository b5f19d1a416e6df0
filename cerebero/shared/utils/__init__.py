"""
Utilities Package

Common utility functions and helpers.

Contents:
=========
- security: Password hashing and session tokens
- text: Tag-name normalisation and description truncation

Usage:
======
    from cerebero.shared.utils.security import SecurityUtils
    from cerebero.shared.utils.text import normalize_tag_name
"""

from cerebero.shared.utils.security import SecurityUtils
from cerebero.shared.utils.text import normalize_tag_name, truncate

__all__ = [
    "SecurityUtils",
    "normalize_tag_name",
    "truncate",
]
