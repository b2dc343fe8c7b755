"""Authentication module for julius2api."""

from .bearer import authorize, require_bearer_token

__all__ = ["authorize", "require_bearer_token"]
