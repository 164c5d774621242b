"""
Collection Constants

Closed set of collection slugs known to the CMS. Capability lists on a user
(editable / visible collections) may only hold these values.
"""

from collections.abc import Iterable
from enum import Enum


class CollectionName(str, Enum):
    USERS = "users"
    MEDIA = "media"
    DICTIONARY = "dictionary"
    POSTS = "posts"
    PAGES = "pages"
    CATEGORIES = "categories"
    PART_OF_SPEECH = "part-of-speech"


COLLECTION_SLUGS = frozenset(c.value for c in CollectionName)


def is_known_collection(slug: object) -> bool:
    return isinstance(slug, str) and slug in COLLECTION_SLUGS


def normalize_collections(values: Iterable[object] | None) -> frozenset[str]:
    """Keep only known collection slugs; ``None`` becomes an empty set."""
    if not values:
        return frozenset()
    return frozenset(v for v in values if is_known_collection(v))
