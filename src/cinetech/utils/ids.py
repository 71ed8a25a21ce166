# COMPONENT: IDENTITY ALLOCATOR
# REQUIREMENTS SATISFIED: unique, monotonic integer identifiers per collection
"""
src/cinetech/utils/ids.py

Assigns integer identifiers to new films and directors.

The next identifier is one past the largest identifier the collection
currently holds, or one past the caller-supplied floor (the collection's
high-water mark) when that is larger. Identifier 0 is reserved for the
"unknown director" sentinel and is never produced.
"""
from typing import Any, Iterable


def _id_of(entity: Any) -> int:
    if isinstance(entity, dict):
        return int(entity.get("id", 0) or 0)
    return int(getattr(entity, "id", 0) or 0)


def next_id(collection: Iterable[Any], floor: int = 0) -> int:
    """
    Return max(existing ids, floor) + 1, or 1 for an empty collection.

    Accepts records (anything with an ``id`` attribute) or plain dicts.
    Must be called at insertion time, never cached.
    """
    highest = max(0, floor)
    for entity in collection:
        highest = max(highest, _id_of(entity))
    return highest + 1
