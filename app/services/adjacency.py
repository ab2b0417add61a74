from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from app.schemas.prismic import RawDocument

_UNDATED = datetime.max.replace(tzinfo=timezone.utc)


def _publication_key(doc: RawDocument) -> Tuple[datetime, str]:
    date = doc.first_publication_date
    if date is None:
        date = _UNDATED
    elif date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    return date, doc.uid or ""


def sort_by_publication(docs: Sequence[RawDocument]) -> List[RawDocument]:
    """Oldest first; undated documents go last, ties broken by uid."""
    return sorted(docs, key=_publication_key)


def find_adjacent(
    sorted_docs: Sequence[RawDocument], uid: str
) -> Tuple[Optional[RawDocument], Optional[RawDocument]]:
    """
    Return ``(previous, next)`` neighbours of ``uid`` in a publication-ordered
    sequence. Either side is None at the ends; both are None when ``uid`` is
    not in the sequence.
    """
    index = next((i for i, doc in enumerate(sorted_docs) if doc.uid == uid), None)
    if index is None:
        return None, None

    prev_doc = sorted_docs[index - 1] if index > 0 else None
    next_doc = sorted_docs[index + 1] if index + 1 < len(sorted_docs) else None
    return prev_doc, next_doc
