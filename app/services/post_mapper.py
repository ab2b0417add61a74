from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from app.schemas.blog import (
    AdjacentPost,
    BodyText,
    ContentBlock,
    PostDetail,
    PostPagination,
    PostSummary,
)
from app.schemas.prismic import (
    RawDocument,
    RawPostData,
    RawSearchResponse,
    RawSummaryData,
)
from app.utils import reading_time_for_blocks


class DocumentDecodeError(ValueError):
    """A CMS payload did not have the shape the pages need."""

    def __init__(self, what: str, fields: List[str]):
        super().__init__(f"Could not decode {what}: invalid fields {', '.join(fields)}")
        self.what = what
        self.fields = fields


def _decode(model: Type[BaseModel], payload: Any, what: str):
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        fields = sorted(
            {".".join(str(part) for part in err["loc"]) or "<root>" for err in e.errors()}
        )
        raise DocumentDecodeError(what, fields) from e


def decode_document(raw: Dict[str, Any]) -> RawDocument:
    doc_id = raw.get("id", "<unknown>") if isinstance(raw, dict) else "<unknown>"
    doc = _decode(RawDocument, raw, f"document {doc_id}")
    if not doc.uid:
        raise DocumentDecodeError(f"document {doc.id}", ["uid"])
    return doc


def to_post_summary(raw: Dict[str, Any]) -> PostSummary:
    doc = decode_document(raw)
    data = _decode(RawSummaryData, doc.data, f"document {doc.id} data")
    return PostSummary(
        uid=doc.uid,
        first_publication_date=doc.first_publication_date,
        title=data.title,
        subtitle=data.subtitle,
        author=data.author,
    )


def to_pagination(raw_response: Dict[str, Any]) -> PostPagination:
    response = _decode(RawSearchResponse, raw_response, "search response")
    return PostPagination(
        results=[to_post_summary(result) for result in response.results],
        next_page=response.next_page or None,
    )


def to_adjacent(doc: Optional[RawDocument]) -> AdjacentPost:
    if doc is None:
        return AdjacentPost()
    title = doc.data.get("title")
    return AdjacentPost(uid=doc.uid or None, title=title or None)


def to_post_detail(
    raw: Dict[str, Any],
    prev_post: Optional[RawDocument] = None,
    next_post: Optional[RawDocument] = None,
) -> PostDetail:
    doc = decode_document(raw)
    data = _decode(RawPostData, doc.data, f"document {doc.id} data")

    content = [
        ContentBlock(
            heading=group.heading,
            body=[BodyText(text=paragraph.text) for paragraph in group.body],
        )
        for group in data.content
    ]

    return PostDetail(
        uid=doc.uid,
        first_publication_date=doc.first_publication_date,
        last_publication_date=doc.last_publication_date,
        title=data.title,
        subtitle=data.subtitle,
        banner_url=data.banner.url,
        author=data.author,
        content=content,
        prev_post=to_adjacent(prev_post),
        next_post=to_adjacent(next_post),
        reading_time=reading_time_for_blocks(content),
    )
