from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field

from app.utils import format_date


class PostSummary(BaseModel):
    uid: str
    first_publication_date: Optional[datetime] = None
    title: str
    subtitle: Optional[str] = None
    author: Optional[str] = None

    @computed_field
    @property
    def display_date(self) -> str:
        """Publication date as the post list shows it, sent with /api/posts too."""
        return format_date(self.first_publication_date)


class PostPagination(BaseModel):
    results: List[PostSummary] = Field(default_factory=list)
    next_page: Optional[str] = None


class BodyText(BaseModel):
    text: str


class ContentBlock(BaseModel):
    heading: Optional[str] = None
    body: List[BodyText] = Field(default_factory=list)


class AdjacentPost(BaseModel):
    uid: Optional[str] = None
    title: Optional[str] = None

    @property
    def exists(self) -> bool:
        return bool(self.uid)


class PostDetail(BaseModel):
    uid: str
    first_publication_date: Optional[datetime] = None
    last_publication_date: Optional[datetime] = None
    title: str
    subtitle: Optional[str] = None
    banner_url: Optional[str] = None
    author: Optional[str] = None
    content: List[ContentBlock] = Field(default_factory=list)
    prev_post: AdjacentPost = Field(default_factory=AdjacentPost)
    next_post: AdjacentPost = Field(default_factory=AdjacentPost)
    reading_time: Optional[str] = None


class RevalidateRequest(BaseModel):
    path: Optional[str] = None  # all pages when omitted
