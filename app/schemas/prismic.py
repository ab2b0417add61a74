import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Prismic writes offsets as +0000; ISO 8601 parsers want +00:00
_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


class RawModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class RawRichText(RawModel):
    type: Optional[str] = None
    text: str = ""


class RawContentGroup(RawModel):
    heading: Optional[str] = None
    body: List[RawRichText] = Field(default_factory=list)


class RawImage(RawModel):
    url: Optional[str] = None
    alt: Optional[str] = None


class RawSummaryData(RawModel):
    title: str
    subtitle: Optional[str] = None
    author: Optional[str] = None


class RawPostData(RawSummaryData):
    banner: RawImage = Field(default_factory=RawImage)
    content: List[RawContentGroup] = Field(default_factory=list)

    @field_validator("banner", mode="before")
    @classmethod
    def empty_banner(cls, value):
        return value or {}


class RawDocument(RawModel):
    id: str
    uid: Optional[str] = None
    type: Optional[str] = None
    first_publication_date: Optional[datetime] = None
    last_publication_date: Optional[datetime] = None
    data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("first_publication_date", "last_publication_date", mode="before")
    @classmethod
    def normalize_offset(cls, value):
        if isinstance(value, str):
            return _COMPACT_OFFSET.sub(r"\1:\2", value.strip()) or None
        return value


class RawSearchResponse(RawModel):
    results: List[Dict[str, Any]] = Field(default_factory=list)
    next_page: Optional[str] = None
    page: Optional[int] = None
    total_pages: Optional[int] = None
