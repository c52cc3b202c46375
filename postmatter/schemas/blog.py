import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from postmatter.models import ParseFailure


class PostSummary(BaseModel):
    slug: str
    source: str
    layout: str
    title: str
    tags: List[str] = Field(default_factory=list)
    publishedAt: Optional[datetime.date] = None
    readingTime: Optional[str] = None


class PostDetail(PostSummary):
    extra: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)
    content: str


class BatchReportOut(BaseModel):
    total: int
    parsed: int
    failed: int
    failures: List[ParseFailure] = Field(default_factory=list)
