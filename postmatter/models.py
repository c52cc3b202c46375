import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

FieldValue = Union[str, List[str]]


class Post(BaseModel):
    """One content file: front matter metadata plus the raw Markdown body."""

    model_config = ConfigDict(frozen=True)

    layout: str
    title: str
    tags: List[str] = Field(default_factory=list)
    body: str = ""
    # Keys other than layout/title/tags, in document order
    extra: Dict[str, FieldValue] = Field(default_factory=dict)


class PostFile(BaseModel):
    """A Post located on disk, with slug and date taken from its file name."""

    source: str
    slug: str
    date: Optional[datetime.date] = None
    post: Post


class ParseFailure(BaseModel):
    source: str
    kind: str
    reason: str
    line: Optional[int] = None


class BatchReport(BaseModel):
    posts: List[PostFile] = Field(default_factory=list)
    failures: List[ParseFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def total(self) -> int:
        return len(self.posts) + len(self.failures)
