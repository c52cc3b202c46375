import datetime
import textwrap

import pytest

from postmatter.models import BatchReport, ParseFailure, Post, PostFile


def make_doc(raw: str) -> str:
    """Dedent a triple-quoted test document so it starts at column 0."""
    return textwrap.dedent(raw).lstrip("\n")


def make_post_file(
    slug: str,
    *,
    title: str = "Title",
    tags=None,
    body: str = "Body text.",
    date: datetime.date | None = None,
    extra=None,
) -> PostFile:
    source = f"{date.isoformat()}-{slug}.md" if date else f"{slug}.md"
    return PostFile(
        source=source,
        slug=slug,
        date=date,
        post=Post(
            layout="post",
            title=title,
            tags=tags or [],
            body=body,
            extra=extra or {},
        ),
    )


class FakeRepo:
    """
    Minimal repo stand-in used in service tests.
    """

    def __init__(self, posts=None, failures=None):
        self.report = BatchReport(posts=posts or [], failures=failures or [])
        self.load_calls = 0

    def load(self, *, fail_fast: bool = False) -> BatchReport:
        self.load_calls += 1
        return self.report


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    """

    def __init__(
        self,
        list_posts_return=None,
        get_post_return=None,
        tags_return=None,
        report_return=None,
    ):
        self._list_posts_return = list_posts_return or []
        self._get_post_return = get_post_return
        self._tags_return = tags_return or {}
        self._report_return = report_return
        self.tag_filters = []

    def list_posts(self, tag=None):
        self.tag_filters.append(tag)
        return self._list_posts_return

    def get_post(self, slug: str):
        return self._get_post_return

    def list_tags(self):
        return self._tags_return

    def summarize_report(self):
        return self._report_return

    def report(self):
        return BatchReport()


@pytest.fixture
def posts_dir(tmp_path):
    """A small on-disk collection with one malformed post."""
    files = {
        "2023-05-01-fix-cors.md": """
            ---
            layout: post
            title: "NestJS: fixing CORS errors"
            tags: ['nestjs', 'cors']
            ---
            Enable CORS in main.ts.
            """,
        "2023-06-12-react-hooks.md": """
            ---
            layout: post
            title: "React: useEffect runs twice"
            tags:
              - react
              - hooks
            ---
            Strict mode mounts twice.
            """,
        "2023-07-03-broken.md": """
            ---
            layout: post
            title: "Never closed"
            tags: ['docker']
            """,
        "notes.txt": "not a post",
    }
    for name, raw in files.items():
        (tmp_path / name).write_text(make_doc(raw), encoding="utf-8")
    return tmp_path


def failure(source: str, kind: str = "MalformedField") -> ParseFailure:
    return ParseFailure(source=source, kind=kind, reason="bad", line=2)
