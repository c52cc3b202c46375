import datetime
from collections import Counter
from typing import Dict, List, Optional

from postmatter.models import BatchReport, PostFile
from postmatter.schemas.blog import BatchReportOut, PostDetail, PostSummary
from postmatter.utils import calculate_reading_time


class PostsService:
    def __init__(self, repo, report: Optional[BatchReport] = None):
        self.repo = repo
        self._report = report

    def report(self) -> BatchReport:
        """Parse the collection on first use and keep the result."""
        if self._report is None:
            self._report = self.repo.load()
        return self._report

    def list_posts(self, tag: Optional[str] = None) -> List[PostSummary]:
        entries = self.report().posts
        if tag is not None:
            entries = [e for e in entries if tag in e.post.tags]
        entries = sorted(entries, key=lambda e: e.slug)
        # Newest first, undated posts last
        entries.sort(key=lambda e: e.date or datetime.date.min, reverse=True)
        return [_to_summary(e) for e in entries]

    def get_post(self, slug: str) -> Optional[PostDetail]:
        matches = [e for e in self.report().posts if e.slug == slug]
        if not matches:
            return None
        # Same slug under several dates: serve the newest
        entry = max(matches, key=lambda e: (e.date or datetime.date.min, e.source))
        return PostDetail(
            **_to_summary(entry).model_dump(),
            extra=entry.post.extra,
            content=entry.post.body,
        )

    def list_tags(self) -> Dict[str, int]:
        counts = Counter(tag for e in self.report().posts for tag in e.post.tags)
        return dict(sorted(counts.items(), key=lambda item: (-item[1], item[0])))

    def summarize_report(self) -> BatchReportOut:
        report = self.report()
        return BatchReportOut(
            total=report.total,
            parsed=len(report.posts),
            failed=len(report.failures),
            failures=report.failures,
        )


def _to_summary(entry: PostFile) -> PostSummary:
    return PostSummary(
        slug=entry.slug,
        source=entry.source,
        layout=entry.post.layout,
        title=entry.post.title,
        tags=entry.post.tags,
        publishedAt=entry.date,
        readingTime=calculate_reading_time(entry.post.body),
    )
