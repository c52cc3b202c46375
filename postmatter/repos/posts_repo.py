import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from postmatter.errors import UnreadableFile
from postmatter.models import BatchReport
from postmatter.services.batch import parse_many, to_failure
from postmatter.settings import settings

logger = logging.getLogger(__name__)


class FilesystemPostsRepo:
    def __init__(
        self,
        posts_dir: Union[str, Path, None] = None,
        pattern: Optional[str] = None,
        *,
        max_workers: Optional[int] = None,
    ):
        self.posts_dir = Path(posts_dir) if posts_dir else settings.posts_path
        self.pattern = pattern or settings.POSTS_GLOB
        self.max_workers = max_workers

    def list_sources(self) -> List[str]:
        """Post files matching the pattern, as POSIX paths relative to posts_dir."""
        if not self.posts_dir.is_dir():
            logger.warning(f"Posts directory not found: {self.posts_dir}")
            return []
        return sorted(
            path.relative_to(self.posts_dir).as_posix()
            for path in self.posts_dir.glob(self.pattern)
            if path.is_file()
        )

    def read(self, source: str) -> Optional[str]:
        """Return the UTF-8 text of a post file, or None if it does not exist."""
        path = self._resolve(source)
        if path is None or not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def load(self, *, fail_fast: bool = False) -> BatchReport:
        """Read every post file and parse the lot as one batch."""
        documents = {}
        unreadable = []
        for source in self.list_sources():
            try:
                text = self.read(source)
            except UnicodeDecodeError as e:
                error = UnreadableFile(f"not valid UTF-8: {e.reason}", source)
            except OSError as e:
                error = UnreadableFile(f"cannot be read: {e.strerror or e}", source)
            else:
                if text is not None:
                    documents[source] = text
                    continue
                error = UnreadableFile(
                    "listed but missing or outside the posts directory", source
                )
            unreadable.append((source, error))

        if unreadable and fail_fast:
            raise unreadable[0][1]

        report = parse_many(
            documents, max_workers=self.max_workers, fail_fast=fail_fast
        )
        if not unreadable:
            return report

        for _source, error in unreadable:
            logger.warning(f"Skipped {error}")
        failures = report.failures + [to_failure(s, e) for s, e in unreadable]
        return BatchReport(
            posts=report.posts,
            failures=sorted(failures, key=lambda failure: failure.source),
        )

    def _resolve(self, source: str) -> Optional[Path]:
        # Checked on the written path, not the link target: symlinked posts load
        base = Path(os.path.normpath(self.posts_dir.absolute()))
        path = Path(os.path.normpath(base / source))
        if path == base or not path.is_relative_to(base):
            logger.warning(f"Refusing to read {source!r} outside {base}")
            return None
        return path
