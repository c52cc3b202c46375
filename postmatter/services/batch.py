import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from postmatter.errors import FrontMatterError
from postmatter.models import BatchReport, ParseFailure, PostFile
from postmatter.services.front_matter import parse_post
from postmatter.settings import settings
from postmatter.utils import split_filename

logger = logging.getLogger(__name__)

Outcome = Union[PostFile, FrontMatterError]


def parse_file(source: str, text: str, *, required: Iterable[str] = ()) -> PostFile:
    """Parse one document and attach the slug and date its file name carries."""
    post = parse_post(text, source, required=required)
    date, slug = split_filename(source)
    return PostFile(source=source, slug=slug, date=date, post=post)


def parse_many(
    documents: Mapping[str, str],
    *,
    max_workers: Optional[int] = None,
    fail_fast: bool = False,
    required: Optional[Iterable[str]] = None,
) -> BatchReport:
    """
    Parse a batch of documents keyed by source name.

    A document that fails to parse is reported and the rest of the batch
    carries on. With fail_fast the first failure (in source order) is raised
    instead. Errors other than FrontMatterError are not caught.
    """
    max_workers = max_workers or settings.MAX_WORKERS
    if required is None:
        required = settings.extra_required_fields
    required = tuple(required)
    sources = sorted(documents)

    if max_workers > 1 and len(sources) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(_attempt, source, documents[source], required)
                for source in sources
            ]
            outcomes = [future.result() for future in futures]
    else:
        outcomes = [
            _attempt(source, documents[source], required) for source in sources
        ]

    return build_report(zip(sources, outcomes), fail_fast=fail_fast)


def build_report(
    outcomes: Iterable[Tuple[str, Outcome]], *, fail_fast: bool = False
) -> BatchReport:
    posts: List[PostFile] = []
    failures: List[ParseFailure] = []

    for source, outcome in sorted(outcomes, key=lambda pair: pair[0]):
        if isinstance(outcome, PostFile):
            posts.append(outcome)
            continue
        if fail_fast:
            raise outcome
        logger.warning(f"Skipped {outcome}")
        failures.append(to_failure(source, outcome))

    logger.info(
        f"Parsed {len(posts)}/{len(posts) + len(failures)} posts"
        f" ({len(failures)} failed)"
    )
    return BatchReport(posts=posts, failures=failures)


def to_failure(source: str, error: FrontMatterError) -> ParseFailure:
    return ParseFailure(
        source=source, kind=error.kind, reason=error.reason, line=error.line
    )


def _attempt(source: str, text: str, required: Tuple[str, ...]) -> Outcome:
    try:
        return parse_file(source, text, required=required)
    except FrontMatterError as e:
        if e.source is None:
            e.source = source
        return e
