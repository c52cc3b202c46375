import argparse
import logging
import sys

from postmatter.errors import FrontMatterError
from postmatter.repos.posts_repo import FilesystemPostsRepo
from postmatter.settings import settings

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Validate post front matter.")
    parser.add_argument("posts_dir", nargs="?", default=settings.POSTS_DIR)
    parser.add_argument("--workers", type=int, default=settings.MAX_WORKERS)
    parser.add_argument("--fail-fast", action="store_true")
    args = parser.parse_args(argv)

    repo = FilesystemPostsRepo(args.posts_dir, max_workers=args.workers)
    try:
        report = repo.load(fail_fast=args.fail_fast)
    except FrontMatterError as e:
        logger.error(f"Validation aborted: {e}")
        return 1

    for failure in report.failures:
        logger.error(f"{failure.source}: [{failure.kind}] {failure.reason}")

    if report.ok:
        logger.info(f"All {report.total} posts in {args.posts_dir} are valid.")
        return 0
    logger.error(f"{len(report.failures)}/{report.total} posts failed validation.")
    return 1


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    sys.exit(main())
