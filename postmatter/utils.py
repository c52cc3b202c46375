import datetime
import math
import os
import re
from typing import Optional, Tuple

_DATED_NAME_RE = re.compile(r"^(?P<date>\d{4}-\d{2}-\d{2})-(?P<slug>.+)$")


def calculate_reading_time(text: str) -> str:
    words = text.split()
    minutes = math.ceil(len(words) / 200) or 1
    return f"{minutes} min"


def split_filename(name: str) -> Tuple[Optional[datetime.date], str]:
    """
    Derive (date, slug) from a `YYYY-MM-DD-slug.md` file name.
    Names without a valid date prefix keep their stem as slug and get no date.
    """
    stem, _ = os.path.splitext(os.path.basename(name))
    match = _DATED_NAME_RE.match(stem)
    if not match:
        return None, stem
    try:
        date = datetime.date.fromisoformat(match.group("date"))
    except ValueError:
        return None, stem
    return date, match.group("slug")
