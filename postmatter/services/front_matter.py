import re
from typing import Dict, Iterable, List, Optional

import yaml
from frontmatter import YAMLHandler

from postmatter.errors import (
    MalformedField,
    MissingFrontMatter,
    MissingRequiredField,
    UnterminatedFrontMatter,
)
from postmatter.models import FieldValue, Post

DELIMITER = "---"
REQUIRED_FIELDS = ("layout", "title")
SCALAR_FIELDS = ("layout", "title")
LIST_FIELDS = ("tags",)

_KEY_RE = re.compile(r"^(?P<key>[A-Za-z_][A-Za-z0-9_-]*)[ \t]*:(?P<value>.*)$")
_ITEM_RE = re.compile(r"^[ \t]*-(?:[ \t]+(?P<item>.*))?$")
# `name: value` inside a list item is a nested mapping; `http://x` is not
_NESTED_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*[ \t]*:(?:[ \t]|$)")
_LEADING_BLANK_LINES_RE = re.compile(r"\A(?:[ \t]*\n)+")

_yaml_handler = YAMLHandler()


def parse_post(
    text: str,
    source: Optional[str] = None,
    *,
    required: Iterable[str] = (),
) -> Post:
    """
    Split a document into its front matter block and body and validate it.

    `required` names keys that must be present on top of layout and title.
    Raises a FrontMatterError subclass; never returns a partial Post.
    """
    lines = _normalize_newlines(text).split("\n")

    if not _is_delimiter(lines[0]):
        raise MissingFrontMatter(source)

    closing = next(
        (i for i in range(1, len(lines)) if _is_delimiter(lines[i])),
        None,
    )
    if closing is None:
        raise UnterminatedFrontMatter(source)

    # Block lines start at line 2 of the document
    metadata = _parse_block(lines[1:closing], first_lineno=2, source=source)
    body = _LEADING_BLANK_LINES_RE.sub("", "\n".join(lines[closing + 1 :]))

    for field in (*REQUIRED_FIELDS, *required):
        value = metadata.get(field)
        if value is None or (field in SCALAR_FIELDS and not value):
            raise MissingRequiredField(field, source)

    extra = {
        key: value
        for key, value in metadata.items()
        if key not in (*SCALAR_FIELDS, *LIST_FIELDS)
    }
    return Post(
        layout=metadata["layout"],
        title=metadata["title"],
        tags=metadata.get("tags", []),
        body=body,
        extra=extra,
    )


def render_post(post: Post) -> str:
    """Write a Post back out in the canonical front matter format."""
    metadata = {
        "layout": post.layout,
        "title": post.title,
        "tags": list(post.tags),
        **post.extra,
    }
    block = _yaml_handler.export(
        metadata,
        sort_keys=False,
        default_flow_style=None,
        width=float("inf"),
    )
    return f"{DELIMITER}\n{block}\n{DELIMITER}\n{post.body}"


def _normalize_newlines(text: str) -> str:
    # Only CRLF pairs are folded; a lone CR inside the body is kept as written
    return text.removeprefix("\ufeff").replace("\r\n", "\n")


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == DELIMITER


def _parse_block(
    lines: List[str], *, first_lineno: int, source: Optional[str]
) -> Dict[str, FieldValue]:
    metadata: Dict[str, FieldValue] = {}
    key_lines: Dict[str, int] = {}
    bare_keys = set()  # written as `key:` with the value on following lines
    open_list: Optional[str] = None

    for offset, line in enumerate(lines):
        lineno = first_lineno + offset
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        item = _ITEM_RE.match(line)
        if item:
            if open_list is None:
                raise MalformedField(lineno, "list item outside of a list", source)
            raw_item = (item.group("item") or "").strip()
            if not raw_item:
                raise MalformedField(lineno, "empty list item", source)
            if raw_item[0] in "[{" or _NESTED_KEY_RE.match(raw_item):
                raise MalformedField(
                    lineno, f"nested value in '{open_list}' is not supported", source
                )
            metadata[open_list].append(_decode_scalar(raw_item, lineno, source))
            continue

        match = _KEY_RE.match(line)
        if not match:
            raise MalformedField(
                lineno, f"expected 'key: value', got {stripped!r}", source
            )

        key = match.group("key")
        if key in metadata:
            raise MalformedField(lineno, f"duplicate key '{key}'", source)
        key_lines[key] = lineno

        raw_value = match.group("value").strip()
        if not raw_value or raw_value.startswith("#"):
            metadata[key] = []
            bare_keys.add(key)
            open_list = key
            continue

        open_list = None
        metadata[key] = _decode_value(key, raw_value, lineno, source)

    for key in bare_keys:
        # `key:` with nothing below it is an empty scalar unless it names a list
        if not metadata[key] and key not in LIST_FIELDS:
            metadata[key] = ""

    for key, value in metadata.items():
        if key in LIST_FIELDS and isinstance(value, str):
            raise MalformedField(key_lines[key], f"'{key}' must be a list", source)
        if key in SCALAR_FIELDS and isinstance(value, list):
            raise MalformedField(
                key_lines[key], f"'{key}' must be a single value", source
            )
    return metadata


def _decode_value(
    key: str, raw: str, lineno: int, source: Optional[str]
) -> FieldValue:
    if raw.startswith("["):
        return _decode_flow_list(key, raw, lineno, source)
    if raw[0] in "{|>":
        raise MalformedField(
            lineno, f"unsupported value for '{key}': {raw!r}", source
        )
    return _decode_scalar(raw, lineno, source)


def _decode_flow_list(
    key: str, raw: str, lineno: int, source: Optional[str]
) -> List[str]:
    try:
        # BaseLoader keeps every scalar a string: no int/bool/date coercion
        value = yaml.load(raw, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise MalformedField(lineno, f"invalid list for '{key}': {e}", source) from e
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise MalformedField(
            lineno, f"'{key}' must be a flat list of strings", source
        )
    return value


def _decode_scalar(raw: str, lineno: int, source: Optional[str]) -> str:
    if raw[0] not in "'\"":
        return _strip_comment(raw)
    try:
        value = yaml.load(raw, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise MalformedField(lineno, f"invalid quoted value {raw!r}", source) from e
    if not isinstance(value, str):
        raise MalformedField(lineno, f"invalid quoted value {raw!r}", source)
    return value


def _strip_comment(raw: str) -> str:
    # A plain value keeps its colons; only " #" starts a trailing comment
    index = raw.find(" #")
    if index == -1:
        index = raw.find("\t#")
    return raw if index == -1 else raw[:index].rstrip()
