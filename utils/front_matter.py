from datetime import date, datetime
from typing import Any, Dict, List, Tuple

import yaml
from frontmatter.default_handlers import YAMLHandler

from core.errors import PostParseError

_handler = YAMLHandler()

TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M %z",
    "%Y-%m-%d %H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M%z",
)


def split_front_matter(text: str, path=None) -> Tuple[Dict[str, Any], str]:
    """
    Split a Markdown document into its front matter mapping and body.
    """
    text = text.lstrip("\ufeff")
    if not _handler.detect(text):
        raise PostParseError("missing front matter block", path)

    try:
        fm, body = _handler.split(text)
    except ValueError:
        raise PostParseError("front matter block is not closed", path)

    try:
        data = yaml.safe_load(fm)
    except yaml.YAMLError as err:
        raise PostParseError(f"invalid YAML in front matter: {err}", path)

    if data is None:
        raise PostParseError("front matter block is empty", path)
    if not isinstance(data, dict):
        raise PostParseError(
            f"front matter must be a mapping, got {type(data).__name__}", path
        )
    return data, body.lstrip("\n")


def parse_timestamp(value) -> datetime:
    """
    Parse a front matter date into a timezone-aware datetime.

    YAML already turns `2015-03-18 14:00:00 +00:00` into a datetime, but
    Jekyll style offsets such as `+0000` stay strings and are parsed here.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError(f"timestamp {value} has no UTC offset")
        return value
    if isinstance(value, date):
        raise ValueError(f"{value.isoformat()} is a date without time and UTC offset")
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"expected a timestamp, got {value!r}")

    raw = value.strip()
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue

    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"cannot parse {raw!r} as a timestamp")
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp {raw!r} has no UTC offset")
    return parsed


def split_categories(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def render_front_matter(data: Dict[str, Any]) -> str:
    yaml_txt = yaml.safe_dump(
        data, allow_unicode=True, sort_keys=False, default_flow_style=False, width=1000
    )
    return f"---\n{yaml_txt}---\n"
