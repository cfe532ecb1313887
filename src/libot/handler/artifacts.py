"""Append-only file artifacts written by the responder.

Two kinds of file live next to the process:

* ``{bot}-links.txt``: one ``<ISO8601> <sender>: <url>`` line per link.
* ``{bot}-raw-<id>.log``: pretty-printed payloads of non-text messages
  that carried no link, for offline inspection.

Every record goes out in a single ``write()`` on a file opened in append
mode, so handlers running side by side never interleave within a record.
"""

from __future__ import annotations

import dataclasses
import json
import pprint
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from libot.constants import RAW_DUMP_HEADER

_PRIMITIVES = (str, int, float, bool, type(None), bytes)


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def _append(path: Path, record: str) -> None:
    with open(path, "a", encoding="utf-8") as f:
        f.write(record)


def append_link(path: Path, sender_name: str, url: str) -> str:
    """Append a link record and return the line written."""
    line = f"{utc_timestamp()} {sender_name}: {url}\n"
    _append(path, line)
    return line


def append_raw_dump(path: Path, payload: Any) -> None:
    """Append a timestamped, pretty-printed payload section."""
    header = RAW_DUMP_HEADER.format(timestamp=utc_timestamp())
    _append(path, header + render_debug_dump(payload) + "\n")


# ──────────────────────────────────────────────────────────────────────
# Payload rendering
# ──────────────────────────────────────────────────────────────────────


def _to_plain(obj: Any, ancestors: set[int]) -> Any:
    """Convert ``obj`` into dicts/lists/primitives, marking cycles."""
    if isinstance(obj, Enum):
        return f"{type(obj).__name__}.{obj.name}"
    if isinstance(obj, _PRIMITIVES):
        return obj

    if id(obj) in ancestors:
        return f"<circular {type(obj).__name__}>"

    ancestors.add(id(obj))
    try:
        if isinstance(obj, dict):
            return {
                k if isinstance(k, _PRIMITIVES) else repr(k): _to_plain(v, ancestors)
                for k, v in obj.items()
            }
        if isinstance(obj, (list, tuple, set, frozenset)):
            return [_to_plain(v, ancestors) for v in obj]
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return {
                f.name: _to_plain(getattr(obj, f.name, None), ancestors)
                for f in dataclasses.fields(obj)
            }
        if hasattr(obj, "__dict__") and not isinstance(obj, type):
            return {
                k: _to_plain(v, ancestors)
                for k, v in vars(obj).items()
                if not callable(v)
            }
        return repr(obj)
    finally:
        ancestors.discard(id(obj))


def render_debug_dump(payload: Any) -> str:
    """Human-readable rendering of an arbitrary payload.

    Circular references are rendered as ``<circular TypeName>`` instead
    of recursing forever.
    """
    return pprint.pformat(_to_plain(payload, set()), width=100, sort_dicts=False)


def _json_default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name, None) for f in dataclasses.fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def payload_json(payload: Any) -> str:
    """Strict JSON rendering; raises on cycles or unknown types."""
    return json.dumps(
        payload if payload is not None else {},
        indent=2,
        ensure_ascii=False,
        default=_json_default,
    )
