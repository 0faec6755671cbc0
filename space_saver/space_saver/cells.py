from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from typing import Any, List, Optional

from .models import ColumnRef

_INVISIBLE = re.compile("[\u200b-\u200d\ufeff]")
_NON_ALNUM = re.compile(r"[^A-Z0-9]")
_TRUTHY = {"true", "1", "yes", "y"}


def _is_positional(row: Any) -> bool:
    return isinstance(row, Sequence) and not isinstance(row, (str, bytes))


def extract_cell(row: Any, headers: List[str], index: Optional[int] = None, key: Optional[str] = None) -> Any:
    """Return the raw cell for a column.

    A valid positional ``index`` wins; otherwise ``key`` is used. Keyed rows
    resolve an index through ``headers`` and positional rows resolve a key the
    same way. ``None`` when neither resolves.
    """
    if isinstance(index, int) and not isinstance(index, bool) and index >= 0:
        if _is_positional(row) and index < len(row):
            return row[index]
        if isinstance(row, Mapping) and index < len(headers) and headers[index] in row:
            return row[headers[index]]
    if key is not None:
        if isinstance(row, Mapping):
            return row.get(key)
        if _is_positional(row) and key in headers:
            pos = headers.index(key)
            if pos < len(row):
                return row[pos]
    return None


def column(row: Any, headers: List[str], ref: Optional[ColumnRef]) -> Any:
    if ref is None:
        return None
    return extract_cell(row, headers, ref.index, ref.key)


def to_bool(value: Any) -> bool:
    if value is None:
        return False
    return str(value).strip().lower() in _TRUTHY


def to_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).replace(",", "").strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def clean_string(value: Any) -> str:
    if value is None:
        return ""
    return _INVISIBLE.sub("", str(value)).strip()


def aisle_prefix(value: Any) -> str:
    return _NON_ALNUM.sub("", clean_string(value).upper())[:3]
