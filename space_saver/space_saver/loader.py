from __future__ import annotations

import json
from typing import Any, Dict, Optional

from .cells import to_bool, to_number
from .models import (
    AssignmentColumns,
    CapacitySetting,
    ColumnMapping,
    ColumnRef,
    LocationColumns,
    PlanOptions,
    ProductInfoColumns,
    Table,
)


class InputError(ValueError):
    """The request does not meet the structural contract of the planner."""


def _as_dict(payload: Any, what: str) -> dict:
    if not isinstance(payload, dict):
        raise InputError(f"Missing or invalid {what}")
    return payload


def load_table(payload: Any, name: str) -> Table:
    if not isinstance(payload, dict) or not isinstance(payload.get("headers"), list) or not isinstance(
        payload.get("rows"), list
    ):
        raise InputError(f"Missing or invalid {name} table")
    return Table(headers=[str(h) for h in payload["headers"]], rows=payload["rows"])


def column_ref(section: dict, field: str, required: bool = False) -> Optional[ColumnRef]:
    index = section.get(f"{field}_col")
    key = section.get(f"{field}_key")
    if isinstance(index, bool) or not isinstance(index, int):
        index = None
    if key is not None:
        key = str(key)
    if index is None and key is None:
        if required:
            raise InputError(f"Mapping has no column for '{field}'")
        return None
    return ColumnRef(index=index, key=key)


def load_mapping(payload: Any) -> ColumnMapping:
    data = _as_dict(payload, "mapping")
    locs = _as_dict(data.get("locations"), "locations mapping")
    assigns = _as_dict(data.get("assignments"), "assignments mapping")
    info = _as_dict(data.get("product_info"), "product info mapping")
    return ColumnMapping(
        locations=LocationColumns(
            name=column_ref(locs, "name", required=True),
            type=column_ref(locs, "type", required=True),
            pickable=column_ref(locs, "pickable", required=True),
            sellable=column_ref(locs, "sellable", required=True),
            transfer=column_ref(locs, "transfer"),
            aisle=column_ref(locs, "aisle"),
            shelf=column_ref(locs, "shelf"),
        ),
        assignments=AssignmentColumns(
            sku=column_ref(assigns, "sku", required=True),
            location=column_ref(assigns, "location", required=True),
            quantity=column_ref(assigns, "qty", required=True),
        ),
        product_info=ProductInfoColumns(
            sku=column_ref(info, "sku", required=True),
            length=column_ref(info, "length"),
            width=column_ref(info, "width"),
            height=column_ref(info, "height"),
        ),
    )


def _positive(value: Any) -> Optional[float]:
    number = to_number(value)
    if number is None or number <= 0:
        return None
    return number


def load_capacity(payload: Any) -> Dict[str, CapacitySetting]:
    data = _as_dict(payload, "capacity settings")
    out: Dict[str, CapacitySetting] = {}
    for loc_type, item in data.items():
        if not isinstance(item, dict):
            continue
        setting = CapacitySetting(cu_in=_positive(item.get("cu_in")), units=_positive(item.get("units")))
        if setting.cu_in is None and setting.units is None:
            continue
        out[str(loc_type).strip()] = setting
    if not out:
        raise InputError("Missing or empty capacity settings")
    return out


def load_options(payload: Any) -> PlanOptions:
    if payload is None:
        return PlanOptions()
    data = _as_dict(payload, "options")
    defaults = PlanOptions()
    headroom = data.get("headroom_fraction", defaults.headroom_fraction)
    headroom = to_number(headroom)
    if headroom is None or not 0 < headroom <= 1:
        raise InputError("headroom_fraction must be greater than 0 and at most 1")
    aisles = data.get("preferred_pick_aisles", defaults.preferred_pick_aisles)
    shelves = data.get("preferred_pick_shelves", defaults.preferred_pick_shelves)
    if not isinstance(aisles, (list, tuple)) or not isinstance(shelves, (list, tuple)):
        raise InputError("preferred_pick_aisles and preferred_pick_shelves must be lists")
    return PlanOptions(
        headroom_fraction=headroom,
        preferred_pick_aisles=tuple(str(a).strip().upper() for a in aisles),
        preferred_pick_shelves=tuple(str(s).strip().upper() for s in shelves),
        include_non_pickable_non_sellable=to_bool(data.get("include_non_pickable_non_sellable", False)),
        allow_mixed_sku_destination=to_bool(data.get("allow_mixed_sku_destination", False)),
    )


def load_request(payload: Any) -> dict:
    """Validate a plan request and return keyword arguments for ``analyze``."""
    data = _as_dict(payload, "request body")
    return {
        "locations": load_table(data.get("locations_table"), "locations"),
        "assignments": load_table(data.get("assignments_table"), "product locations"),
        "product_info": load_table(data.get("product_info_table"), "product info"),
        "mapping": load_mapping(data.get("mapping")),
        "capacity_by_type": load_capacity(data.get("capacity_by_type")),
        "options": load_options(data.get("options")),
    }


def load_request_bytes(data: bytes | None) -> dict:
    if not data:
        raise InputError("Empty request")
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InputError(f"Request is not valid JSON: {e}") from e
    return load_request(payload)
