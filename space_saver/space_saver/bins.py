from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional

from .cells import aisle_prefix, clean_string, column, to_bool, to_number
from .models import (
    CAP_COUNT,
    CAP_UNKNOWN,
    CAP_VOLUMETRIC,
    Bin,
    CapacitySetting,
    ColumnMapping,
    ColumnRef,
    PlanOptions,
    Table,
)

logger = logging.getLogger("SpaceSaver.Bins")

TYPE_PLACEHOLDERS = {"", "none", "n/a", "na", "null", "undefined", "0", "-"}


@dataclass
class _LocationInfo:
    location_type: str
    pickable: bool
    sellable: bool
    transferable: Optional[bool]
    aisle: Optional[str]
    shelf: Optional[str]


def _optional_text(table: Table, row, ref: Optional[ColumnRef]) -> Optional[str]:
    if ref is None:
        return None
    return clean_string(column(row, table.headers, ref)) or None


def _sku_volumes(product_info: Table, mapping: ColumnMapping) -> Dict[str, Optional[float]]:
    cols = mapping.product_info
    volumes: Dict[str, Optional[float]] = {}
    for row in product_info.rows:
        sku = clean_string(column(row, product_info.headers, cols.sku))
        if not sku:
            continue
        length = to_number(column(row, product_info.headers, cols.length))
        width = to_number(column(row, product_info.headers, cols.width))
        height = to_number(column(row, product_info.headers, cols.height))
        if length is None or width is None or height is None:
            # an incomplete row never erases a known volume
            volumes.setdefault(sku, None)
        else:
            volumes[sku] = length * width * height
    return volumes


def _location_map(locations: Table, mapping: ColumnMapping) -> Dict[str, _LocationInfo]:
    cols = mapping.locations
    headers = locations.headers
    out: Dict[str, _LocationInfo] = {}
    for row in locations.rows:
        name = clean_string(column(row, headers, cols.name))
        if not name:
            continue
        transfer = None
        if cols.transfer is not None:
            transfer = to_bool(column(row, headers, cols.transfer))
        out[name] = _LocationInfo(
            location_type=clean_string(column(row, headers, cols.type)),
            pickable=to_bool(column(row, headers, cols.pickable)),
            sellable=to_bool(column(row, headers, cols.sellable)),
            transferable=transfer,
            aisle=_optional_text(locations, row, cols.aisle),
            shelf=_optional_text(locations, row, cols.shelf),
        )
    return out


def _capacity_for(
    quantity: float, volume: Optional[float], setting: Optional[CapacitySetting]
) -> tuple[str, float, float]:
    if setting is not None:
        if volume and volume > 0 and setting.cu_in and setting.cu_in > 0:
            return CAP_VOLUMETRIC, float(setting.cu_in), quantity * volume
        if setting.units and setting.units > 0:
            return CAP_COUNT, float(setting.units), float(quantity)
    return CAP_UNKNOWN, 0.0, 0.0


def build_bins(
    locations: Table,
    assignments: Table,
    product_info: Table,
    mapping: ColumnMapping,
    capacity_by_type: Dict[str, CapacitySetting],
    options: Optional[PlanOptions] = None,
    skipped: Optional[Counter] = None,
) -> List[Bin]:
    """Join the three tables into one bin per assignment row.

    Rows that cannot be resolved are skipped and tallied in ``skipped`` by
    reason. Bins with no usable capacity are kept in ``unknown`` mode.
    """
    opts = options or PlanOptions()
    if skipped is None:
        skipped = Counter()

    volumes = _sku_volumes(product_info, mapping)
    loc_map = _location_map(locations, mapping)
    cols = mapping.assignments
    headers = assignments.headers

    bins: List[Bin] = []
    for row in assignments.rows:
        sku = clean_string(column(row, headers, cols.sku))
        location = clean_string(column(row, headers, cols.location))
        qty = to_number(column(row, headers, cols.quantity))
        if not sku:
            skipped["missing_sku"] += 1
            continue
        if not location:
            skipped["missing_location"] += 1
            continue
        if qty is None or qty <= 0:
            skipped["bad_quantity"] += 1
            continue
        info = loc_map.get(location)
        if info is None:
            skipped["unknown_location"] += 1
            continue
        if not info.sellable and not opts.include_non_pickable_non_sellable and info.transferable is not True:
            skipped["excluded_location"] += 1
            continue

        quantity = int(qty) if qty.is_integer() else qty
        volume = volumes.get(sku)
        mode, capacity, used = _capacity_for(quantity, volume, capacity_by_type.get(info.location_type))
        bins.append(
            Bin(
                sku=sku,
                location=location,
                quantity=quantity,
                location_type=info.location_type,
                pickable=info.pickable,
                sellable=info.sellable,
                capacity_mode=mode,
                capacity=capacity,
                used=used,
                free=max(capacity - used, 0.0),
                transferable=info.transferable,
                aisle=info.aisle,
                shelf=info.shelf,
                aisle_prefix=aisle_prefix(info.aisle) if info.aisle else None,
                unit_volume=volume if volume and volume > 0 else None,
            )
        )

    if skipped:
        logger.info(f"Built {len(bins)} bins; skipped rows: {dict(skipped)}")
    else:
        logger.info(f"Built {len(bins)} bins from {len(assignments.rows)} assignment rows.")
    return bins


def location_type_counts(locations: Table, ref: Optional[ColumnRef]) -> Dict[str, int]:
    """Distinct location types and how often each appears, sorted by type."""
    counts: Dict[str, int] = {}
    if ref is None:
        return counts
    for row in locations.rows:
        value = clean_string(column(row, locations.headers, ref))
        if value.lower() in TYPE_PLACEHOLDERS:
            continue
        counts[value] = counts.get(value, 0) + 1
    return dict(sorted(counts.items()))
