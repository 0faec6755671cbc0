from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional

from .models import (
    CAP_UNKNOWN,
    CAP_VOLUMETRIC,
    REASON_CONDENSE,
    REASON_CONSOLIDATE,
    Bin,
    Move,
    PlanOptions,
    PlanResult,
)
from .report import assemble

logger = logging.getLogger("SpaceSaver.Planner")

AISLE_BONUS = 100
SHELF_BONUS = 50
_TOLERANCE = 1e-9


def _group_by_sku(bins: List[Bin]) -> Dict[str, List[Bin]]:
    groups: Dict[str, List[Bin]] = {}
    for b in bins:
        groups.setdefault(b.sku, []).append(b)
    return groups


def _added_load(src: Bin, dst: Bin) -> float:
    # count-based source into a volumetric destination is charged at the
    # destination unit volume per unit, not at the source used figure
    if dst.capacity_mode == CAP_VOLUMETRIC:
        if src.capacity_mode != CAP_VOLUMETRIC and dst.unit_volume:
            return src.quantity * dst.unit_volume
        return src.used
    return src.quantity


def _can_accept_all(src: Bin, dst: Bin, headroom: float) -> bool:
    if dst.capacity_mode == CAP_UNKNOWN or src.capacity_mode == CAP_UNKNOWN:
        return False
    return dst.used + _added_load(src, dst) <= dst.capacity * headroom + _TOLERANCE


def _apply_move(src: Bin, dst: Bin, reason: str) -> Move:
    qty = src.quantity
    dst.used += _added_load(src, dst)
    dst.free = max(dst.capacity - dst.used, 0.0)
    dst.quantity += qty
    # emptied
    src.quantity = 0
    src.used = 0.0
    src.free = src.capacity
    fill = min(dst.used / dst.capacity, 1.0) if dst.capacity > 0 else 0.0
    logger.debug(f"{src.sku}: {src.location} -> {dst.location} ({qty}) {reason}")
    return Move(
        sku=src.sku,
        from_location=src.location,
        to_location=dst.location,
        quantity=qty,
        reason=reason,
        estimated_fill_after=round(fill, 4),
    )


def _eligible(bins: List[Bin]) -> List[Bin]:
    return [b for b in bins if b.capacity_mode != CAP_UNKNOWN and b.quantity > 0]


def _condense_overstock(overstock: List[Bin], headroom: float) -> List[Move]:
    moves: List[Move] = []
    candidates = _eligible(overstock)
    while len(candidates) > 1:
        candidates.sort(key=lambda b: (-b.free, b.location))
        target = candidates[0]
        fits = [
            b
            for b in candidates[1:]
            if b.location != target.location and b.quantity > 0 and _can_accept_all(b, target, headroom)
        ]
        if not fits:
            break
        source = min(fits, key=lambda b: b.quantity)
        moves.append(_apply_move(source, target, REASON_CONDENSE))
        candidates = _eligible(overstock)
    return moves


def pick_score(b: Bin, aisles: set, shelves: set) -> float:
    score = b.quantity
    if b.aisle and b.aisle.upper() in aisles:
        score += AISLE_BONUS
    if b.shelf and b.shelf.upper() in shelves:
        score += SHELF_BONUS
    return score


def _consolidate_pick(pick: List[Bin], opts: PlanOptions) -> List[Move]:
    candidates = _eligible(pick)
    if len(candidates) < 2:
        return []
    aisles = {a.upper() for a in opts.preferred_pick_aisles}
    shelves = {s.upper() for s in opts.preferred_pick_shelves}
    candidates.sort(key=lambda b: (-pick_score(b, aisles, shelves), b.location))
    primary = candidates[0]
    moves: List[Move] = []
    for src in candidates[1:]:
        if src.quantity == 0:
            continue
        if _can_accept_all(src, primary, opts.headroom_fraction):
            moves.append(_apply_move(src, primary, REASON_CONSOLIDATE))
    return moves


def plan(bins: List[Bin], options: Optional[PlanOptions] = None) -> PlanResult:
    opts = options or PlanOptions()
    # simulate on private copies
    working = [replace(b) for b in bins]
    plannable_before = [replace(b) for b in bins if b.plannable]
    plannable = [b for b in working if b.plannable]

    moves: List[Move] = []
    for sku, group in _group_by_sku(plannable).items():
        pick = [b for b in group if b.pickable]
        overstock = [b for b in group if not b.pickable]
        moves.extend(_condense_overstock(overstock, opts.headroom_fraction))
        moves.extend(_consolidate_pick(pick, opts))

    result = assemble(
        all_bins=bins,
        before=plannable_before,
        after=plannable,
        snapshot=working,
        moves=moves,
        options=opts,
    )
    logger.info(
        f"Planned {len(moves)} moves across {result.kpis.opportunities} SKUs; "
        f"{result.kpis.bins_freed} bins freed."
    )
    return result
