from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

CAP_VOLUMETRIC = "volumetric"  # cubic inches
CAP_COUNT = "count_based"  # units
CAP_UNKNOWN = "unknown"

REASON_CONDENSE = "condense_overstock"
REASON_CONSOLIDATE = "consolidate_pick"


@dataclass
class Table:
    headers: List[str]
    rows: List[Any]  # sequences or mappings


@dataclass
class ColumnRef:
    index: Optional[int] = None
    key: Optional[str] = None


@dataclass
class LocationColumns:
    name: ColumnRef
    type: ColumnRef
    pickable: ColumnRef
    sellable: ColumnRef
    transfer: Optional[ColumnRef] = None
    aisle: Optional[ColumnRef] = None
    shelf: Optional[ColumnRef] = None


@dataclass
class AssignmentColumns:
    sku: ColumnRef
    location: ColumnRef
    quantity: ColumnRef


@dataclass
class ProductInfoColumns:
    sku: ColumnRef
    length: Optional[ColumnRef] = None
    width: Optional[ColumnRef] = None
    height: Optional[ColumnRef] = None


@dataclass
class ColumnMapping:
    locations: LocationColumns
    assignments: AssignmentColumns
    product_info: ProductInfoColumns


@dataclass
class CapacitySetting:
    cu_in: Optional[float] = None
    units: Optional[float] = None


@dataclass
class PlanOptions:
    headroom_fraction: float = 0.90
    preferred_pick_aisles: Tuple[str, ...] = ("A01", "A02", "A03")
    preferred_pick_shelves: Tuple[str, ...] = ("B", "C", "D")
    include_non_pickable_non_sellable: bool = False
    allow_mixed_sku_destination: bool = False  # accepted, not used by the planner


@dataclass
class Bin:
    sku: str
    location: str
    quantity: float
    location_type: str
    pickable: bool
    sellable: bool
    capacity_mode: str
    capacity: float
    used: float
    free: float
    transferable: Optional[bool] = None
    aisle: Optional[str] = None
    shelf: Optional[str] = None
    aisle_prefix: Optional[str] = None
    unit_volume: Optional[float] = None

    @property
    def plannable(self) -> bool:
        return self.sellable or self.transferable is True


@dataclass
class Move:
    sku: str
    from_location: str
    to_location: str
    quantity: float
    reason: str
    estimated_fill_after: float


@dataclass
class Kpis:
    bins_freed: int
    opportunities: int
    total_sellable: int
    wasted_volumetric: Optional[float] = None
    wasted_count_based: Optional[float] = None


@dataclass
class MixedLocation:
    location: str
    skus: List[str]
    total_quantity: float


@dataclass
class TypeUtilization:
    location_type: str
    capacity_mode: str
    bins: int
    total_capacity: float
    total_used: float
    wasted: float
    average_utilization: float  # percent


@dataclass
class Audit:
    unknown_capacity_bins: int
    capacity_mode_counts: Dict[str, int]
    reason_counts: Dict[str, int]
    note: str


@dataclass
class PlanResult:
    moves: List[Move]
    bins_after: List[Bin]
    kpis: Kpis
    mixed_locations: List[MixedLocation]
    audit: Audit
    utilization_by_type: List[TypeUtilization] = field(default_factory=list)


@dataclass
class DataAudit:
    file_counts: Dict[str, int]
    type_counts: Dict[str, int]
    unknown_capacity_bins: int
    mixed_locations: int
    skipped_rows: Dict[str, int] = field(default_factory=dict)


@dataclass
class AnalysisResponse:
    result: PlanResult
    csv_text: str
    data_audit: DataAudit
