from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class SaleRecord:
    channel: str
    sku: str
    quantity: int
    warehouse_id: str
    central_sku: str
    style_id: str
    date: Optional[str] = None
    channel_id: Optional[str] = None
    fulfillment_type: Optional[str] = None
    size: Optional[str] = None


@dataclass(frozen=True)
class WarehouseStockRecord:
    channel: str
    warehouse_id: str
    sku: str
    quantity: int
    channel_id: Optional[str] = None


@dataclass(frozen=True)
class CentralStockRecord:
    central_sku: str
    quantity: int


@dataclass(frozen=True)
class CatalogRemark:
    style_id: str
    company_remark: str
    category: Optional[str] = None


@dataclass(frozen=True)
class PlanningInputs:
    sales: tuple[SaleRecord, ...] = field(default_factory=tuple)
    fc_stock: tuple[WarehouseStockRecord, ...] = field(default_factory=tuple)
    central_stock: tuple[CentralStockRecord, ...] = field(default_factory=tuple)
    remarks: tuple[CatalogRemark, ...] = field(default_factory=tuple)
