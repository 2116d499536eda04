from typing import List, Optional

from pydantic import BaseModel, Field

from fc_planner.models.records import (
    CatalogRemark,
    CentralStockRecord,
    PlanningInputs,
    SaleRecord,
    WarehouseStockRecord,
)


class SaleIn(BaseModel):
    channel: str
    sku: str
    quantity: int = Field(0, ge=0)
    warehouse_id: str = ""
    central_sku: str = ""
    style_id: str = ""
    date: Optional[str] = None
    channel_id: Optional[str] = None
    fulfillment_type: Optional[str] = None
    size: Optional[str] = None


class WarehouseStockIn(BaseModel):
    channel: str
    warehouse_id: str
    sku: str
    quantity: int = Field(0, ge=0)
    channel_id: Optional[str] = None


class CentralStockIn(BaseModel):
    central_sku: str
    quantity: int = Field(0, ge=0)


class CatalogRemarkIn(BaseModel):
    style_id: str
    company_remark: str = ""
    category: Optional[str] = None


class PlanningInputRequest(BaseModel):
    sales: List[SaleIn]
    fc_stock: List[WarehouseStockIn] = []
    central_stock: List[CentralStockIn] = []
    remarks: List[CatalogRemarkIn] = []

    def to_inputs(self) -> PlanningInputs:
        return PlanningInputs(
            sales=tuple(SaleRecord(**item.model_dump()) for item in self.sales),
            fc_stock=tuple(WarehouseStockRecord(**item.model_dump()) for item in self.fc_stock),
            central_stock=tuple(
                CentralStockRecord(**item.model_dump()) for item in self.central_stock
            ),
            remarks=tuple(CatalogRemark(**item.model_dump()) for item in self.remarks),
        )
