from typing import List

from pydantic import BaseModel, ConfigDict, Field


class PlanRowRead(BaseModel):
    id: str
    channel: str = Field(validation_alias="plan_channel")
    source_channel: str = Field(validation_alias="channel")
    is_direct: bool
    style_id: str
    sku: str
    central_sku: str
    warehouse_id: str
    sales_30d: int
    run_rate: float
    stock: int
    stock_cover: float
    shipment_need: int
    allocated_qty: int
    recall_qty: int
    action: str
    remarks: str = Field(validation_alias="remark_text")

    model_config = ConfigDict(from_attributes=True)


class PlanListResponse(BaseModel):
    count: int
    results: List[PlanRowRead]


class WarehouseTotals(BaseModel):
    warehouse_id: str
    total_stock: int
    total_sale: int
    run_rate: float
    shipment_need: int
    allocated_qty: int
    recall_qty: int
    stock_cover: int


class WarehouseSummary(BaseModel):
    results: List[WarehouseTotals]
    grand_total: WarehouseTotals


class TopSku(BaseModel):
    sku: str
    total_sale: int
    run_rate: float


class TopStyle(BaseModel):
    style_id: str
    total_sale: int
    run_rate: float


class PlanSummaryResponse(BaseModel):
    warehouses: WarehouseSummary
    top_skus: List[TopSku]
    top_styles: List[TopStyle]
