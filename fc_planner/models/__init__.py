from fc_planner.models.plan import Fulfillment, PlanRow
from fc_planner.models.records import (
    CatalogRemark,
    CentralStockRecord,
    PlanningInputs,
    SaleRecord,
    WarehouseStockRecord,
)

__all__ = [
    "CatalogRemark",
    "CentralStockRecord",
    "Fulfillment",
    "PlanRow",
    "PlanningInputs",
    "SaleRecord",
    "WarehouseStockRecord",
]
