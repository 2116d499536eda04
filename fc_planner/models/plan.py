from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from fc_planner.core.constants import ACTION_NONE, SELLER_TAG


class Fulfillment(str, Enum):
    CHANNEL = "CHANNEL"
    DIRECT = "DIRECT"


@dataclass
class PlanRow:
    """One ship/recall decision for a (channel, FC, SKU) combination.

    ``channel`` is always the sales channel the demand came from. Direct
    rows are told apart by ``fulfillment`` alone and are displayed under the
    ``SELLER`` tag.
    """

    channel: str
    fulfillment: Fulfillment
    style_id: str
    sku: str
    central_sku: str
    warehouse_id: str
    sales_30d: int = 0
    run_rate: float = 0.0
    stock: int = 0
    stock_cover: float = 0.0
    shipment_need: int = 0
    allocated_qty: int = 0
    recall_qty: int = 0
    action: str = ACTION_NONE
    remarks: list[str] = field(default_factory=list)

    @property
    def is_direct(self) -> bool:
        return self.fulfillment is Fulfillment.DIRECT

    @property
    def plan_channel(self) -> str:
        return SELLER_TAG if self.is_direct else self.channel

    @property
    def id(self) -> str:
        if self.is_direct:
            return f"{SELLER_TAG}_{self.channel}_{self.warehouse_id}_{self.sku}"
        return f"{self.channel}_{self.warehouse_id}_{self.sku}"

    @property
    def remark_text(self) -> str:
        return " | ".join(self.remarks)

    def add_remark(self, text: str) -> None:
        if text:
            self.remarks.append(text)
