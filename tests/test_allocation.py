import math
import unittest

from fc_planner.core.errors import EmptyInputError
from fc_planner.models.plan import Fulfillment, PlanRow
from fc_planner.models.records import (
    CatalogRemark,
    CentralStockRecord,
    PlanningInputs,
    SaleRecord,
    WarehouseStockRecord,
)
from fc_planner.services.allocation_service import (
    allocate,
    available_central_stock,
    build_allocated_plan,
    run_planning,
)


def _ship_row(warehouse_id, need, central_sku="UNI_A", channel="Amazon IN"):
    return PlanRow(
        channel=channel,
        fulfillment=Fulfillment.CHANNEL,
        style_id="STYLE_A",
        sku=f"SKU_{warehouse_id}",
        central_sku=central_sku,
        warehouse_id=warehouse_id,
        shipment_need=need,
        action="SHIP",
    )


def _sale(channel, sku, quantity, warehouse_id, style_id, central_sku):
    return SaleRecord(
        channel=channel,
        sku=sku,
        quantity=quantity,
        warehouse_id=warehouse_id,
        central_sku=central_sku,
        style_id=style_id,
    )


def _sample_inputs():
    return PlanningInputs(
        sales=(
            _sale("Amazon IN", "SKU_A_1", 50, "BLR8", "STYLE_A", "UNI_A"),
            _sale("Amazon IN", "SKU_A_1", 40, "BLR8", "STYLE_A", "UNI_A"),
            _sale("Flipkart", "SKU_B_1", 30, "MALUR", "STYLE_B", "UNI_B"),
            _sale("Amazon IN", "SKU_A_1", 150, "SELF_WH", "STYLE_A", "UNI_A"),
            _sale("Myntra", "SKU_C_1", 20, "Bangalore", "STYLE_C", "UNI_C"),
            _sale("Flipkart", "SKU_D_1", 60, "KOLKATA", "STYLE_D", "UNI_D"),
            _sale("Myntra", "SKU_D_2", 120, "Mumbai", "STYLE_D", "UNI_D"),
        ),
        fc_stock=(
            WarehouseStockRecord(channel="Amazon IN", warehouse_id="BLR8", sku="SKU_A_1", quantity=10),
            WarehouseStockRecord(channel="Flipkart", warehouse_id="MALUR", sku="SKU_B_1", quantity=500),
            WarehouseStockRecord(channel="Myntra", warehouse_id="Bangalore", sku="SKU_C_1", quantity=50),
            WarehouseStockRecord(channel="Flipkart", warehouse_id="KOLKATA", sku="SKU_D_1", quantity=0),
            WarehouseStockRecord(channel="Myntra", warehouse_id="Mumbai", sku="SKU_D_2", quantity=20),
        ),
        central_stock=(
            CentralStockRecord(central_sku="UNI_A", quantity=1000),
            CentralStockRecord(central_sku="UNI_B", quantity=200),
            CentralStockRecord(central_sku="UNI_C", quantity=500),
            CentralStockRecord(central_sku="UNI_D", quantity=100),
        ),
        remarks=(
            CatalogRemark(style_id="STYLE_C", company_remark="Closed", category="DRESS"),
            CatalogRemark(style_id="STYLE_A", company_remark="Active", category="TOP"),
            CatalogRemark(style_id="STYLE_B", company_remark="Active", category="TOP"),
        ),
    )


class AllocateTest(unittest.TestCase):
    def test_scarce_pool_is_split_by_demand_share(self):
        rows = [_ship_row("BLR8", 125), _ship_row("HYD3", 75)]
        central = [CentralStockRecord(central_sku="UNI_A", quantity=300)]

        allocate(rows, central)

        self.assertEqual([row.allocated_qty for row in rows], [75, 45])
        self.assertEqual(sum(row.allocated_qty for row in rows), 120)
        self.assertEqual(rows[0].remarks, ["Capped by Stock (Need: 125)"])
        self.assertEqual(rows[1].remarks, ["Capped by Stock (Need: 75)"])

    def test_sufficient_pool_allocates_full_need(self):
        rows = [_ship_row("BLR8", 125), _ship_row("HYD3", 75)]
        central = [CentralStockRecord(central_sku="UNI_A", quantity=500)]

        allocate(rows, central)

        self.assertEqual([row.allocated_qty for row in rows], [125, 75])
        self.assertEqual([row.remarks for row in rows], [[], []])

    def test_share_flooring_to_zero_is_marked_out_of_stock(self):
        rows = [_ship_row("BLR8", 1), _ship_row("HYD3", 199)]
        central = [CentralStockRecord(central_sku="UNI_A", quantity=250)]

        allocate(rows, central)

        self.assertEqual([row.allocated_qty for row in rows], [0, 99])
        self.assertEqual(rows[0].remarks, ["Capped by Stock (Need: 1)", "Out of Stock"])

    def test_central_sku_without_stock_gets_nothing(self):
        rows = [_ship_row("BLR8", 10, central_sku="UNKNOWN")]

        allocate(rows, [CentralStockRecord(central_sku="UNI_A", quantity=1000)])

        self.assertEqual(rows[0].allocated_qty, 0)
        self.assertIn("Out of Stock", rows[0].remarks)

    def test_non_ship_rows_never_allocate_or_add_demand(self):
        recall = _ship_row("MALUR", 0)
        recall.action = "RECALL"
        recall.recall_qty = 40
        ship = _ship_row("BLR8", 40)
        central = [CentralStockRecord(central_sku="UNI_A", quantity=100)]

        allocate([recall, ship], central)

        self.assertEqual(recall.allocated_qty, 0)
        self.assertEqual(ship.allocated_qty, 40)

    def test_available_stock_is_capped_and_floored(self):
        central = [
            CentralStockRecord(central_sku="UNI_A", quantity=300),
            CentralStockRecord(central_sku="UNI_B", quantity=7),
        ]
        self.assertEqual(available_central_stock(central), {"UNI_A": 120, "UNI_B": 2})


class PlanningRunTest(unittest.TestCase):
    def test_sample_run(self):
        rows = run_planning(_sample_inputs())
        by_id = {row.id: row for row in rows}

        amazon = by_id["Amazon IN_BLR8_SKU_A_1"]
        self.assertEqual((amazon.action, amazon.shipment_need, amazon.allocated_qty), ("SHIP", 125, 125))

        flipkart = by_id["Flipkart_MALUR_SKU_B_1"]
        self.assertEqual((flipkart.action, flipkart.recall_qty, flipkart.allocated_qty), ("RECALL", 440, 0))

        myntra = by_id["Myntra_Bangalore_SKU_C_1"]
        self.assertEqual((myntra.action, myntra.recall_qty), ("RECALL", 50))

        seller = by_id["SELLER_Amazon IN_BLR8_SKU_A_1"]
        self.assertEqual((seller.shipment_need, seller.allocated_qty), (225, 225))

        # UNI_D: needs 90 + 160 against floor(100 * 0.4) = 40.
        kolkata = by_id["Flipkart_KOLKATA_SKU_D_1"]
        mumbai = by_id["Myntra_Mumbai_SKU_D_2"]
        self.assertEqual((kolkata.shipment_need, mumbai.shipment_need), (90, 160))
        self.assertEqual((kolkata.allocated_qty, mumbai.allocated_qty), (14, 25))
        self.assertIn("Capped by Stock (Need: 90)", kolkata.remarks)

    def test_rows_sorted_by_run_rate_descending(self):
        rows = run_planning(_sample_inputs())
        rates = [row.run_rate for row in rows]
        self.assertEqual(rates, sorted(rates, reverse=True))
        self.assertEqual(rows[0].id, "SELLER_Amazon IN_BLR8_SKU_A_1")

    def test_ids_are_unique(self):
        rows = run_planning(_sample_inputs())
        self.assertEqual(len({row.id for row in rows}), len(rows))

    def test_allocation_invariants(self):
        inputs = _sample_inputs()
        rows = run_planning(inputs)
        available = {
            row.central_sku: math.floor(row.quantity * 0.40) for row in inputs.central_stock
        }

        allocated_by_sku = {}
        for row in rows:
            with self.subTest(row=row.id):
                self.assertLessEqual(row.allocated_qty, row.shipment_need)
                if row.action != "SHIP":
                    self.assertEqual(row.allocated_qty, 0)
                if row.action == "NONE":
                    self.assertEqual((row.shipment_need, row.recall_qty), (0, 0))
                else:
                    self.assertEqual(sum(1 for qty in (row.shipment_need, row.recall_qty) if qty), 1)
            if row.action == "SHIP":
                allocated_by_sku[row.central_sku] = (
                    allocated_by_sku.get(row.central_sku, 0) + row.allocated_qty
                )

        for central_sku, allocated in allocated_by_sku.items():
            self.assertLessEqual(allocated, available.get(central_sku, 0))

    def test_repeated_runs_are_identical(self):
        first = run_planning(_sample_inputs())
        second = run_planning(_sample_inputs())

        def snapshot(rows):
            return [
                (row.id, row.action, row.shipment_need, row.allocated_qty, row.recall_qty, row.remark_text)
                for row in rows
            ]

        self.assertEqual(snapshot(first), snapshot(second))

    def test_empty_sales_halts_the_run(self):
        inputs = PlanningInputs(
            fc_stock=(WarehouseStockRecord(channel="Amazon IN", warehouse_id="BLR8", sku="SKU", quantity=1),)
        )
        with self.assertRaises(EmptyInputError) as ctx:
            run_planning(inputs)
        self.assertIn("sales", str(ctx.exception))

    def test_build_allocated_plan_limits_channels(self):
        rows = build_allocated_plan(_sample_inputs(), channels=("Flipkart",))
        channels = {row.plan_channel for row in rows}
        self.assertEqual(channels, {"Flipkart", "SELLER"})


if __name__ == "__main__":
    unittest.main()
