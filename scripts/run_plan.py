import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from openpyxl.utils.exceptions import InvalidFileException

from fc_planner.core.constants import ACTION_RECALL, ACTION_SHIP
from fc_planner.core.logging import setup_logging
from fc_planner.schemas.plan import PlanListResponse, PlanRowRead, PlanSummaryResponse
from fc_planner.services.allocation_service import run_planning
from fc_planner.services.ingestion_service import configured_sources, load_planning_inputs
from fc_planner.services.summary_service import filter_plan_rows, plan_summary


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Compute FC shipment and recall plans from sales and stock inputs."
    )
    parser.add_argument("--workbook", help="Path to an .xlsx workbook holding all four sheets.")
    parser.add_argument("--sales", help="Sales CSV path or URL.")
    parser.add_argument("--fc-stock", help="FC stock CSV path or URL.")
    parser.add_argument("--central-stock", help="Central (Uniware) stock CSV path or URL.")
    parser.add_argument("--remarks", help="Company remarks CSV path or URL.")
    parser.add_argument("--channel", help="Only show rows for this sales channel.")
    parser.add_argument("--direct", action="store_true", help="Only show direct-fulfillment rows.")
    parser.add_argument("--summary", action="store_true", help="Print FC totals and top lists.")
    parser.add_argument("--output", help="Write the filtered plan rows to this JSON file.")
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this run, e.g. DEBUG.")
    return parser.parse_args(argv)


def _explicit_sources(args):
    sources = {
        "sales": args.sales,
        "fc_stock": args.fc_stock,
        "central_stock": args.central_stock,
        "remarks": args.remarks,
    }
    if not any(sources.values()):
        return None
    return configured_sources(overrides=sources)


def _print_summary(summary):
    print("FC totals:")
    warehouses = summary.warehouses
    for totals in [*warehouses.results, warehouses.grand_total]:
        print(
            f"  {totals.warehouse_id}: stock {totals.total_stock} | sale {totals.total_sale} | "
            f"drr {totals.run_rate:.1f} | need {totals.shipment_need} | "
            f"allocated {totals.allocated_qty} | recall {totals.recall_qty}"
        )
    print("Top SKUs:")
    for entry in summary.top_skus:
        print(f"  {entry.sku}: sale {entry.total_sale} | drr {entry.run_rate:.1f}")
    print("Top styles:")
    for entry in summary.top_styles:
        print(f"  {entry.style_id}: sale {entry.total_sale} | drr {entry.run_rate:.1f}")


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level)
    try:
        inputs = load_planning_inputs(sources=_explicit_sources(args), workbook=args.workbook)
        rows = run_planning(inputs)
    except (OSError, ValueError, RuntimeError, InvalidFileException) as exc:
        raise SystemExit(f"Planning failed: {exc}") from exc

    if args.channel or args.direct:
        rows = filter_plan_rows(rows, channel=args.channel, direct=args.direct)

    shipping = sum(1 for row in rows if row.action == ACTION_SHIP)
    recalling = sum(1 for row in rows if row.action == ACTION_RECALL)
    print(f"{len(rows)} plan rows: {shipping} ship, {recalling} recall")

    if args.summary:
        _print_summary(PlanSummaryResponse.model_validate(plan_summary(rows)))

    if args.output:
        payload = PlanListResponse(
            count=len(rows),
            results=[PlanRowRead.model_validate(row) for row in rows],
        )
        output_path = Path(args.output)
        output_path.write_text(payload.model_dump_json(indent=2))
        print(f"Plan written to {output_path}")


if __name__ == "__main__":
    main()
