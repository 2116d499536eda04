from fc_planner.services.allocation_service import allocate, build_allocated_plan, run_planning
from fc_planner.services.ingestion_service import load_planning_inputs
from fc_planner.services.summary_service import filter_plan_rows, plan_summary

__all__ = [
    "allocate",
    "build_allocated_plan",
    "filter_plan_rows",
    "load_planning_inputs",
    "plan_summary",
    "run_planning",
]
