from fastapi import APIRouter, HTTPException, Query
from openpyxl.utils.exceptions import InvalidFileException

from fc_planner.core.errors import SourceFetchError, SourceFormatError
from fc_planner.schemas.inputs import PlanningInputRequest
from fc_planner.schemas.plan import PlanListResponse, PlanRowRead, PlanSummaryResponse
from fc_planner.services.allocation_service import run_planning
from fc_planner.services.ingestion_service import load_planning_inputs
from fc_planner.services.summary_service import filter_plan_rows, plan_summary

router = APIRouter(prefix="/plans", tags=["Plans"])


def _planned_rows(inputs=None):
    try:
        if inputs is None:
            inputs = load_planning_inputs()
        return run_planning(inputs)
    except (SourceFetchError, SourceFormatError) as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except (OSError, ValueError, InvalidFileException) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _plan_list(rows):
    return PlanListResponse(
        count=len(rows),
        results=[PlanRowRead.model_validate(row) for row in rows],
    )


@router.get("", response_model=PlanListResponse)
def list_plans(
    channel: str | None = Query(None, description="Sales channel, e.g. 'Amazon IN'; 'SELLER' selects direct rows"),
    direct: bool = Query(False, description="Only direct-fulfillment (seller) rows"),
):
    rows = _planned_rows()
    if channel is not None or direct:
        rows = filter_plan_rows(rows, channel=channel, direct=direct)
    return _plan_list(rows)


@router.get("/summary", response_model=PlanSummaryResponse)
def plans_summary(
    channel: str | None = Query(None, description="Sales channel, e.g. 'Amazon IN'; 'SELLER' selects direct rows"),
    direct: bool = Query(False, description="Summarise direct-fulfillment rows"),
):
    rows = filter_plan_rows(_planned_rows(), channel=channel, direct=direct)
    return plan_summary(rows)


@router.post("/compute", response_model=PlanListResponse)
def compute_plans(payload: PlanningInputRequest):
    return _plan_list(_planned_rows(payload.to_inputs()))
