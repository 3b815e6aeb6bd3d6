"""Debriefs API: trigger a run and inspect the last report."""

from datetime import date

from fastapi import APIRouter, HTTPException, Request

from debrief.core.deps import OrchestratorDep
from debrief.models.report import RunReport, RunRequest
from debrief.models.task import ISO_DATE_PATTERN

router = APIRouter(prefix="/debriefs", tags=["debriefs"])


def _parse_run_date(raw: str | None) -> date | None:
    if not raw:
        return None
    try:
        if not ISO_DATE_PATTERN.fullmatch(raw):
            raise ValueError(raw)
        return date.fromisoformat(raw)
    except ValueError:
        raise HTTPException(
            status_code=422, detail="Invalid date format; use YYYY-MM-DD"
        ) from None


@router.post("/run", response_model=RunReport)
async def run_debrief(
    body: RunRequest,
    request: Request,
    orchestrator: OrchestratorDep,
) -> RunReport:
    """Run the debrief for every user now and return the run report."""
    report = await orchestrator.run(_parse_run_date(body.date), dry_run=body.dry_run)
    request.app.state.last_report = report
    return report


@router.get("/last", response_model=RunReport)
def last_report(request: Request) -> RunReport:
    """Most recent run report produced by this process."""
    report = getattr(request.app.state, "last_report", None)
    if report is None:
        raise HTTPException(status_code=404, detail="No debrief has run yet")
    return report
