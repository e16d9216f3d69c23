"""
Scenario management API endpoints.
"""

import logging
from datetime import datetime
from typing import Optional, List

from fastapi import APIRouter, HTTPException, Depends, Response, status
from pydantic import Field
from sqlalchemy.orm import Session

from cost_analyzer.api.calculations import (
    PascalModel,
    CalculateRequest,
    CalculateResponse,
    result_to_response,
    run_calculation,
)
from cost_analyzer.auth.dependencies import Principal, get_current_principal, require_admin
from cost_analyzer.calculations import landed_cost
from cost_analyzer.db.database import get_db
from cost_analyzer.db.models import Scenario

logger = logging.getLogger(__name__)

router = APIRouter()


class ScenarioCreate(PascalModel):
    """Schema for creating a scenario."""

    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    inputs: Optional[CalculateRequest] = None


class ScenarioResponse(PascalModel):
    """Schema for scenario response."""

    id: str
    name: str
    description: Optional[str] = None
    inputs: Optional[CalculateRequest] = None
    created_utc: datetime
    created_by: Optional[str] = None


class ScenarioListResponse(PascalModel):
    """Response for listing scenarios."""

    scenarios: List[ScenarioResponse]
    total: int


def scenario_to_response(scenario: Scenario) -> ScenarioResponse:
    """Convert Scenario model to response schema."""
    return ScenarioResponse(
        id=scenario.id,
        name=scenario.name,
        description=scenario.description,
        inputs=(
            CalculateRequest.model_validate(scenario.inputs)
            if scenario.inputs
            else None
        ),
        created_utc=scenario.created_at,
        created_by=scenario.created_by,
    )


def get_scenario_or_404(db: Session, scenario_id: str) -> Scenario:
    scenario = (
        db.query(Scenario)
        .filter(Scenario.id == scenario_id, Scenario.is_deleted == False)
        .first()
    )

    if not scenario:
        raise HTTPException(status_code=404, detail="Scenario not found")

    return scenario


@router.get("", response_model=ScenarioListResponse)
async def list_scenarios(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """List scenarios, newest first."""
    query = db.query(Scenario).filter(Scenario.is_deleted == False)

    total = query.count()
    scenarios = (
        query.order_by(Scenario.created_at.desc()).offset(skip).limit(limit).all()
    )

    return ScenarioListResponse(
        scenarios=[scenario_to_response(s) for s in scenarios],
        total=total,
    )


@router.post("", response_model=ScenarioResponse, status_code=201)
async def create_scenario(
    scenario_data: ScenarioCreate,
    response: Response,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    """Create a new scenario. Admin only."""
    db_scenario = Scenario(
        name=scenario_data.name,
        description=scenario_data.description,
        inputs=(
            scenario_data.inputs.model_dump(mode="json", by_alias=True)
            if scenario_data.inputs
            else None
        ),
        created_by=principal.subject,
    )

    db.add(db_scenario)
    db.commit()
    db.refresh(db_scenario)

    logger.info(f"Scenario {db_scenario.id} created by {principal.subject}")
    response.headers["Location"] = f"/api/scenarios/{db_scenario.id}"

    return scenario_to_response(db_scenario)


@router.get("/{scenario_id}", response_model=ScenarioResponse)
async def get_scenario(
    scenario_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Get a scenario by ID."""
    return scenario_to_response(get_scenario_or_404(db, scenario_id))


@router.post("/{scenario_id}/calculate", response_model=CalculateResponse)
async def calculate_scenario(
    scenario_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Run the calculator on a scenario's stored inputs."""
    scenario = get_scenario_or_404(db, scenario_id)

    if not scenario.inputs:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Scenario has no stored inputs",
        )

    inputs = CalculateRequest.model_validate(scenario.inputs)
    breakdown = run_calculation(inputs)
    return result_to_response(landed_cost.round_result(breakdown))


@router.delete("/{scenario_id}", status_code=204)
async def delete_scenario(
    scenario_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    """Soft-delete a scenario. Admin only."""
    scenario = get_scenario_or_404(db, scenario_id)

    scenario.is_deleted = True
    scenario.updated_by = principal.subject
    db.commit()

    logger.info(f"Scenario {scenario_id} deleted by {principal.subject}")
    return Response(status_code=204)
