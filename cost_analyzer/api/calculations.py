"""
Landed cost calculation API endpoints.

Request and response fields keep their PascalCase names verbatim; the
web client checks the response shape against those exact keys.
"""

import logging
from dataclasses import asdict
from decimal import Decimal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from pydantic.alias_generators import to_pascal

from cost_analyzer.calculations import landed_cost

logger = logging.getLogger(__name__)

router = APIRouter()


class PascalModel(BaseModel):
    """Base schema serialized with PascalCase field names."""

    class Config:
        alias_generator = to_pascal
        populate_by_name = True


class CalculateRequest(PascalModel):
    """Calculator inputs. Rates are fractions (0.19 = 19%)."""

    # Required
    unit_count: int
    declared_unit_value_usd: Decimal
    usd_to_cop_rate: Decimal
    sale_price_cop: Decimal

    # Shipment
    freight_cost_usd: Decimal = Decimal("0")
    insurance_rate_percent: Decimal = Decimal("0")
    origin_charges_usd: Decimal = Decimal("0")
    destination_charges_usd: Decimal = Decimal("0")
    customs_broker_usd: Decimal = Decimal("0")

    # Taxes and banking
    duty_rate_percent: Decimal = Decimal("0")
    value_added_tax_rate_percent: Decimal = Decimal("0")
    other_taxes_rate_percent: Decimal = Decimal("0")
    bank_foreign_exchange_spread_percent: Decimal = Decimal("0")
    payment_fee_percent: Decimal = Decimal("0")

    # Sales channel
    commission_percent: Decimal = Decimal("0")
    payment_gateway_percent: Decimal = Decimal("0")
    fulfillment_fee_cop: Decimal = Decimal("0")
    last_mile_cop: Decimal = Decimal("0")
    miscellaneous_admin_cost_cop: Decimal = Decimal("0")

    is_cif_shipment: bool = False

    def to_inputs(self) -> landed_cost.LandedCostInputs:
        """Convert to engine inputs."""
        return landed_cost.LandedCostInputs(**self.model_dump())


class CalculateResponse(PascalModel):
    """Rounded calculation outputs."""

    landed_cost_usd: float
    landed_cost_cop: float
    unit_cost_cop: float
    unit_gross_profit_cop: float
    unit_gross_margin_percent: float
    break_even_price_cop: float


class BreakdownResponse(PascalModel):
    """
    Rounded outputs plus every unrounded pipeline step.

    Steps stay Decimal and serialize as exact strings.
    """

    result: CalculateResponse
    total_declared_value_usd: Decimal
    freight_cost_usd: Decimal
    insurance_cost_usd: Decimal
    cost_insurance_freight_usd: Decimal
    duty_cost_usd: Decimal
    value_added_tax_base_usd: Decimal
    value_added_tax_usd: Decimal
    other_taxes_usd: Decimal
    bank_fee_usd: Decimal
    payment_fee_usd: Decimal
    landed_cost_usd: Decimal
    landed_cost_cop: Decimal
    unit_cost_cop: Decimal
    channel_fees_cop: Decimal
    unit_gross_profit_cop: Decimal
    unit_gross_margin_percent: Decimal
    break_even_price_cop: Decimal


# Values the web form starts with
DEFAULT_REQUEST = CalculateRequest(
    unit_count=500,
    declared_unit_value_usd=Decimal("6"),
    freight_cost_usd=Decimal("1200"),
    insurance_rate_percent=Decimal("0.003"),
    origin_charges_usd=Decimal("0"),
    destination_charges_usd=Decimal("300"),
    customs_broker_usd=Decimal("120"),
    duty_rate_percent=Decimal("0.10"),
    value_added_tax_rate_percent=Decimal("0.19"),
    other_taxes_rate_percent=Decimal("0.00"),
    bank_foreign_exchange_spread_percent=Decimal("0.01"),
    payment_fee_percent=Decimal("0.009"),
    usd_to_cop_rate=Decimal("4000"),
    sale_price_cop=Decimal("69900"),
    commission_percent=Decimal("0.14"),
    payment_gateway_percent=Decimal("0.029"),
    fulfillment_fee_cop=Decimal("1200"),
    last_mile_cop=Decimal("300000"),
    miscellaneous_admin_cost_cop=Decimal("200000"),
    is_cif_shipment=False,
)


def result_to_response(result: landed_cost.LandedCostResult) -> CalculateResponse:
    """Convert engine result to response schema."""
    return CalculateResponse(
        landed_cost_usd=float(result.landed_cost_usd),
        landed_cost_cop=float(result.landed_cost_cop),
        unit_cost_cop=float(result.unit_cost_cop),
        unit_gross_profit_cop=float(result.unit_gross_profit_cop),
        unit_gross_margin_percent=float(result.unit_gross_margin_percent),
        break_even_price_cop=float(result.break_even_price_cop),
    )


def run_calculation(inputs: CalculateRequest) -> landed_cost.LandedCostBreakdown:
    """
    Run the engine, turning calculation errors into HTTP 400.

    Shared by the calculator and the stored scenario endpoints.
    """
    try:
        return landed_cost.calculate_breakdown(inputs.to_inputs())
    except landed_cost.CalculationError as e:
        logger.info(f"Calculation rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))


@router.post("", response_model=CalculateResponse)
async def calculate(inputs: CalculateRequest):
    """Calculate landed cost and unit economics."""
    breakdown = run_calculation(inputs)
    return result_to_response(landed_cost.round_result(breakdown))


@router.post("/breakdown", response_model=BreakdownResponse)
async def calculate_breakdown(inputs: CalculateRequest):
    """Calculate and return every intermediate step of the pipeline."""
    breakdown = run_calculation(inputs)
    steps = asdict(breakdown)

    return BreakdownResponse(
        result=result_to_response(landed_cost.round_result(breakdown)),
        **steps,
    )


@router.get("/defaults", response_model=CalculateRequest)
async def get_defaults():
    """Default calculator inputs for pre-filling a form."""
    return DEFAULT_REQUEST
