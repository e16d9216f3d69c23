"""
Landed Cost Calculations

Turns shipment costs, import taxes and marketplace fees into landed cost
and per-unit economics. All arithmetic runs on Decimal and rounding is
applied only to the final outputs.
"""

from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Union

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

USD_CENTS = Decimal("0.01")
WHOLE_UNITS = Decimal("1")
PERCENT_PLACES = Decimal("0.01")


class CalculationError(ValueError):
    """Base class for calculation failures."""


class InvalidInputError(CalculationError):
    """Raised when inputs violate a precondition of the calculation."""


class SingularBreakEvenError(CalculationError):
    """Raised when channel fees consume the whole sale price."""


@dataclass(frozen=True)
class LandedCostInputs:
    """Shipment, tax and sales-channel inputs for one calculation.

    Rates are fractions (0.19 = 19%).
    """

    unit_count: int
    declared_unit_value_usd: Number
    usd_to_cop_rate: Number
    sale_price_cop: Number

    # Shipment
    freight_cost_usd: Number = ZERO
    insurance_rate_percent: Number = ZERO
    origin_charges_usd: Number = ZERO
    destination_charges_usd: Number = ZERO
    customs_broker_usd: Number = ZERO

    # Taxes and banking
    duty_rate_percent: Number = ZERO
    value_added_tax_rate_percent: Number = ZERO
    other_taxes_rate_percent: Number = ZERO
    bank_foreign_exchange_spread_percent: Number = ZERO
    payment_fee_percent: Number = ZERO

    # Sales channel
    commission_percent: Number = ZERO
    payment_gateway_percent: Number = ZERO
    fulfillment_fee_cop: Number = ZERO
    last_mile_cop: Number = ZERO
    miscellaneous_admin_cost_cop: Number = ZERO

    is_cif_shipment: bool = False


@dataclass(frozen=True)
class LandedCostBreakdown:
    """Unrounded value of every pipeline step."""

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


@dataclass(frozen=True)
class LandedCostResult:
    """Rounded outputs of a landed cost calculation."""

    landed_cost_usd: Decimal
    landed_cost_cop: Decimal
    unit_cost_cop: Decimal
    unit_gross_profit_cop: Decimal
    unit_gross_margin_percent: Decimal
    break_even_price_cop: Decimal


def to_decimal(value: Number) -> Decimal:
    """
    Convert a number to Decimal without binary float artifacts.

    Floats go through their shortest repr, so 0.003 becomes Decimal("0.003").
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def _validate(inputs: LandedCostInputs) -> None:
    unit_count = inputs.unit_count
    if isinstance(unit_count, bool) or not isinstance(unit_count, (int, Decimal, float)):
        raise InvalidInputError("unit_count must be a whole number")
    if not to_decimal(unit_count).is_finite():
        raise InvalidInputError("unit_count must be a finite number")
    if int(unit_count) != unit_count:
        raise InvalidInputError("unit_count must be a whole number")
    if unit_count <= 0:
        raise InvalidInputError("unit_count must be greater than zero")

    for field in fields(inputs):
        if field.name in ("unit_count", "is_cif_shipment"):
            continue
        try:
            value = to_decimal(getattr(inputs, field.name))
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidInputError(f"{field.name} must be a number")
        if not value.is_finite():
            raise InvalidInputError(f"{field.name} must be a finite number")
        if field.name == "usd_to_cop_rate" and value <= ZERO:
            raise InvalidInputError("usd_to_cop_rate must be greater than zero")
        if value < ZERO:
            raise InvalidInputError(f"{field.name} must not be negative")

    channel_rate = to_decimal(inputs.commission_percent) + to_decimal(
        inputs.payment_gateway_percent
    )
    if channel_rate >= ONE:
        raise SingularBreakEvenError(
            "commission_percent + payment_gateway_percent must be below 1; "
            "break-even price is undefined"
        )


def calculate_breakdown(inputs: LandedCostInputs) -> LandedCostBreakdown:
    """
    Run the landed cost pipeline and return every intermediate value.

    The order of the steps is fixed; nothing is rounded here.

    Raises:
        InvalidInputError: unit count or exchange rate not positive, or a
            negative amount/rate
        SingularBreakEvenError: commission plus gateway rate of 1 or more
    """
    _validate(inputs)

    unit_count = Decimal(int(inputs.unit_count))
    declared_unit_value_usd = to_decimal(inputs.declared_unit_value_usd)
    destination_charges_usd = to_decimal(inputs.destination_charges_usd)
    sale_price_cop = to_decimal(inputs.sale_price_cop)
    fulfillment_fee_cop = to_decimal(inputs.fulfillment_fee_cop)
    commission_percent = to_decimal(inputs.commission_percent)
    payment_gateway_percent = to_decimal(inputs.payment_gateway_percent)

    total_declared_value_usd = declared_unit_value_usd * unit_count

    # CIF declared values already carry freight and insurance
    if inputs.is_cif_shipment:
        freight_cost_usd = ZERO
        insurance_cost_usd = ZERO
    else:
        freight_cost_usd = to_decimal(inputs.freight_cost_usd)
        insurance_cost_usd = total_declared_value_usd * to_decimal(
            inputs.insurance_rate_percent
        )

    cost_insurance_freight_usd = (
        total_declared_value_usd + freight_cost_usd + insurance_cost_usd
    )

    duty_cost_usd = cost_insurance_freight_usd * to_decimal(inputs.duty_rate_percent)
    value_added_tax_base_usd = (
        cost_insurance_freight_usd + duty_cost_usd + destination_charges_usd
    )
    value_added_tax_usd = value_added_tax_base_usd * to_decimal(
        inputs.value_added_tax_rate_percent
    )
    other_taxes_usd = cost_insurance_freight_usd * to_decimal(
        inputs.other_taxes_rate_percent
    )

    bank_fee_usd = total_declared_value_usd * to_decimal(
        inputs.bank_foreign_exchange_spread_percent
    )
    payment_fee_usd = total_declared_value_usd * to_decimal(inputs.payment_fee_percent)

    landed_cost_usd = (
        total_declared_value_usd
        + freight_cost_usd
        + insurance_cost_usd
        + duty_cost_usd
        + value_added_tax_usd
        + other_taxes_usd
        + to_decimal(inputs.origin_charges_usd)
        + destination_charges_usd
        + to_decimal(inputs.customs_broker_usd)
        + bank_fee_usd
        + payment_fee_usd
    )

    landed_cost_cop = (
        landed_cost_usd * to_decimal(inputs.usd_to_cop_rate)
        + to_decimal(inputs.last_mile_cop)
        + to_decimal(inputs.miscellaneous_admin_cost_cop)
    )
    unit_cost_cop = landed_cost_cop / unit_count

    channel_fees_cop = (
        sale_price_cop * (commission_percent + payment_gateway_percent)
        + fulfillment_fee_cop
    )
    unit_gross_profit_cop = sale_price_cop - channel_fees_cop - unit_cost_cop

    # Zero sale price means "not priced yet", not an error
    if sale_price_cop == ZERO:
        unit_gross_margin_percent = ZERO
    else:
        unit_gross_margin_percent = unit_gross_profit_cop / sale_price_cop * HUNDRED

    break_even_price_cop = (unit_cost_cop + fulfillment_fee_cop) / (
        ONE - commission_percent - payment_gateway_percent
    )

    return LandedCostBreakdown(
        total_declared_value_usd=total_declared_value_usd,
        freight_cost_usd=freight_cost_usd,
        insurance_cost_usd=insurance_cost_usd,
        cost_insurance_freight_usd=cost_insurance_freight_usd,
        duty_cost_usd=duty_cost_usd,
        value_added_tax_base_usd=value_added_tax_base_usd,
        value_added_tax_usd=value_added_tax_usd,
        other_taxes_usd=other_taxes_usd,
        bank_fee_usd=bank_fee_usd,
        payment_fee_usd=payment_fee_usd,
        landed_cost_usd=landed_cost_usd,
        landed_cost_cop=landed_cost_cop,
        unit_cost_cop=unit_cost_cop,
        channel_fees_cop=channel_fees_cop,
        unit_gross_profit_cop=unit_gross_profit_cop,
        unit_gross_margin_percent=unit_gross_margin_percent,
        break_even_price_cop=break_even_price_cop,
    )


def round_result(breakdown: LandedCostBreakdown) -> LandedCostResult:
    """Round a breakdown to display precision (half to even)."""

    def q(value: Decimal, places: Decimal) -> Decimal:
        return value.quantize(places, rounding=ROUND_HALF_EVEN)

    return LandedCostResult(
        landed_cost_usd=q(breakdown.landed_cost_usd, USD_CENTS),
        landed_cost_cop=q(breakdown.landed_cost_cop, WHOLE_UNITS),
        unit_cost_cop=q(breakdown.unit_cost_cop, WHOLE_UNITS),
        unit_gross_profit_cop=q(breakdown.unit_gross_profit_cop, WHOLE_UNITS),
        unit_gross_margin_percent=q(breakdown.unit_gross_margin_percent, PERCENT_PLACES),
        break_even_price_cop=q(breakdown.break_even_price_cop, WHOLE_UNITS),
    )


def calculate(inputs: LandedCostInputs) -> LandedCostResult:
    """
    Calculate landed cost and unit economics for a shipment.

    Args:
        inputs: Shipment, tax and sales-channel inputs

    Returns:
        Rounded landed cost in USD and COP, unit cost, unit gross profit,
        gross margin (0-100) and break-even sale price
    """
    return round_result(calculate_breakdown(inputs))
