"""
Tests for the landed cost calculation engine.
"""

import pytest
from dataclasses import replace
from decimal import Decimal

from cost_analyzer.calculations.landed_cost import (
    InvalidInputError,
    LandedCostInputs,
    SingularBreakEvenError,
    CalculationError,
    calculate,
    calculate_breakdown,
    to_decimal,
)


@pytest.fixture
def default_inputs():
    """Default shipment: 500 units at $6, landed in Colombia."""
    return LandedCostInputs(
        unit_count=500,
        declared_unit_value_usd=Decimal("6"),
        freight_cost_usd=Decimal("1200"),
        insurance_rate_percent=Decimal("0.003"),
        origin_charges_usd=Decimal("0"),
        destination_charges_usd=Decimal("300"),
        customs_broker_usd=Decimal("120"),
        duty_rate_percent=Decimal("0.10"),
        value_added_tax_rate_percent=Decimal("0.19"),
        other_taxes_rate_percent=Decimal("0"),
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


class TestDefaultShipment:
    """End-to-end check of the default form values."""

    def test_intermediate_steps(self, default_inputs):
        """Each pipeline step matches the hand calculation."""
        b = calculate_breakdown(default_inputs)

        assert b.total_declared_value_usd == Decimal("3000")
        assert b.freight_cost_usd == Decimal("1200")
        assert b.insurance_cost_usd == Decimal("9")
        assert b.cost_insurance_freight_usd == Decimal("4209")
        assert b.duty_cost_usd == Decimal("420.9")
        assert b.value_added_tax_base_usd == Decimal("4929.9")
        assert b.value_added_tax_usd == Decimal("936.681")
        assert b.other_taxes_usd == Decimal("0")
        assert b.bank_fee_usd == Decimal("30")
        assert b.payment_fee_usd == Decimal("27")
        assert b.landed_cost_usd == Decimal("6043.581")
        assert b.landed_cost_cop == Decimal("24674324")
        assert b.unit_cost_cop == Decimal("49348.648")
        assert b.channel_fees_cop == Decimal("13013.1")
        assert b.unit_gross_profit_cop == Decimal("7538.252")

    def test_rounded_outputs(self, default_inputs):
        """Outputs are rounded only at the end."""
        result = calculate(default_inputs)

        assert result.landed_cost_usd == Decimal("6043.58")
        assert result.landed_cost_cop == Decimal("24674324")
        assert result.unit_cost_cop == Decimal("49349")
        assert result.unit_gross_profit_cop == Decimal("7538")
        assert result.unit_gross_margin_percent == Decimal("10.78")
        assert result.break_even_price_cop == Decimal("60829")

    def test_output_precision(self, default_inputs):
        """USD and margin carry two places, COP values none."""
        result = calculate(default_inputs)

        assert result.landed_cost_usd.as_tuple().exponent == -2
        assert result.unit_gross_margin_percent.as_tuple().exponent == -2
        assert result.landed_cost_cop.as_tuple().exponent == 0
        assert result.break_even_price_cop.as_tuple().exponent == 0

    def test_break_even_gives_zero_profit(self, default_inputs):
        """Selling at the unrounded break-even price leaves no profit."""
        b = calculate_breakdown(default_inputs)
        at_break_even = calculate_breakdown(
            replace(default_inputs, sale_price_cop=b.break_even_price_cop)
        )
        assert abs(at_break_even.unit_gross_profit_cop) < Decimal("1e-20")

    def test_float_inputs_match_decimal_inputs(self, default_inputs):
        """Floats are converted through their repr, not their binary value."""
        float_inputs = replace(
            default_inputs,
            insurance_rate_percent=0.003,
            duty_rate_percent=0.10,
            value_added_tax_rate_percent=0.19,
            commission_percent=0.14,
            payment_gateway_percent=0.029,
        )
        assert calculate_breakdown(float_inputs) == calculate_breakdown(default_inputs)


class TestProperties:
    """Properties that hold for any input."""

    def test_deterministic(self, default_inputs):
        """Same inputs, same outputs."""
        results = {calculate(default_inputs) for _ in range(5)}
        assert len(results) == 1

    def test_cif_excludes_freight_and_insurance(self, default_inputs):
        """A CIF shipment costs the same as one with no freight or insurance."""
        cif = calculate(replace(default_inputs, is_cif_shipment=True))
        no_freight = calculate(
            replace(
                default_inputs,
                freight_cost_usd=Decimal("0"),
                insurance_rate_percent=Decimal("0"),
                is_cif_shipment=False,
            )
        )
        assert cif.landed_cost_usd == no_freight.landed_cost_usd
        assert cif == no_freight

    def test_cif_breakdown_effective_values(self, default_inputs):
        b = calculate_breakdown(replace(default_inputs, is_cif_shipment=True))
        assert b.freight_cost_usd == 0
        assert b.insurance_cost_usd == 0
        assert b.cost_insurance_freight_usd == b.total_declared_value_usd

    def test_zero_sale_price_has_zero_margin(self, default_inputs):
        """An unpriced product has a margin of exactly zero."""
        result = calculate(replace(default_inputs, sale_price_cop=Decimal("0")))
        assert result.unit_gross_margin_percent == 0
        # Break-even is still meaningful without a sale price
        assert result.break_even_price_cop > 0
        assert result.unit_gross_profit_cop < 0

    def test_duty_rate_increases_landed_cost(self, default_inputs):
        """Raising the duty rate raises landed cost."""
        lower = calculate_breakdown(default_inputs)
        higher = calculate_breakdown(
            replace(default_inputs, duty_rate_percent=Decimal("0.11"))
        )
        assert higher.landed_cost_usd > lower.landed_cost_usd

    def test_other_taxes_use_cif_base(self, default_inputs):
        b = calculate_breakdown(
            replace(default_inputs, other_taxes_rate_percent=Decimal("0.02"))
        )
        assert b.other_taxes_usd == Decimal("84.18")

    def test_rounding_is_half_even(self):
        """Midpoints round to the even neighbour."""
        result = calculate(
            LandedCostInputs(
                unit_count=1,
                declared_unit_value_usd=Decimal("0.125"),
                usd_to_cop_rate=Decimal("1"),
                sale_price_cop=Decimal("0"),
                last_mile_cop=Decimal("2.375"),
            )
        )
        assert result.landed_cost_usd == Decimal("0.12")
        assert result.landed_cost_cop == Decimal("2")


class TestErrors:
    """Precondition and singularity handling."""

    def test_zero_units_rejected(self, default_inputs):
        with pytest.raises(InvalidInputError, match="unit_count"):
            calculate(replace(default_inputs, unit_count=0))

    def test_negative_units_rejected(self, default_inputs):
        with pytest.raises(InvalidInputError):
            calculate(replace(default_inputs, unit_count=-5))

    def test_fractional_units_rejected(self, default_inputs):
        with pytest.raises(InvalidInputError, match="whole number"):
            calculate(replace(default_inputs, unit_count=2.5))

    @pytest.mark.parametrize(
        "unit_count",
        [float("nan"), float("inf"), Decimal("NaN"), Decimal("Infinity")],
    )
    def test_non_finite_units_rejected(self, default_inputs, unit_count):
        """Non-finite unit counts fail with the typed error."""
        with pytest.raises(InvalidInputError, match="unit_count must be a finite number"):
            calculate(replace(default_inputs, unit_count=unit_count))

    def test_zero_exchange_rate_rejected(self, default_inputs):
        with pytest.raises(InvalidInputError, match="usd_to_cop_rate"):
            calculate(replace(default_inputs, usd_to_cop_rate=Decimal("0")))

    def test_negative_amount_rejected(self, default_inputs):
        with pytest.raises(InvalidInputError, match="freight_cost_usd"):
            calculate(replace(default_inputs, freight_cost_usd=Decimal("-1")))

    def test_non_numeric_amount_rejected(self, default_inputs):
        with pytest.raises(InvalidInputError, match="customs_broker_usd"):
            calculate(replace(default_inputs, customs_broker_usd="abc"))

    def test_non_finite_amount_rejected(self, default_inputs):
        with pytest.raises(InvalidInputError, match="finite"):
            calculate(replace(default_inputs, last_mile_cop=float("inf")))

    def test_channel_fees_of_one_hundred_percent(self, default_inputs):
        """Commission plus gateway of exactly 1 has no break-even price."""
        with pytest.raises(SingularBreakEvenError):
            calculate(
                replace(
                    default_inputs,
                    commission_percent=Decimal("0.971"),
                    payment_gateway_percent=Decimal("0.029"),
                )
            )

    def test_channel_fees_above_one_hundred_percent(self, default_inputs):
        with pytest.raises(SingularBreakEvenError):
            calculate(replace(default_inputs, commission_percent=Decimal("1.5")))

    def test_errors_are_value_errors(self, default_inputs):
        with pytest.raises(ValueError):
            calculate(replace(default_inputs, unit_count=0))
        assert issubclass(SingularBreakEvenError, CalculationError)


class TestToDecimal:

    def test_float_uses_repr(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_passthrough(self):
        value = Decimal("1.50")
        assert to_decimal(value) is value

    def test_int_and_str(self):
        assert to_decimal(3) == Decimal("3")
        assert to_decimal("2.5") == Decimal("2.5")
