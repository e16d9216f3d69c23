"""
Landed Cost Calculation Engine

Pure, deterministic calculations for import landed cost and
e-commerce unit economics. No I/O and no configuration.
"""

from cost_analyzer.calculations import landed_cost
from cost_analyzer.calculations.landed_cost import (
    CalculationError,
    InvalidInputError,
    SingularBreakEvenError,
    LandedCostInputs,
    LandedCostBreakdown,
    LandedCostResult,
    calculate,
    calculate_breakdown,
)

__all__ = [
    "landed_cost",
    "CalculationError",
    "InvalidInputError",
    "SingularBreakEvenError",
    "LandedCostInputs",
    "LandedCostBreakdown",
    "LandedCostResult",
    "calculate",
    "calculate_breakdown",
]
