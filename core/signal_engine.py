"""
Signal Engine Module

Combines flow pressure with the semantic pressure index (SPI) into a single
weighted score and maps it onto a BUY/SELL/HOLD decision. Flow pressure
carries 70% of the weight, SPI the remaining 30%.

Low combined pressure is read as an accumulation opportunity (BUY), high
combined pressure as distribution (SELL). Boundaries are strict: exactly 45
is not a BUY and exactly 70 is not a SELL.

The combined value is rounded to 9 decimals before the comparison. This is a
deliberate tolerance: a combined value within 5e-10 of a threshold counts as
sitting on it (HOLD), so decimal inputs such as (45, 45) are not tipped over
the boundary by binary float error.
"""

from core.models import Action, PressureSample

FLOW_WEIGHT = 0.7
SPI_WEIGHT = 0.3
BUY_BELOW = 45.0
SELL_ABOVE = 70.0


def combined_pressure(flow_pressure: float, spi: float) -> float:
    # Rounded so that e.g. (45, 45) lands on 45.0 and not 44.999999999999996
    return round(flow_pressure * FLOW_WEIGHT + spi * SPI_WEIGHT, 9)


def decide(flow_pressure: float, spi: float) -> Action:
    combined = combined_pressure(flow_pressure, spi)
    if combined < BUY_BELOW:
        return Action.BUY
    if combined > SELL_ABOVE:
        return Action.SELL
    return Action.HOLD


def decide_sample(sample: PressureSample) -> Action:
    """Decide on a sample, resolving unknown readings to the neutral default"""
    flow, spi = sample.resolved()
    return decide(flow, spi)
