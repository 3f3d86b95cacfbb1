"""Threshold ranges with percentage support."""

import re

import nagiosplugin
from nagiosplugin.state import Critical, Ok, ServiceState, Warn

from check_ctdb.core.errors import ThresholdError

# A number immediately followed by a percent sign: 50%, 12.5%
PERCENT_PATTERN = re.compile(r"(-?\d+(?:\.\d+)?)%")


def _format_number(value: float) -> str:
    """Render a resolved bound without a trailing .0"""
    return f"{value:g}"


def resolve_threshold(
    spec: str | None,
    maximum: int | float | None = None,
) -> nagiosplugin.Range | None:
    """
    Turn a threshold string into a range.

    Every ``N%`` in the string is replaced by N percent of ``maximum``,
    so ``50%`` with a maximum of 10 becomes ``5`` and ``10%:`` becomes
    ``1:``. Plain numbers and the rest of the Nagios range syntax pass
    through untouched.

    Args:
        spec: Threshold as given on the command line
        maximum: Value percentages refer to

    Returns:
        Range, or None when the threshold is unset or empty

    Raises:
        ThresholdError: If a percentage has no maximum or the range is invalid
    """
    if spec is None:
        return None

    if "%" in spec:
        if maximum is None:
            raise ThresholdError(f"Percentage threshold '{spec}' needs a known maximum")

        def _scale(match: re.Match) -> str:
            return _format_number(float(match.group(1)) * maximum / 100)

        spec = PERCENT_PATTERN.sub(_scale, spec).replace("%", "")

    spec = spec.strip()
    if not spec:
        return None

    try:
        return nagiosplugin.Range(spec)
    except ValueError as e:
        raise ThresholdError(f"Invalid threshold '{spec}': {e}") from e


def check_threshold(
    value: int | float,
    warning: nagiosplugin.Range | None = None,
    critical: nagiosplugin.Range | None = None,
) -> ServiceState:
    """
    Evaluate a value against optional warning and critical ranges.

    Critical is checked first. A missing range never alerts.
    """
    if critical is not None and not critical.match(value):
        return Critical
    if warning is not None and not warning.match(value):
        return Warn
    return Ok
