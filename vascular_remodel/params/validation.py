"""
Parameter validation for remodeling rule specifications.
"""

import logging
from typing import List, Tuple, Union

from ..rules.constraints import DegradationRuleSpec, GrowthRuleSpec
from ..utils.constants import MINIMUM_WALL_THICKNESS

logger = logging.getLogger(__name__)

RuleSpec = Union[DegradationRuleSpec, GrowthRuleSpec]


PARAM_BOUNDS = {
    "interval": (1, 1440, "min"),
    "rate": (0.0, 10.0, "um/h"),
    "shear_threshold": (0.0, 100.0, "mmHg"),
    "migration_rate": (1.0, 200.0, "um/h"),
    "vegf_threshold": (0.0, 10.0, "fmol/um^3"),
    "max_length": (10.0, 1000.0, "um"),
}


def validate_params(spec: RuleSpec) -> Tuple[bool, List[str]]:
    """
    Validate a rule specification against recommended bounds.

    Parameters
    ----------
    spec : DegradationRuleSpec or GrowthRuleSpec
        Specification to validate

    Returns
    -------
    is_valid : bool
        True if all parameters are within recommended bounds
    warnings : List[str]
        List of warning messages for out-of-bounds parameters
    """
    warnings = []

    for param_name, value in spec.to_dict().items():
        if param_name not in PARAM_BOUNDS:
            continue
        min_val, max_val, unit = PARAM_BOUNDS[param_name]
        if value < min_val:
            warnings.append(
                f"{param_name} = {value} {unit} is below minimum {min_val} {unit}"
            )
        elif value > max_val:
            warnings.append(
                f"{param_name} = {value} {unit} exceeds maximum {max_val} {unit}"
            )

    if isinstance(spec, DegradationRuleSpec):
        if spec.rate == 0:
            warnings.append("rate = 0 disables wall degradation")
        if spec.rate / 60 > MINIMUM_WALL_THICKNESS:
            warnings.append(
                f"rate ({spec.rate} um/h) removes more than the minimum wall "
                f"thickness ({MINIMUM_WALL_THICKNESS} um) per step"
            )

    if isinstance(spec, GrowthRuleSpec):
        if spec.max_length < spec.migration_rate:
            warnings.append(
                f"max_length ({spec.max_length} um) is shorter than one hour of "
                f"migration ({spec.migration_rate} um/h)"
            )

    is_valid = len(warnings) == 0
    return is_valid, warnings


def validate_and_warn(spec: RuleSpec) -> RuleSpec:
    """
    Validate a specification and log any warnings.

    Returns
    -------
    spec
        Same specification (for chaining)
    """
    is_valid, warnings = validate_params(spec)

    if not is_valid:
        logger.warning(f"Parameter validation warnings ({len(warnings)}):")
        for warning in warnings:
            logger.warning(f"  - {warning}")

    return spec
