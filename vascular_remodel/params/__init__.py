"""Parameter validation for remodeling rules."""

from .validation import PARAM_BOUNDS, validate_params, validate_and_warn

__all__ = ["PARAM_BOUNDS", "validate_params", "validate_and_warn"]
