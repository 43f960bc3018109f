"""
Radius rules at vessel junctions following Murray's law.
"""

from ..utils.constants import DELTA_TOLERANCE, MINIMUM_CAPILLARY_RADIUS, MURRAY_EXPONENT


def murray_parent(
    r1: float,
    r2: float,
    gamma: float = MURRAY_EXPONENT,
) -> float:
    """
    Compute the parent radius of two merging vessels.

    Murray's law: r_parent^gamma = r1^gamma + r2^gamma

    Parameters
    ----------
    r1, r2 : float
        Child radii
    gamma : float
        Murray's law exponent

    Returns
    -------
    float
        Parent radius
    """
    return (r1 ** gamma + r2 ** gamma) ** (1.0 / gamma)


def murray_remainder(
    parent_radius: float,
    known_radius: float,
    gamma: float = MURRAY_EXPONENT,
    min_radius: float = MINIMUM_CAPILLARY_RADIUS,
    tol: float = DELTA_TOLERANCE,
) -> float:
    """
    Compute the unknown radius at a junction where one sibling is known.

    The result solves Murray's law for the remaining vessel. A result
    within ``tol`` of the smaller input snaps to it, and results are
    floored at ``min_radius``.

    Parameters
    ----------
    parent_radius : float
        Radius of the vessel on the single side of the junction
    known_radius : float
        Radius of the known vessel on the split side
    gamma : float
        Murray's law exponent
    min_radius : float
        Minimum allowed radius
    tol : float
        Equality tolerance

    Returns
    -------
    float
        Radius of the unknown vessel
    """
    if parent_radius == known_radius:
        return known_radius

    larger = max(parent_radius, known_radius)
    smaller = min(parent_radius, known_radius)
    radius = (larger ** gamma - smaller ** gamma) ** (1.0 / gamma)

    if abs(radius - smaller) < tol:
        radius = smaller

    return max(radius, min_radius)


def murray_even_split(
    parent_radius: float,
    gamma: float = MURRAY_EXPONENT,
    min_radius: float = MINIMUM_CAPILLARY_RADIUS,
) -> float:
    """Radius of each of two equal children of a parent vessel, floored."""
    return max(parent_radius / 2 ** (1.0 / gamma), min_radius)
