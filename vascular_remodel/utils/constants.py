"""
Physical constants for vascular hemodynamics.

Lengths are in micrometres, pressures in mmHg and times in minutes.
"""

CAPILLARY_RADIUS = 4.0
MAXIMUM_CAPILLARY_RADIUS = 20.0
MINIMUM_CAPILLARY_RADIUS = 2.0

MINIMUM_WALL_THICKNESS = 0.5
MAXIMUM_WALL_RADIUS_FRACTION = 0.5

PLASMA_VISCOSITY = 0.000009  # mmHg*s

LAYER_HEIGHT = 8.7

MURRAY_EXPONENT = 2.7
DELTA_TOLERANCE = 1e-8

MATRIX_SCALE = 1e-7

MINIMUM_FLOW_RATE = 1000.0  # um^3/min
MINIMUM_FLOW_PERCENT = 0.01

MAXIMUM_OXYGEN_PRESSURE = 100.0
MINIMUM_OXYGEN_PRESSURE = 55.0
OXYGEN_PRESSURE_SCALE = 1.0

OXYGEN_CURVE_EXP = 2.8275
OXYGEN_CURVE_P50 = 26.875
OXYGEN_SATURATION = 0.00835

ROOT_PRESSURE_MIN = 18.0
ROOT_PRESSURE_MAX = 89.0
