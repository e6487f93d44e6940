from __future__ import annotations

from typing import Tuple

# Region bounding window
BBOX_MARGIN_PX = 2                      # margin around the union of region vertices

# Region drawing
SNAP_DISTANCE_PX = 20.0                 # screen px; divided by view scale before comparing
MIN_POLYGON_POINTS = 3

# Threshold preview
HIGHLIGHT_RGB: Tuple[int, int, int] = (0, 255, 0)

# Calibration
DEFAULT_REAL_DISTANCE = 10.0
DEFAULT_UNIT = "cm"

# HSL acceptance range (greens)
H_DOMAIN = (0.0, 360.0)
S_DOMAIN = (0.0, 100.0)
L_DOMAIN = (0.0, 100.0)
DEFAULT_H_RANGE = (30.0, 160.0)
DEFAULT_S_RANGE = (15.0, 100.0)
DEFAULT_L_RANGE = (15.0, 90.0)

# CSV export
CSV_DELIMITERS = (",", ";")
AREA_DECIMALS = 2
