"""
Decoder configuration for aero_wx.
"""

import os

# Flight category thresholds (statute miles, feet AGL).
# LIFR is anything below the IFR thresholds.
CATEGORY_THRESHOLDS = {
    "VFR": {
        "visibility": 5.0,
        "ceiling": 3000,
    },
    "MVFR": {
        "visibility": 3.0,
        "ceiling": 1000,
    },
    "IFR": {
        "visibility": 1.0,
        "ceiling": 500,
    },
}

# Cloud coverages that constitute a ceiling
CEILING_COVERAGES = ("BKN", "OVC")

# Unit conversion
METERS_TO_SM = 0.000621371
HPA_TO_INHG = 0.0295299830714

# Metric visibility reported as 9999 means "10 km or more"
METRIC_VISIBILITY_MAX_M = 10000

# A TAF validity window further than this from its issuance time
# is re-aligned to the issuance month
MAX_WINDOW_ISSUANCE_GAP_DAYS = 15

# Logging Configuration
LOG_LEVEL = os.getenv("AERO_WX_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
