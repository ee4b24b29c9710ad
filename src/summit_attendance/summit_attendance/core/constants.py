"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EVENT_DAYS = (1, 2)
MOBILE_LENGTH = 10
FEEDBACK_MIN_LENGTH = 10

DEFAULT_BUFFER_MINUTES = 15
DEFAULT_AUTO_CHECKIN_DELAY_SECONDS = 2.0
DEFAULT_REFRESH_INTERVAL_SECONDS = 30
DEFAULT_PAGE_SIZE = 10

HIGH_RATING_MIN = 4
LOW_RATING_MAX = 2

DEFAULT_ZONES = (
    "Poonch",
    "Mandi",
    "Mendher",
    "Surankote",
    "Rajouri",
    "Jammu",
    "Srinagar",
    "North East",
    "South",
    "Rajasthan",
    "Maharashta",
    "PR Department",
    "Academia Department",
    "Directorate",
    "UAE",
    "Not Applicable",
)
