"""Application-wide constants for TutorLink."""

from __future__ import annotations

BRAND_NAME = "TutorLink"
API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Tutoring marketplace: availability, bookings, earnings and verification"
API_VERSION = "1.0.0"

# Session duration constraints
MIN_SESSION_DURATION = 15  # minutes
MAX_SESSION_DURATION = 480  # minutes (8 hours)

# Slot granularity used when slicing availability windows
DEFAULT_SLOT_GRANULARITY = 30  # minutes

# Text constraints
MAX_NOTES_LENGTH = 1000
MAX_COMMENT_LENGTH = 1000
MAX_SUBJECT_LENGTH = 120
MAX_BIO_LENGTH = 2000
MAX_CITY_LENGTH = 120
MAX_SUBJECTS_PER_TUTOR = 20

# Listing pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Reporting
TOP_SUBJECTS_LIMIT = 10
TOP_CITIES_LIMIT = 10
