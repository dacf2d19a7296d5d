"""
Shared Domain Constants.

Central location for scheduling and capture constants used across domain services.
All timing values are in milliseconds unless the name says otherwise.
"""

# =============================================================================
# Scheduling
# =============================================================================
# "again" sends a card back to learning for a short relearning step.
# "good"/"easy" graduate new/learning cards to fixed intervals, then grow
# review intervals by the card's ease (plus EASY_BONUS for "easy").

AGAIN_MINUTES = 10
GOOD_GRADUATION_DAYS = 1
EASY_GRADUATION_DAYS = 3

INITIAL_EASE = 2.3
EASE_MIN = 1.3
EASE_MAX = 2.8
EASY_BONUS = 1.3

AGAIN_EASE_PENALTY = 0.2
GOOD_GRADUATION_EASE_BONUS = 0.05
GOOD_REVIEW_EASE_BONUS = 0.02
EASY_GRADUATION_EASE_BONUS = 0.15
EASY_REVIEW_EASE_BONUS = 0.10

MIN_REVIEW_INTERVAL_DAYS = 1

MS_PER_MINUTE = 60 * 1000
MS_PER_DAY = 24 * 60 * MS_PER_MINUTE


# =============================================================================
# Capture
# =============================================================================

UNDO_WINDOW_MS = 5000  # Only the most recent capture, only this long
CANCEL_GRACE_MS = 250  # Wait for a superseded acquisition to settle

# Clipboard polling (snipping tool is fire-and-forget)
# 60 attempts * 500ms = 30 seconds for the user to complete the snip
POLL_ATTEMPTS = 60
POLL_INTERVAL_MS = 500


# =============================================================================
# Subjects
# =============================================================================

DEFAULT_SUBJECT_ID = "inbox"
DEFAULT_SUBJECT_NAME = "Inbox"
FALLBACK_SUBJECT_SLUG = "subject"


# =============================================================================
# Notices (Single Source of Truth)
# =============================================================================


class Notices:
    """User-visible notice messages emitted to the presentation layer."""

    TIMED_OUT = "Screenshot timed out"
    UNSUPPORTED = "Screenshot not supported on this platform"
    NO_IMAGE = "No screenshot in clipboard"
    CAPTURE_FAILED = "Failed to capture screenshot"
    IMAGE_WRITE_FAILED = "Could not save screenshot to disk"
    RECORD_FAILED = "Screenshot saved to disk but could not be added to the subject"
