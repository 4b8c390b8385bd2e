from __future__ import annotations


class NotificationType:
    """Canonical notification type tags shared with the frontend."""

    PD_CHECK = "pd_check"
    EXPECTED_CALVING = "expected_calving"
    REOPEN_BREEDING = "reopen_breeding"


ALL_TYPES = {
    NotificationType.PD_CHECK,
    NotificationType.EXPECTED_CALVING,
    NotificationType.REOPEN_BREEDING,
}
