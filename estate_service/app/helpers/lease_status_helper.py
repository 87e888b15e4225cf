from datetime import date, timedelta
from typing import Optional

from shared.core.config import settings
from ..enum.estate_enum import LeaseStatus


def derive_lease_status(current_status: str, end_date: date,
                        today: Optional[date] = None,
                        window_days: Optional[int] = None) -> str:
    if current_status == LeaseStatus.terminated.value:
        return LeaseStatus.terminated.value

    today = today or date.today()
    if window_days is None:
        window_days = settings.EXPIRING_SOON_DAYS

    if end_date < today:
        return LeaseStatus.expired.value
    if end_date <= today + timedelta(days=window_days):
        return LeaseStatus.expiring_soon.value
    return LeaseStatus.active.value
