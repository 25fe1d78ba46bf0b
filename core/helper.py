import calendar
import secrets
from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from models.Voucher import (
    VOUCHER_CODE_ALPHABET,
    VOUCHER_CODE_LENGTH,
    VOUCHER_CODE_PREFIX,
)


def get_current_time_in_timezone(timezone_str: str = "Europe/Berlin") -> datetime:
    """Get Current Time in Specified Timezone

    Args:
        timezone_str (str): Timezone string (e.g., "Europe/Berlin")

    Returns:
        datetime: Current datetime in the specified timezone
    """
    try:
        tz = ZoneInfo(timezone_str)
    except ZoneInfoNotFoundError:
        tz = ZoneInfo("UTC")
    return datetime.now(tz)


def add_months(moment: datetime, months: int) -> datetime:
    """Same wall-clock time `months` later, clamped to the end of shorter months.

    29 February plus 12 months gives 28 February.
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def generate_voucher_code() -> str:
    """SPONK-XXXXXXXX with characters from the unambiguous alphabet (no I, O, 0, 1)."""
    suffix = "".join(
        secrets.choice(VOUCHER_CODE_ALPHABET) for _ in range(VOUCHER_CODE_LENGTH)
    )
    return f"{VOUCHER_CODE_PREFIX}{suffix}"


def format_participant_names(names: List[str], participants: int) -> Optional[str]:
    """Additional participants as "Teilnehmer 2: name" lines, the booker is number 1."""
    cleaned = [name.strip() for name in names if name and name.strip()]
    lines = [
        f"Teilnehmer {index + 2}: {name}"
        for index, name in enumerate(cleaned[: max(participants - 1, 0)])
    ]
    return "\n".join(lines) or None
