import re
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: Optional[str]) -> bool:
    if not email:
        return False
    return EMAIL_PATTERN.match(email.strip()) is not None
