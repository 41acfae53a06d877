from typing import Optional

WILDCARD = "all"


def is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def active_filter(value: Optional[str]) -> Optional[str]:
    # "" and "all" both mean "don't filter on this"
    if is_blank(value) or value == WILDCARD:
        return None
    return value


def parse_id(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if is_blank(value):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None
