import re

_MOBILE_RE = re.compile(r"[0-9]{10}")


def is_valid_mobile(mobile) -> bool:
    """Exactly 10 ASCII digits."""
    return isinstance(mobile, str) and _MOBILE_RE.fullmatch(mobile) is not None


def to_e164(mobile: str, country_code: str = "+91") -> str:
    if mobile.startswith("+"):
        return mobile
    return f"{country_code}{mobile}"


def mask_phone(phone: str, visible_digits: int = 4) -> str:
    if not phone:
        return ""
    if len(phone) <= visible_digits:
        return phone
    return "*" * (len(phone) - visible_digits) + phone[-visible_digits:]


def mask_code(code: str) -> str:
    if not code:
        return ""
    if len(code) <= 2:
        return "*" * len(code)
    return "*" * (len(code) - 2) + code[-2:]
