"""String format checks for StringConstraint."""

import ipaddress
import re
from datetime import date, datetime
from urllib.parse import urlparse


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
HOSTNAME_PATTERN = re.compile(
    r"^(?=.{1,253}$)[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*$"
)


def _is_ipv4(value: str) -> bool:
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return True


def _is_ipv6(value: str) -> bool:
    try:
        ipaddress.IPv6Address(value)
    except ValueError:
        return False
    return True


def _is_uri(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc or parsed.path)


def _is_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _is_date_time(value: str) -> bool:
    # RFC 3339 requires a time part; fromisoformat alone would accept a bare date
    if "T" not in value.upper():
        return False
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00").replace("z", "+00:00"))
    except ValueError:
        return False
    return True


FORMAT_CHECKERS = {
    "email": lambda v: bool(EMAIL_PATTERN.match(v)),
    "hostname": lambda v: bool(HOSTNAME_PATTERN.match(v)),
    "ipv4": _is_ipv4,
    "ipv6": _is_ipv6,
    "uri": _is_uri,
    "date": _is_date,
    "date-time": _is_date_time,
}


def check_format(name: str, value: str) -> bool:
    """Return False only when a known format rejects the value"""
    checker = FORMAT_CHECKERS.get(name)
    if checker is None:
        return True
    return checker(value)
