import re
from typing import Union

_HOURS_RE = re.compile(r"(\d+)\s*h", re.IGNORECASE)
_MINUTES_RE = re.compile(r"(\d+)\s*m", re.IGNORECASE)

DEFAULT_DURATION_MINUTES = 60


def parse_price(value: Union[str, int, float, None]) -> float:
    """
    Parse a price into a float.

    A string with a comma is read as a BRL label ("R$ 1.130,50"), where dots
    group thousands. Without a comma it is a plain decimal ("130.50").
    Numbers pass through unchanged.

    Raises ValueError when a string holds no readable amount.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)

    text = re.sub(r"^R\$", "", re.sub(r"\s", "", str(value)), flags=re.IGNORECASE)
    if not re.fullmatch(r"[\d.,]*\d[\d.,]*", text):
        raise ValueError(f"Invalid price: {value!r}")

    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"Invalid price: {value!r}")


def format_price(value: float) -> str:
    """Format a float as a BRL label: 1130.5 -> "R$ 1.130,50"."""
    whole = f"{value:,.2f}"
    return "R$ " + whole.replace(",", "_").replace(".", ",").replace("_", ".")


def parse_duration_minutes(label: str) -> int:
    """"2h" -> 120, "1h 30m" -> 90, "45min" -> 45; unparseable -> 60."""
    minutes = 0
    hours_match = _HOURS_RE.search(label or "")
    minutes_match = _MINUTES_RE.search(label or "")
    if hours_match:
        minutes += int(hours_match.group(1)) * 60
    if minutes_match:
        minutes += int(minutes_match.group(1))
    return minutes or DEFAULT_DURATION_MINUTES


def clean_phone(phone: str) -> str:
    """Keep digits only, as used by wa.me links and client lookups."""
    return re.sub(r"\D", "", phone or "")
