import math
import re
from typing import Any, Optional

def email_pattern(domain: str) -> "re.Pattern[str]":
    return re.compile(r"^[^\s@]+@" + re.escape(domain) + r"$", re.IGNORECASE)

def is_allowed_email(email: str, domain: str) -> bool:
    return bool(email_pattern(domain).match(email or ""))

def parse_quantity(value: Any, default: int = 1) -> Optional[int]:
    """
    Normalise une quantité reçue du client.
    - Absente/vide => default
    - Entier (ou chaîne entière) => int
    - Sinon => None (l'appelant renvoie 400)
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None

def parse_price(value: Any) -> Optional[float]:
    """Prix >= 0 en float, None si invalide."""
    if value is None or value == "":
        return 0.0
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if price < 0 or not math.isfinite(price):
        return None
    return price
