# judging/services/payload_formatters.py
import secrets
import string
from typing import Any, Optional

_ID_ALPHABET = string.ascii_uppercase + string.digits

def new_id(prefix: str) -> str:
    """Business ids look like PRJ-4K2M9XQ1A, matching what the browser client generates."""
    return prefix + "-" + "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))

def new_access_code() -> str:
    return str(100000 + secrets.randbelow(900000))

def clean_str(val: Any) -> Optional[str]:
    if val is None:
        return None
    return str(val).strip()

def format_points(val: Any) -> Any:
    """30.0 -> 30, 7.5 -> 7.5; blanks stay blank."""
    if val is None or val == "":
        return val
    try:
        num = float(val)
    except (TypeError, ValueError):
        return val
    return int(num) if num.is_integer() else num

def format_average(val: float) -> str:
    return f"{val:.2f}"

def flatten_remark(val: Any) -> str:
    return (val or "").replace("\r\n", " ").replace("\n", " ")
