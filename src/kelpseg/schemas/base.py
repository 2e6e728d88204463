"""Base Pydantic model with strict defaults for kelpseg configs.

All config schemas inherit from this base to ensure consistent
validation behavior across parameter, user, CLI, and internal configs.
"""

from pydantic import BaseModel, ConfigDict


class KelpBaseModel(BaseModel):
    """Base model for all kelpseg configuration schemas.

    Enforces strict validation:
    - No extra fields allowed
    - Validates assignments after initialization
    - Strips whitespace from strings
    """

    model_config = ConfigDict(
        extra='forbid',           # Reject unknown fields
        validate_assignment=True, # Validate on field mutation
        use_enum_values=True,     # Convert enums to values
        str_strip_whitespace=True,# Strip whitespace from strings
    )


def normalize_annualization_method(v):
    """Normalize method spellings: 'q1' -> 'Q1', 'Max-First' -> 'max_first'."""
    if not isinstance(v, str):
        return v
    s = v.strip().replace("-", "_")
    if s.upper() in {"Q1", "Q2", "Q3", "Q4"}:
        return s.upper()
    return s.lower()


def normalize_status_year(v):
    """'latest' (any case) means resolve to the last year in the series."""
    if isinstance(v, str) and v.strip().lower() == "latest":
        return None
    return v


def normalize_segment_ids(v):
    """Accept 'all', a single id, or any iterable of ids."""
    if v is None:
        return v
    if isinstance(v, str):
        return "all" if v.strip().lower() == "all" else [v.strip()]
    return [str(s) for s in v]
