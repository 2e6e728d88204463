"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for all
stage contracts.
"""

from kelpseg.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Enforce a stage contract.

    Called at stage boundaries to verify the preceding stage produced the
    guaranteed invariants. No recovery, no fallback.

    Parameters
    ----------
    condition : bool
        The invariant that must be true. If False, ContractViolation is raised.

    message : str
        Error message explaining the contract violation (for debugging).

    Raises
    ------
    ContractViolation
        If condition is False.

    Examples
    --------
    >>> require(pixels.index.names[0] == "segment_id", "Pixel contract: bad index")
    >>> require((presence["segment_area_km2"] >= 0).all(), "Presence contract: negative area")
    """
    if not condition:
        raise ContractViolation(message)
