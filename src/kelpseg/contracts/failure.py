"""Error types raised by kelpseg components.

Configuration and format errors are detected eagerly at the start of the
responsible component and abort the entire call. Numeric edge cases
(zero segment area, empty history) are never errors.
"""


class ConfigurationError(ValueError):
    """Raised for bad caller input.

    Unknown segment ids, unsupported frequency or annualization method,
    or a configuration that fails schema validation.
    """
    pass


class FormatError(ValueError):
    """Raised when a source file (raster or polygon layer) is malformed
    or its variables have inconsistent shapes."""
    pass


class NotFoundError(LookupError):
    """Raised when a requested status year has no row for a segment."""
    pass


class ContractViolation(RuntimeError):
    """Raised when a stage contract is violated.

    This indicates a bug in stage logic, not bad user input or a
    numeric edge case. It means a stage did not produce the invariants
    it promised.

    Key distinction:
    - ConfigurationError / FormatError: caller or input-file error
    - ContractViolation: programmer error
    """
    pass
