"""Error taxonomy for the IFS scoring domain."""


class ValidationError(ValueError):
    """Rejected sub-score or check-in input.

    Raised before anything is persisted so the submitter can correct it.
    """


class ConfigurationError(ValueError):
    """Weights or thresholds that cannot describe a valid policy."""


class DataIntegrityWarning(UserWarning):
    """Stored history that violates a record invariant.

    Never raised on the read path; reported through structured logging
    under the ``data_integrity_warning`` event.
    """
