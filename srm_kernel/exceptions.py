"""
Typed Exception Hierarchy for the SRM Kernel.

===============================================================================
WHERE EXCEPTIONS ARE RAISED
===============================================================================

The synthesis engines, the scoring engine and the import normalization
pipeline never raise for bad data. They default, skip or fall back to a
known-valid value and log a warning. Exceptions exist only at the
configuration and persistence seams:

  - explicit setters on user-editable configuration (grading rules,
    field mapping overrides) reject values that can never be valid;
  - repository writes reject values that cannot be stored.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    SrmKernelError (base)
    |
    +-- ConfigurationError
    |   +-- InvalidGradingRuleError
    |   +-- InvalidWeightError
    |   +-- CategoryNotFoundError
    |   +-- MetricNotFoundError
    |   +-- UnknownSystemFieldError
    |
    +-- RepositoryError
        +-- RepositoryValueError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Configuration   | INVALID_GRADING_RULE        | Rule document is not a mapping / list
                | INVALID_WEIGHT              | Metric weight negative or not a number
                | CATEGORY_NOT_FOUND          | Setter addressed a missing category
                | METRIC_NOT_FOUND            | Setter addressed a missing metric
                | UNKNOWN_SYSTEM_FIELD        | Mapping override names a non-system field
----------------|-----------------------------|-----------------------------------------
Repository      | REPOSITORY_VALUE_INVALID    | Value is not JSON-serializable
"""


class SrmKernelError(Exception):
    """
    Base exception for all SRM kernel errors.

    All subclasses carry a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "SRM_KERNEL_ERROR"


# Configuration exceptions


class ConfigurationError(SrmKernelError):
    """Base exception for user-editable configuration errors."""

    code: str = "CONFIGURATION_ERROR"


class InvalidGradingRuleError(ConfigurationError):
    """Grading rule document has the wrong shape."""

    code: str = "INVALID_GRADING_RULE"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid grading rule: {reason}")


class InvalidWeightError(ConfigurationError):
    """Metric weight is negative or not numeric."""

    code: str = "INVALID_WEIGHT"

    def __init__(self, metric_key: str, weight: object):
        self.metric_key = metric_key
        self.weight = weight
        super().__init__(f"Invalid weight for metric {metric_key}: {weight!r}")


class CategoryNotFoundError(ConfigurationError):
    """No category at the given position."""

    code: str = "CATEGORY_NOT_FOUND"

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(f"Category index {index} out of range (have {count})")


class MetricNotFoundError(ConfigurationError):
    """No metric with the given key."""

    code: str = "METRIC_NOT_FOUND"

    def __init__(self, metric_key: str):
        self.metric_key = metric_key
        super().__init__(f"Metric not found: {metric_key}")


class UnknownSystemFieldError(ConfigurationError):
    """Field mapping override targets a field outside the system field set."""

    code: str = "UNKNOWN_SYSTEM_FIELD"

    def __init__(self, field_key: str):
        self.field_key = field_key
        super().__init__(f"Unknown system field: {field_key}")


# Repository exceptions


class RepositoryError(SrmKernelError):
    """Base exception for repository gateway errors."""

    code: str = "REPOSITORY_ERROR"


class RepositoryValueError(RepositoryError):
    """Value cannot be stored in the key-value repository."""

    code: str = "REPOSITORY_VALUE_INVALID"

    def __init__(self, collection: str, key: str, reason: str):
        self.collection = collection
        self.key = key
        self.reason = reason
        super().__init__(
            f"Cannot store value at {collection}/{key}: {reason}"
        )
