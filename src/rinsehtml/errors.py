"""Exception hierarchy for rinsehtml.

Malformed markup never raises. These exceptions only surface when an engine
is configured with values it cannot use.
"""


class RinseError(Exception):
    """Base class for all rinsehtml errors."""


class ConfigurationError(RinseError, ValueError):
    """Raised at construction time for an unusable option (e.g. a bad base URI)."""

    def __init__(self, option, value, reason):
        self.option = option
        self.value = value
        self.reason = reason
        super().__init__(f"invalid {option} {value!r}: {reason}")
