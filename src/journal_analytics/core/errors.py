"""Custom exception hierarchy for the analytics engine.

Degenerate numeric conditions (zero risk, no losers, empty input) never
raise; they resolve to documented sentinel values inside each function.
Only caller contract violations and storage failures surface here.
"""


class JournalAnalyticsError(Exception):
    """Base exception for all analytics engine errors."""


# --- Configuration ---
class ConfigError(JournalAnalyticsError):
    """Invalid or missing configuration."""


# --- Input contract ---
class ContractViolation(JournalAnalyticsError):
    """Caller supplied data that breaks the input contract."""


class InvalidDirectionError(ContractViolation):
    """Trade direction is neither ``buy`` nor ``sell``."""

    def __init__(self, direction: object):
        self.direction = direction
        super().__init__(f"Unknown trade direction: {direction!r}")


class InvalidTimestampError(ContractViolation):
    """A date string could not be parsed as ISO-8601."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unparseable timestamp: {value!r}")


# --- Preset storage ---
class PresetStoreError(JournalAnalyticsError):
    """Preset store read/write failure."""


class PresetStoreCorrupted(PresetStoreError):
    """A persisted preset record could not be decoded."""

    def __init__(self, path: str, line_no: int, reason: str):
        self.path = path
        self.line_no = line_no
        self.reason = reason
        super().__init__(f"{path}:{line_no}: {reason}")
