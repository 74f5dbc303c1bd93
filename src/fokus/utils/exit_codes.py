"""
Exit codes for fokus.

The TUI itself exits with 0; the codes below come from startup problems
(bad arguments, a second instance, an unusable data directory).
"""

# Invalid arguments or validation error (click's usage-error code)
ERROR_INVALID_ARGS = 2

# Another fokus instance holds the lock file
ERROR_ALREADY_RUNNING = 3

# Config or history directory cannot be used
ERROR_STORAGE = 4


_CODE_NAMES = {
    ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
    ERROR_ALREADY_RUNNING: "ERROR_ALREADY_RUNNING",
    ERROR_STORAGE: "ERROR_STORAGE",
}

_DESCRIPTIONS = {
    ERROR_INVALID_ARGS: "Invalid arguments or validation error",
    ERROR_ALREADY_RUNNING: "Another fokus instance is already running",
    ERROR_STORAGE: "Config or history storage is not usable",
}


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    return _CODE_NAMES.get(code, f"UNKNOWN({code})")


def get_exit_code_description(code: int) -> str:
    """Get a human-readable description of an exit code."""
    return _DESCRIPTIONS.get(code, "Unknown error")
