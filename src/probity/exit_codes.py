# topmark:header:start
#
#   project      : Probity
#   file         : exit_codes.py
#   file_relpath : src/probity/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Defines standardized exit codes used by Probity.

Error formatters return one of these codes; the CLI exits with it unchanged.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for Probity.

    Attributes:
        SUCCESS (int): The run completed and reported no errors.
        FAILURE (int): The run completed and reported at least one error.
        USAGE_ERROR (int): Invalid command-line usage (bad flags, no files).
        CONFIG_ERROR (int): Missing, malformed, or invalid configuration.

    Usage:
        ```python
        import subprocess
        from probity.exit_codes import ExitCode

        result = subprocess.run(["probity", "analyse", "src"])
        if result.returncode == ExitCode.FAILURE:
            print("Probity found problems.")
        ```
    """

    SUCCESS = 0
    FAILURE = 1
    USAGE_ERROR = 2
    CONFIG_ERROR = 3
