"""
Exit Codes - Process exit statuses of the projectmd command.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2
    FILE_NOT_FOUND = 3
    PARTIAL_FAILURE = 4
    CANCELLED = 130
