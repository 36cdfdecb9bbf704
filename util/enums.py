# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    UNKNOWN_JOB_TYPE = ErrorInfo("Unknown job type", status.HTTP_404_NOT_FOUND)
    UNKNOWN_JOB = ErrorInfo("Unknown or expired job", status.HTTP_404_NOT_FOUND)
    CANNOT_CANCEL = ErrorInfo(
        "The job cannot be cancelled (any more)", status.HTTP_409_CONFLICT
    )
