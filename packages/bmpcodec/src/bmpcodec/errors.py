# packages/bmpcodec/src/bmpcodec/errors.py
from __future__ import annotations
from enum import IntEnum

__all__ = [
    "BMPStatus", "error_string", "status_of",
    "BMPError", "InvalidArgumentError", "OutOfMemoryError", "BMPIOError",
    "BMPFileNotFoundError", "FileInvalidError", "NotSupportedError", "TypeMismatchError",
]


class BMPStatus(IntEnum):
    """Codes de statut BMP (valeurs stables, ordre historique)."""
    OK = 0
    ERROR = 1
    OUT_OF_MEMORY = 2
    IO_ERROR = 3
    FILE_NOT_FOUND = 4
    FILE_NOT_SUPPORTED = 5
    FILE_INVALID = 6
    INVALID_ARGUMENT = 7
    TYPE_MISMATCH = 8

    # alias (seconde famille de noms)
    FILE_OPEN_ERROR = 4
    FILE_TYPE_ERROR = 6

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    BMPStatus.OK: "No error",
    BMPStatus.ERROR: "General error",
    BMPStatus.OUT_OF_MEMORY: "Could not allocate enough memory to complete the operation",
    BMPStatus.IO_ERROR: "General input/output error",
    BMPStatus.FILE_NOT_FOUND: "File not found",
    BMPStatus.FILE_NOT_SUPPORTED: "File is not a supported BMP variant",
    BMPStatus.FILE_INVALID: "File is not a BMP image or is an invalid BMP",
    BMPStatus.INVALID_ARGUMENT: "An argument is invalid or out of range",
    BMPStatus.TYPE_MISMATCH: "The requested action is not compatible with the BMP's type",
}


def error_string(status) -> str:
    """Nom symbolique d'un statut (`"BMP_FILE_INVALID"`), `"UNKNOWN"` sinon."""
    try:
        return "BMP_" + BMPStatus(int(status)).name
    except (ValueError, TypeError):
        return "UNKNOWN"


class BMPError(Exception):
    """Base de toutes les erreurs du codec. `status` porte le code BMPStatus."""
    status: BMPStatus = BMPStatus.ERROR


class InvalidArgumentError(BMPError, ValueError):
    status = BMPStatus.INVALID_ARGUMENT


class OutOfMemoryError(BMPError, MemoryError):
    status = BMPStatus.OUT_OF_MEMORY


class BMPIOError(BMPError, OSError):
    status = BMPStatus.IO_ERROR


class BMPFileNotFoundError(BMPError, FileNotFoundError):
    status = BMPStatus.FILE_NOT_FOUND


class FileInvalidError(BMPError, ValueError):
    status = BMPStatus.FILE_INVALID


class NotSupportedError(BMPError, ValueError):
    status = BMPStatus.FILE_NOT_SUPPORTED


class TypeMismatchError(BMPError, TypeError):
    status = BMPStatus.TYPE_MISMATCH


def status_of(exc: BaseException | None) -> BMPStatus:
    if exc is None:
        return BMPStatus.OK
    if isinstance(exc, BMPError):
        return exc.status
    return BMPStatus.ERROR
