"""File references for form-data file parameters."""

import os
from dataclasses import dataclass
from typing import IO, Any, Union

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class FileReference:
    """A local file attached to a form-data field.

    Resolved once from a caller-supplied path; the handle is only opened
    inside ``is_readable`` and ``open`` and never held between calls.
    """
    path: str

    @classmethod
    def coerce(cls, value: Union["FileReference", PathLike]) -> "FileReference":
        if isinstance(value, FileReference):
            return value
        return cls(os.fspath(value))

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)

    def is_readable(self) -> bool:
        try:
            with open(self.path, "rb"):
                return True
        except OSError:
            return False

    def open(self) -> IO[bytes]:
        return open(self.path, "rb")

    def __str__(self) -> str:
        return self.path


def is_present(value: Any) -> bool:
    """A files-map entry counts only when it is non-empty"""
    if value is None:
        return False
    if isinstance(value, FileReference):
        return value.path != ""
    return os.fspath(value) != ""
