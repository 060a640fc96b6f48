"""Violations and exceptions raised across the conversion pipeline.

Configuration problems are collected as ``Violation`` records and reported
in one batch.  Problems found while reading a source file are raised as
``ExtractionError`` subclasses (bad content) or ``SourceReadError`` (bad
environment), and are collected per recording by the job driver.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ViolationKind(Enum):
    DUPLICATE_NAME = "DuplicateName"
    NO_EXTENSION = "NoExtension"
    INVALID_EXTENSION = "InvalidExtension"
    PATH_DOES_NOT_EXIST = "PathDoesNotExist"
    PATH_IS_NOT_FILE = "PathIsNotFile"
    MISSING_AXIS = "MissingAxis"
    DUPLICATE_AXIS = "DuplicateAxis"
    UNDECLARED_AXIS = "UndeclaredAxis"
    UNEXPECTED_AXIS = "UnexpectedAxis"
    MULTIPLE_FILES = "MultipleFiles"


@dataclass(frozen=True)
class Violation:
    """One configuration rule violation, with enough context to locate it."""

    kind: ViolationKind
    message: str
    job: str = ""
    group_index: int | None = None
    recording_index: int | None = None
    path: Path | None = None
    expected: str = ""
    actual: str = ""

    def __str__(self) -> str:
        where = [f"conversion '{self.job}'"] if self.job else []
        if self.group_index is not None:
            where.append(f"group {self.group_index}")
        if self.recording_index is not None:
            where.append(f"recording {self.recording_index}")
        prefix = f"[{', '.join(where)}] " if where else ""
        return f"{prefix}{self.kind.value}: {self.message}"


class ConfigurationError(ValueError):
    """The configuration document could not be read into the model."""

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "invalid configuration")


class ValidationFailed(Exception):
    """Raised by the job driver when the configuration has violations."""

    def __init__(self, violations: list[Violation]):
        self.violations = list(violations)
        super().__init__(f"{len(self.violations)} configuration violation(s)")


class ExtractionError(ValueError):
    """A source file does not match its format's documented layout."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(f"{message} ({path})" if path is not None else message)


class MalformedHeader(ExtractionError):
    pass


class UnexpectedEof(ExtractionError):
    pass


class InvalidNumericField(ExtractionError):
    pass


class InconsistentAxes(ExtractionError):
    """The three axes of a recording disagree on sample count, rate or direction."""


class SourceReadError(OSError):
    """A source file passed validation but could not be read."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot read {path}: {cause.strerror or cause}")
