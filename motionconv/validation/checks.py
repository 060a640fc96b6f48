"""Configuration checks against domain rules and the filesystem.

Pure functions over the configuration model: every rule runs and all
violations are returned together, so a single run reports every problem.
Sub-checks at each level (configuration → job → recording → file) return
flat lists that are combined with ``merge``.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable

from motionconv.errors import Violation, ViolationKind
from motionconv.harmonize.grouping import Recording, resolve
from motionconv.models.core import AXES, Configuration, ConversionJob, FileEntry, SourceFormat

logger = logging.getLogger(__name__)


def merge(results: Iterable[list[Violation]]) -> list[Violation]:
    """Flatten sub-check results into one list, preserving order."""
    merged: list[Violation] = []
    for result in results:
        merged.extend(result)
    return merged


def validate(config: Configuration) -> list[Violation]:
    """Check a configuration; an empty list means it may be converted."""
    violations = merge(
        [check_duplicate_names(config.jobs)]
        + [check_job(job) for job in config.jobs]
    )
    logger.debug("Validation found %d violation(s)", len(violations))
    return violations


def check_duplicate_names(jobs: Iterable[ConversionJob]) -> list[Violation]:
    """One DuplicateName per distinct name used more than once."""
    counts = Counter(job.name for job in jobs)
    return [
        Violation(
            kind=ViolationKind.DUPLICATE_NAME,
            message=f"Conversion name '{name}' is used {n} times",
            job=name,
        )
        for name, n in counts.items()
        if n > 1
    ]


def check_job(job: ConversionJob) -> list[Violation]:
    entry_results = [
        check_entry(job, group_index, entry)
        for group_index, group in enumerate(job.groups)
        for entry in group.entries
    ]
    recording_results = [
        check_axis_policy(job.name, job.source_format, recording)
        for recording in resolve(job).recordings
    ]
    return merge(entry_results + recording_results)


def check_entry(job: ConversionJob, group_index: int, entry: FileEntry) -> list[Violation]:
    return merge([
        check_extension(job.name, group_index, entry, job.source_format),
        check_path(job.name, group_index, entry),
    ])


def check_extension(job_name: str, group_index: int, entry: FileEntry, source: SourceFormat) -> list[Violation]:
    """The file extension (case-insensitive) must belong to the source format."""
    actual = entry.extension
    expected = ", ".join(source.acceptable_extensions())
    if not actual:
        return [Violation(
            kind=ViolationKind.NO_EXTENSION,
            message=f"No file extension found: '{entry.path}'",
            job=job_name,
            group_index=group_index,
            path=entry.path,
            expected=expected,
        )]
    if actual not in source.acceptable_extensions():
        return [Violation(
            kind=ViolationKind.INVALID_EXTENSION,
            message=f"Invalid file extension '{actual}'. Expected one of: {expected}.",
            job=job_name,
            group_index=group_index,
            path=entry.path,
            expected=expected,
            actual=actual,
        )]
    return []


def check_path(job_name: str, group_index: int, entry: FileEntry) -> list[Violation]:
    """The path must exist and be a regular file (symlinks are followed)."""
    path = entry.path
    if not path.exists():
        kind, message = ViolationKind.PATH_DOES_NOT_EXIST, f"Path '{path}' does not exist"
    elif not path.is_file():
        kind, message = ViolationKind.PATH_IS_NOT_FILE, f"Path '{path}' is not a file"
    else:
        return []
    return [Violation(kind=kind, message=message, job=job_name, group_index=group_index, path=path)]


def check_axis_policy(job_name: str, source: SourceFormat, recording: Recording) -> list[Violation]:
    """Multi-axis formats need NS/EW/UD exactly once; single-file formats take no axis."""
    if source.is_multi_axis:
        return _check_multi_axis(job_name, recording)
    return _check_single_file(job_name, recording)


def _check_multi_axis(job_name: str, recording: Recording) -> list[Violation]:
    violations = []
    declared = Counter(e.axis for e in recording.entries if e.axis is not None)
    first_group = recording.group_indices[0] if recording.group_indices else None

    for entry, group_index in zip(recording.entries, recording.group_indices):
        if entry.axis is None:
            violations.append(Violation(
                kind=ViolationKind.UNDECLARED_AXIS,
                message=f"File '{entry.path}' does not declare its component (ns, ew, ud)",
                job=job_name,
                group_index=group_index,
                recording_index=recording.index,
                path=entry.path,
            ))

    for axis in AXES:
        n = declared.get(axis, 0)
        if n == 0:
            violations.append(Violation(
                kind=ViolationKind.MISSING_AXIS,
                message=f"No file declares component '{axis.value}'",
                job=job_name,
                group_index=first_group,
                recording_index=recording.index,
                expected=axis.value,
            ))
        elif n > 1:
            paths = ", ".join(str(e.path) for e in recording.entries if e.axis is axis)
            violations.append(Violation(
                kind=ViolationKind.DUPLICATE_AXIS,
                message=f"Component '{axis.value}' is declared {n} times: {paths}",
                job=job_name,
                group_index=first_group,
                recording_index=recording.index,
                actual=axis.value,
            ))
    return violations


def _check_single_file(job_name: str, recording: Recording) -> list[Violation]:
    violations = []
    for entry, group_index in zip(recording.entries, recording.group_indices):
        if entry.axis is not None:
            violations.append(Violation(
                kind=ViolationKind.UNEXPECTED_AXIS,
                message=f"File '{entry.path}' holds all components and must not declare '{entry.axis.value}'",
                job=job_name,
                group_index=group_index,
                recording_index=recording.index,
                path=entry.path,
                actual=entry.axis.value,
            ))
    if len(recording.entries) > 1:
        paths = ", ".join(str(p) for p in recording.paths)
        violations.append(Violation(
            kind=ViolationKind.MULTIPLE_FILES,
            message=f"Grouping key {recording.grouping_key} joins {len(recording.entries)} files: {paths}",
            job=job_name,
            group_index=recording.group_indices[0],
            recording_index=recording.index,
        ))
    return violations
