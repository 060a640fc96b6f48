"""Group a conversion's declared files into logical recordings.

Grouping keys are scoped to the whole conversion job, not to the FileGroup
they are declared in: two entries carrying the same key in different groups
of one job are merged into a single recording.  Entries without a key are
recordings of their own.  Recordings are emitted in order of first
appearance so repeated runs produce identical output ordering.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from motionconv.models.core import ConversionJob, FileEntry, SourceFormat


@dataclass(frozen=True)
class Recording:
    """One logical recording: the files that together describe one station event."""

    index: int
    entries: tuple[FileEntry, ...]
    group_indices: tuple[int, ...]  # FileGroup index of each entry
    grouping_key: int | None = None

    @property
    def paths(self) -> list[Path]:
        return [e.path for e in self.entries]


@dataclass(frozen=True)
class RecordingGroup:
    """The logical recordings of one conversion job, in deterministic order."""

    source_format: SourceFormat
    recordings: tuple[Recording, ...] = ()

    def __len__(self) -> int:
        return len(self.recordings)


def resolve(job: ConversionJob) -> RecordingGroup:
    """Partition a job's file entries into logical recordings."""
    # Each slot is (key, [(group_index, entry), ...]); keyed slots are found via `by_key`
    slots: list[tuple[int | None, list[tuple[int, FileEntry]]]] = []
    by_key: dict[int, int] = {}

    for group_index, group in enumerate(job.groups):
        for entry in group.entries:
            key = entry.grouping_key
            if key is None:
                slots.append((None, [(group_index, entry)]))
            elif key in by_key:
                slots[by_key[key]][1].append((group_index, entry))
            else:
                by_key[key] = len(slots)
                slots.append((key, [(group_index, entry)]))

    recordings = tuple(
        Recording(
            index=i,
            entries=tuple(entry for _, entry in members),
            group_indices=tuple(g for g, _ in members),
            grouping_key=key,
        )
        for i, (key, members) in enumerate(slots)
    )
    return RecordingGroup(source_format=job.source_format, recordings=recordings)
