"""Tests for recording grouping."""

from __future__ import annotations

from pathlib import Path

from motionconv.harmonize.grouping import resolve
from motionconv.models.core import Axis, ConversionJob, FileEntry, FileGroup, SourceFormat, TargetFormat


def _job(*groups, source=SourceFormat.JP_NIED_KNET) -> ConversionJob:
    return ConversionJob(
        name="job",
        source_format=source,
        target_format=TargetFormat.JP_JMA_CSV,
        groups=tuple(FileGroup(entries=tuple(g)) for g in groups),
    )


class TestResolve:
    def test_key_shared_across_groups_merges(self):
        a = FileEntry(Path("a.ns"), Axis.NS, 5)
        b = FileEntry(Path("b.ew"), Axis.EW, 5)
        result = resolve(_job([a], [b]))

        assert len(result) == 1
        rec = result.recordings[0]
        assert rec.entries == (a, b)
        assert rec.group_indices == (0, 1)
        assert rec.grouping_key == 5

    def test_keyless_entries_are_singletons(self):
        entries = [FileEntry(Path("a.v2")), FileEntry(Path("b.v2"))]
        result = resolve(_job(entries, source=SourceFormat.US_SCSN_V2))
        assert [r.paths for r in result.recordings] == [[Path("a.v2")], [Path("b.v2")]]
        assert [r.index for r in result.recordings] == [0, 1]

    def test_order_of_first_appearance(self):
        e1 = FileEntry(Path("s2.ns"), Axis.NS, 2)
        e2 = FileEntry(Path("s1.ns"), Axis.NS, 1)
        e3 = FileEntry(Path("s2.ew"), Axis.EW, 2)
        e4 = FileEntry(Path("loose.ud"), Axis.UD)
        e5 = FileEntry(Path("s1.ew"), Axis.EW, 1)
        result = resolve(_job([e1, e2], [e3, e4, e5]))

        assert [r.grouping_key for r in result.recordings] == [2, 1, None]
        assert result.recordings[0].entries == (e1, e3)
        assert result.recordings[1].entries == (e2, e5)
        assert result.recordings[2].entries == (e4,)

    def test_deterministic(self):
        job = _job(
            [FileEntry(Path(f"s{k}.{a.value}"), a, k) for k in (3, 1, 2) for a in Axis],
        )
        assert resolve(job) == resolve(job)

    def test_every_entry_in_exactly_one_recording(self):
        entries = [FileEntry(Path(f"f{i}.ns"), Axis.NS, i % 3 if i % 2 else None) for i in range(9)]
        result = resolve(_job(entries[:4], entries[4:]))
        flattened = [e for r in result.recordings for e in r.entries]
        assert sorted(map(str, (e.path for e in flattened))) == sorted(str(e.path) for e in entries)

    def test_empty_job(self):
        result = resolve(_job())
        assert len(result) == 0
        assert result.recordings == ()
        assert result.source_format is SourceFormat.JP_NIED_KNET
