"""Run conversion jobs: validate, group, extract in parallel, render, write."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from tqdm import tqdm

from motionconv.config import DEFAULT_WORKERS, EXIT_EXTRACTION_FAILURE, EXIT_IO_FAILURE, EXIT_OK
from motionconv.errors import ExtractionError, ValidationFailed
from motionconv.harmonize.grouping import Recording, resolve
from motionconv.models.core import Configuration, ConversionJob, GlobalSettings
from motionconv.parsers import extract
from motionconv.storage.renderers import output_filename, render
from motionconv.validation import validate

logger = logging.getLogger(__name__)


@dataclass
class RecordingResult:
    """Outcome of converting one logical recording."""

    job: str
    job_index: int
    recording_index: int
    paths: list[Path]
    output_path: Path | None = None
    error: str | None = None
    error_kind: str | None = None  # "extraction" or "io"
    element_count: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ConversionReport:
    results: list[RecordingResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[RecordingResult]:
        return [r for r in self.results if r.ok]

    @property
    def failures(self) -> list[RecordingResult]:
        return [r for r in self.results if not r.ok]

    @property
    def exit_code(self) -> int:
        """I/O failures take precedence over extraction failures."""
        kinds = {r.error_kind for r in self.failures}
        if "io" in kinds:
            return EXIT_IO_FAILURE
        if "extraction" in kinds:
            return EXIT_EXTRACTION_FAILURE
        return EXIT_OK

    def summary(self) -> str:
        lines = [
            "Conversion complete:",
            f"  Recordings: {len(self.results)}",
            f"  Written: {len(self.succeeded)}",
            f"  Errors: {len(self.failures)}",
        ]
        for r in self.failures[:20]:
            lines.append(f"  [{r.job} #{r.recording_index}] {r.error}")
        if len(self.failures) > 20:
            lines.append(f"  ... and {len(self.failures) - 20} more")
        return "\n".join(lines)


@dataclass
class _Rendered:
    filename: str
    text: str
    element_count: int


def convert_recording(
    job: ConversionJob,
    recording: Recording,
    settings: GlobalSettings,
) -> _Rendered:
    """Extract and render one recording; raises on failure."""
    waveform = extract(recording, job.source_format, settings)
    return _Rendered(
        filename=output_filename(waveform, job.source_format, job.target_format),
        text=render(waveform, job.target_format),
        element_count=waveform.element_count,
    )


def run_conversion(
    config: Configuration,
    output_dir: Path,
    workers: int = DEFAULT_WORKERS,
    progress: bool = True,
) -> ConversionReport:
    """Run every job of a validated configuration.

    Raises:
        ValidationFailed: the configuration has violations; nothing is
            extracted or written.
    """
    violations = validate(config)
    if violations:
        raise ValidationFailed(violations)

    output_dir.mkdir(parents=True, exist_ok=True)
    settings = config.global_settings

    tasks = [
        (job_index, job, recording)
        for job_index, job in enumerate(config.jobs)
        for recording in resolve(job).recordings
    ]
    logger.info("Converting %d recording(s) from %d job(s)", len(tasks), len(config.jobs))

    outcomes: dict[tuple[int, int], RecordingResult | _Rendered] = {}
    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        futures = {
            executor.submit(convert_recording, job, recording, settings): (job_index, job, recording)
            for job_index, job, recording in tasks
        }
        for fut in tqdm(as_completed(futures), total=len(futures), desc="Converting recordings", disable=not progress):
            job_index, job, recording = futures[fut]
            key = (job_index, recording.index)
            try:
                outcomes[key] = fut.result()
            except ExtractionError as e:
                outcomes[key] = _failure(job_index, job, recording, str(e), "extraction")
            except OSError as e:
                outcomes[key] = _failure(job_index, job, recording, str(e), "io")

    # Write in (job, recording) order so name clashes resolve the same way every run
    report = ConversionReport()
    used_names: set[str] = set()
    for job_index, job, recording in tasks:
        outcome = outcomes[(job_index, recording.index)]
        if isinstance(outcome, RecordingResult):
            report.results.append(outcome)
            continue
        result = RecordingResult(
            job=job.name,
            job_index=job_index,
            recording_index=recording.index,
            paths=recording.paths,
            element_count=outcome.element_count,
        )
        filename = _unique_name(outcome.filename, used_names)
        out_path = output_dir / filename
        try:
            with open(out_path, "w", encoding="utf-8", newline="") as f:
                f.write(outcome.text)
        except OSError as e:
            result.error, result.error_kind = f"Cannot write {out_path}: {e.strerror or e}", "io"
            logger.error("[%s #%d] %s", job.name, recording.index, result.error)
        else:
            result.output_path = out_path
            logger.info("[%s #%d] wrote %s", job.name, recording.index, out_path)
        report.results.append(result)

    logger.info("%d written, %d failed", len(report.succeeded), len(report.failures))
    return report


def _failure(job_index: int, job: ConversionJob, recording: Recording, message: str, kind: str) -> RecordingResult:
    logger.error("[%s #%d] %s", job.name, recording.index, message)
    return RecordingResult(
        job=job.name,
        job_index=job_index,
        recording_index=recording.index,
        paths=recording.paths,
        error=message,
        error_kind=kind,
    )


def _unique_name(filename: str, used: set[str]) -> str:
    name = filename
    if name in used:
        stem, dot, ext = filename.rpartition(".")
        n = 2
        while f"{stem}_{n}{dot}{ext}" in used:
            n += 1
        name = f"{stem}_{n}{dot}{ext}"
        logger.warning("Output name %s already used in this run, writing %s", filename, name)
    used.add(name)
    return name
