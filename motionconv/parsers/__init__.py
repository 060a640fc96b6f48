"""Source-format extractors.

Each extractor turns one logical recording into a CanonicalWaveform and is
picked by the job's source format; there is no content sniffing.
"""

from __future__ import annotations

from collections.abc import Callable

from motionconv.errors import ExtractionError, MalformedHeader
from motionconv.harmonize.grouping import Recording
from motionconv.models.core import GlobalSettings, SourceFormat
from motionconv.models.waveform import CanonicalWaveform
from motionconv.parsers.afad_parser import extract_afad
from motionconv.parsers.geonet_parser import extract_geonet_v1a, extract_geonet_v2a
from motionconv.parsers.knet_parser import extract_knet
from motionconv.parsers.sac_parser import extract_palert
from motionconv.parsers.scsn_parser import extract_scsn

Extractor = Callable[[Recording, GlobalSettings], CanonicalWaveform]

EXTRACTORS: dict[SourceFormat, Extractor] = {
    SourceFormat.JP_NIED_KNET: extract_knet,
    SourceFormat.US_SCSN_V2: extract_scsn,
    SourceFormat.NZ_GEONET_V1A: extract_geonet_v1a,
    SourceFormat.NZ_GEONET_V2A: extract_geonet_v2a,
    SourceFormat.TW_PALERT_SAC: extract_palert,
    SourceFormat.TK_AFAD_ASC: extract_afad,
}


def extract(recording: Recording, source: SourceFormat, settings: GlobalSettings | None = None) -> CanonicalWaveform:
    """Extract one recording with the extractor registered for ``source``.

    Value errors a parser lets through from header arithmetic (dates, offsets)
    are reported as a MalformedHeader of the recording's first file.
    """
    try:
        return EXTRACTORS[source](recording, settings or GlobalSettings())
    except ExtractionError:
        raise
    except (ValueError, OverflowError) as e:
        path = recording.entries[0].path if recording.entries else None
        raise MalformedHeader(f"Invalid header value: {e}", path) from e


__all__ = ["EXTRACTORS", "Extractor", "extract"]
