"""
Data models for the video localization pipeline.
"""

import re
import time
from dataclasses import dataclass, field
from typing import Literal

_TS_RE = re.compile(r"^\s*(\d{1,2}):(\d{2}):(\d{2})[,.](\d{3})\s*$")

JobStatus = Literal["waiting", "processing", "completed", "error"]
ArtifactType = Literal["subtitle-srt", "subtitle-vtt", "titles-descriptions"]
TranscriptSource = Literal["uploaded", "captions", "stt", "sample"]


@dataclass(frozen=True, order=True)
class Timestamp:
    """A subtitle timestamp (HH:MM:SS,mmm)."""

    hours: int
    minutes: int
    seconds: int
    milliseconds: int

    def __post_init__(self) -> None:
        if self.hours < 0:
            raise ValueError(f"hours out of range: {self.hours}")
        if not 0 <= self.minutes <= 59:
            raise ValueError(f"minutes out of range: {self.minutes}")
        if not 0 <= self.seconds <= 59:
            raise ValueError(f"seconds out of range: {self.seconds}")
        if not 0 <= self.milliseconds <= 999:
            raise ValueError(f"milliseconds out of range: {self.milliseconds}")

    @classmethod
    def parse(cls, value: str) -> "Timestamp":
        """Parse ``H:MM:SS,mmm`` or ``H:MM:SS.mmm``."""
        m = _TS_RE.match(value)
        if not m:
            raise ValueError(f"Invalid timestamp: {value!r}")
        h, mi, s, ms = map(int, m.groups())
        return cls(h, mi, s, ms)

    @classmethod
    def from_milliseconds(cls, total_ms: int) -> "Timestamp":
        total_ms = max(0, int(total_ms))
        h = total_ms // 3_600_000
        m = (total_ms % 3_600_000) // 60_000
        s = (total_ms % 60_000) // 1000
        return cls(h, m, s, total_ms % 1000)

    @property
    def total_milliseconds(self) -> int:
        return ((self.hours * 60 + self.minutes) * 60 + self.seconds) * 1000 + self.milliseconds

    def format(self, separator: str = ",") -> str:
        """Format as SRT (comma) or WebVTT (period) timestamp."""
        return f"{self.hours:02}:{self.minutes:02}:{self.seconds:02}{separator}{self.milliseconds:03}"

    def __str__(self) -> str:
        return self.format(",")


@dataclass
class TimedBlock:
    """A single subtitle entry: sequence number, time range and text lines."""

    index: int
    start: Timestamp
    end: Timestamp
    lines: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.index < 1:
            raise ValueError(f"Block index must be >= 1, got {self.index}")
        if self.start > self.end:
            raise ValueError(f"Block {self.index} starts after it ends ({self.start} > {self.end})")

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass
class TranslationChunk:
    """A contiguous group of raw SRT blocks submitted in one request."""

    position: int  # 1-based
    blocks: list[str]

    @property
    def text(self) -> str:
        return "\n\n".join(self.blocks)


@dataclass
class TranscriptionSegment:
    """A speech-to-text segment in milliseconds."""

    start_ms: int
    end_ms: int
    text: str


@dataclass
class CaptionTrack:
    """A caption track offered by the video platform."""

    base_url: str
    language_code: str | None = None
    kind: str | None = None  # "asr" for auto-generated
    name: str | None = None
    vss_id: str | None = None


@dataclass
class TranslatedMetadata:
    """Video title and description in one language."""

    title: str
    description: str


@dataclass
class PreparedTranscript:
    """Source-language transcript and where it came from."""

    srt: str
    source: TranscriptSource


@dataclass
class LanguageResult:
    """Everything produced for a single target language."""

    language: str
    srt: str
    vtt: str
    title: str
    description: str


@dataclass
class Job:
    """A localization job and its progress."""

    id: str
    title: str
    source_kind: Literal["youtube", "upload"]
    languages: list[str]
    source_language: str = "ro"
    generate_subtitles: bool = True
    generate_translations: bool = True
    status: JobStatus = "waiting"
    progress: float = 0.0
    created_at: float = field(default_factory=time.time)
    completed_at: float | None = None
    error_message: str | None = None


@dataclass
class Artifact:
    """A downloadable file produced by a job."""

    id: str
    job_id: str
    language: str
    filename: str
    content_type: str
    type: ArtifactType
    size_bytes: int
