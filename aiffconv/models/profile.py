"""Source format profiles."""

from enum import Enum

from pydantic import BaseModel


class SourceFormat(str, Enum):
    """Supported source formats, one command per format."""

    FLAC = "FLAC"
    WAV = "WAV"
    DSD = "DSD"


class FormatProfile(BaseModel):
    """Per-format settings that parameterize the shared pipeline."""

    source_format: SourceFormat
    label: str
    extensions: tuple[str, ...]
    case_sensitive: bool = True
    default_sample_rate: int | None = None
    default_bit_depth: int | None = None
    description: str = ""

    model_config = {"frozen": True}

    @property
    def extensions_display(self) -> str:
        """Extensions for messages, e.g. '.dsf, .dff'."""
        return ", ".join(self.extensions)

    def matches(self, filename: str) -> bool:
        """Check whether a filename carries one of this profile's extensions."""
        if self.case_sensitive:
            return filename.endswith(self.extensions)
        return filename.lower().endswith(tuple(e.lower() for e in self.extensions))


PROFILES: dict[SourceFormat, FormatProfile] = {
    SourceFormat.FLAC: FormatProfile(
        source_format=SourceFormat.FLAC,
        label="FLAC",
        extensions=(".flac",),
        description="By default, preserves original sample rate and bit depth.",
    ),
    SourceFormat.WAV: FormatProfile(
        source_format=SourceFormat.WAV,
        label="WAV",
        extensions=(".wav",),
        description="By default, preserves original sample rate and bit depth.",
    ),
    # DSD has to be decimated to PCM; a high output rate keeps more of the
    # ultrasonic content than CD rate would.
    SourceFormat.DSD: FormatProfile(
        source_format=SourceFormat.DSD,
        label="DSD",
        extensions=(".dsf", ".dff"),
        case_sensitive=False,
        default_sample_rate=176400,
        default_bit_depth=24,
        description="Default output: 176.4kHz / 24-bit (optimal for DSD conversion).",
    ),
}


def get_profile(source_format: SourceFormat | str) -> FormatProfile:
    """Look up the profile for a source format."""
    return PROFILES[SourceFormat(source_format)]
