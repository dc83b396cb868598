"""Result type of the encode pipeline."""

from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from dashenc.manifest.models import Manifest


@dataclass(frozen=True)
class DashEncodeResult:
    """Outcome of a successful encode.

    Attributes:
        manifest: The post-processed manifest, as written to disk.
        tags: Container tags of the source (lower-cased keys).
        duration: Source duration.
        manifest_path: Location of the written manifest.
    """

    manifest: Manifest
    tags: dict[str, str] = field(default_factory=dict)
    duration: timedelta = timedelta(0)
    manifest_path: Path = Path()

    @property
    def media_files(self) -> list[str]:
        """File names referenced by the manifest, relative to its directory."""
        return self.manifest.media_files
