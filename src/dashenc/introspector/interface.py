"""Prober interface for source metadata extraction."""

from pathlib import Path
from typing import Any, Protocol


class Prober(Protocol):
    """Protocol for media probing implementations.

    A prober returns the raw structured probe document for a file; turning
    it into :class:`~dashenc.domain.models.SourceMetadata` is the job of
    :func:`dashenc.introspector.parsers.interpret_probe_output`.
    """

    def probe(self, path: Path) -> dict[str, Any]:
        """Probe a media file.

        Args:
            path: Path to the media file.

        Returns:
            Probe document with ``streams`` and ``format`` entries.

        Raises:
            ProbeError: If the file cannot be probed.
        """
        ...
