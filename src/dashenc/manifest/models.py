"""In-memory model of a DASH MPD manifest.

Only the parts of the document this package reasons about are modelled as
typed fields (periods, adaptation sets, representations, ids, bandwidth,
base URLs). Every other attribute and child element is carried through
unchanged so a load/save cycle preserves what the packager wrote.
"""

import xml.etree.ElementTree as ET  # nosec B405 - manifests come from our own packager
from collections.abc import Iterator
from dataclasses import dataclass, field

MPD_NAMESPACE = "urn:mpeg:dash:schema:mpd:2011"


@dataclass
class Representation:
    """One concrete encoded rendition."""

    id: str | None = None
    bandwidth: int | None = None
    base_urls: list[str] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)
    """Attributes other than ``id`` and ``bandwidth``."""

    leading: list[ET.Element] = field(default_factory=list)
    """Child elements preceding the BaseURL elements."""

    trailing: list[ET.Element] = field(default_factory=list)
    """Child elements following the BaseURL elements (SegmentBase, ...)."""

    @property
    def numeric_id(self) -> int | None:
        """The id as an integer, or None when absent or non-numeric."""
        if self.id is None:
            return None
        try:
            return int(self.id)
        except ValueError:
            return None


@dataclass
class AdaptationSet:
    """A group of interchangeable representations."""

    mime_type: str | None = None
    lang: str | None = None
    content_type: str | None = None
    representations: list[Representation] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)
    leading: list[ET.Element] = field(default_factory=list)
    trailing: list[ET.Element] = field(default_factory=list)


@dataclass
class Period:
    """A timeline segment of the presentation."""

    id: str | None = None
    adaptation_sets: list[AdaptationSet] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)
    leading: list[ET.Element] = field(default_factory=list)
    trailing: list[ET.Element] = field(default_factory=list)


@dataclass
class Manifest:
    """A DASH Media Presentation Description."""

    periods: list[Period] = field(default_factory=list)
    namespace: str | None = MPD_NAMESPACE
    attributes: dict[str, str] = field(default_factory=dict)
    program_information: list[ET.Element] = field(default_factory=list)
    """ProgramInformation blocks (title, source, copyright)."""

    leading: list[ET.Element] = field(default_factory=list)
    trailing: list[ET.Element] = field(default_factory=list)

    def representations(self) -> Iterator[Representation]:
        """Iterate over every representation in document order."""
        for period in self.periods:
            for adaptation_set in period.adaptation_sets:
                yield from adaptation_set.representations

    @property
    def media_files(self) -> list[str]:
        """Every base URL referenced by a representation, de-duplicated."""
        seen: dict[str, None] = {}
        for representation in self.representations():
            for url in representation.base_urls:
                seen.setdefault(url, None)
        return list(seen)
