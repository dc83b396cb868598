"""Loading and saving MPD manifests.

The codec maps the XML document onto :mod:`dashenc.manifest.models` and
back. Elements the model does not know about are kept as ElementTree
elements and written back in their original position.
"""

import copy
import logging
import xml.etree.ElementTree as ET  # nosec B405 - manifests come from our own packager
from pathlib import Path

from dashenc.exceptions import ManifestError
from dashenc.manifest.models import (
    AdaptationSet,
    Manifest,
    Period,
    Representation,
)

logger = logging.getLogger(__name__)

ET.register_namespace("", "urn:mpeg:dash:schema:mpd:2011")


def _split_tag(tag: str) -> tuple[str | None, str]:
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return None, tag


def _local(element: ET.Element) -> str:
    return _split_tag(element.tag)[1]


def _qualify(namespace: str | None, local: str) -> str:
    return f"{{{namespace}}}{local}" if namespace else local


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _split_children(
    element: ET.Element, name: str
) -> tuple[list[ET.Element], list[ET.Element], list[ET.Element]]:
    """Split children into (before first ``name``, ``name`` elements, rest)."""
    leading: list[ET.Element] = []
    matched: list[ET.Element] = []
    trailing: list[ET.Element] = []
    for child in element:
        if _local(child) == name:
            matched.append(child)
        elif matched:
            trailing.append(child)
        else:
            leading.append(child)
    return leading, matched, trailing


def _without(attributes: dict[str, str], *names: str) -> dict[str, str]:
    return {k: v for k, v in attributes.items() if k not in names}


def _parse_representation(element: ET.Element) -> Representation:
    leading, base_urls, trailing = _split_children(element, "BaseURL")
    return Representation(
        id=element.get("id"),
        bandwidth=_parse_int(element.get("bandwidth")),
        base_urls=[(url.text or "").strip() for url in base_urls],
        attributes=_without(dict(element.attrib), "id", "bandwidth"),
        leading=leading,
        trailing=trailing,
    )


def _parse_adaptation_set(element: ET.Element) -> AdaptationSet:
    leading, representations, trailing = _split_children(element, "Representation")
    return AdaptationSet(
        mime_type=element.get("mimeType"),
        lang=element.get("lang"),
        content_type=element.get("contentType"),
        representations=[_parse_representation(r) for r in representations],
        attributes=_without(dict(element.attrib), "mimeType", "lang", "contentType"),
        leading=leading,
        trailing=trailing,
    )


def _parse_period(element: ET.Element) -> Period:
    leading, adaptation_sets, trailing = _split_children(element, "AdaptationSet")
    return Period(
        id=element.get("id"),
        adaptation_sets=[_parse_adaptation_set(a) for a in adaptation_sets],
        attributes=_without(dict(element.attrib), "id"),
        leading=leading,
        trailing=trailing,
    )


def parse_manifest(root: ET.Element) -> Manifest:
    """Build a Manifest from a parsed MPD root element.

    Raises:
        ManifestError: If the root element is not an MPD.
    """
    namespace, local = _split_tag(root.tag)
    if local != "MPD":
        raise ManifestError(f"Expected an MPD document, found <{local}>")

    program_information: list[ET.Element] = []
    children: list[ET.Element] = []
    for child in root:
        if _local(child) == "ProgramInformation":
            program_information.append(child)
        else:
            children.append(child)

    container = ET.Element(root.tag)
    container.extend(children)
    leading, periods, trailing = _split_children(container, "Period")

    return Manifest(
        periods=[_parse_period(p) for p in periods],
        namespace=namespace,
        attributes=dict(root.attrib),
        program_information=program_information,
        leading=leading,
        trailing=trailing,
    )


def load_manifest(path: Path) -> Manifest:
    """Load a manifest from disk.

    Args:
        path: Path to the MPD file.

    Returns:
        Parsed Manifest.

    Raises:
        ManifestError: If the file is missing or is not a valid MPD.
    """
    try:
        tree = ET.parse(path)  # nosec B314 - trusted packager output
    except FileNotFoundError as e:
        raise ManifestError(f"Manifest not found: {path}", path) from e
    except (ET.ParseError, OSError) as e:
        raise ManifestError(f"Could not read manifest {path}: {e}", path) from e
    return parse_manifest(tree.getroot())


def _copy_all(elements: list[ET.Element]) -> list[ET.Element]:
    return [copy.deepcopy(element) for element in elements]


def _build_representation(namespace: str | None, rep: Representation) -> ET.Element:
    element = ET.Element(_qualify(namespace, "Representation"))
    if rep.id is not None:
        element.set("id", rep.id)
    for key, value in rep.attributes.items():
        element.set(key, value)
    if rep.bandwidth is not None:
        element.set("bandwidth", str(rep.bandwidth))
    element.extend(_copy_all(rep.leading))
    for url in rep.base_urls:
        ET.SubElement(element, _qualify(namespace, "BaseURL")).text = url
    element.extend(_copy_all(rep.trailing))
    return element


def _build_adaptation_set(
    namespace: str | None, adaptation_set: AdaptationSet
) -> ET.Element:
    element = ET.Element(_qualify(namespace, "AdaptationSet"))
    for key, value in (
        ("mimeType", adaptation_set.mime_type),
        ("lang", adaptation_set.lang),
        ("contentType", adaptation_set.content_type),
    ):
        if value is not None:
            element.set(key, value)
    for key, value in adaptation_set.attributes.items():
        element.set(key, value)
    element.extend(_copy_all(adaptation_set.leading))
    for rep in adaptation_set.representations:
        element.append(_build_representation(namespace, rep))
    element.extend(_copy_all(adaptation_set.trailing))
    return element


def _build_period(namespace: str | None, period: Period) -> ET.Element:
    element = ET.Element(_qualify(namespace, "Period"))
    if period.id is not None:
        element.set("id", period.id)
    for key, value in period.attributes.items():
        element.set(key, value)
    element.extend(_copy_all(period.leading))
    for adaptation_set in period.adaptation_sets:
        element.append(_build_adaptation_set(namespace, adaptation_set))
    element.extend(_copy_all(period.trailing))
    return element


def build_manifest_element(manifest: Manifest) -> ET.Element:
    """Build the MPD root element for a Manifest."""
    namespace = manifest.namespace
    root = ET.Element(_qualify(namespace, "MPD"), dict(manifest.attributes))
    root.extend(_copy_all(manifest.program_information))
    root.extend(_copy_all(manifest.leading))
    for period in manifest.periods:
        root.append(_build_period(namespace, period))
    root.extend(_copy_all(manifest.trailing))
    return root


def save_manifest(manifest: Manifest, path: Path) -> None:
    """Write a manifest to disk, replacing any existing file.

    Args:
        manifest: Manifest to write.
        path: Destination path.

    Raises:
        ManifestError: If the file cannot be written.
    """
    root = build_manifest_element(manifest)
    ET.indent(root)
    try:
        ET.ElementTree(root).write(path, encoding="utf-8", xml_declaration=True)
    except OSError as e:
        raise ManifestError(f"Could not write manifest {path}: {e}", path) from e
    logger.debug("Saved manifest %s", path)
