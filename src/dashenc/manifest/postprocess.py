"""Post-processing of packager-generated manifests.

The transformations here are pure: they return a new Manifest and leave
their input untouched. :func:`post_process_manifest_file` wraps them with
the load and save steps.
"""

import dataclasses
import logging
from collections.abc import Sequence
from pathlib import Path

from dashenc.domain.models import StreamFile
from dashenc.manifest.codec import load_manifest, save_manifest
from dashenc.manifest.models import AdaptationSet, Manifest, Representation

logger = logging.getLogger(__name__)

SUBTITLE_MIME_TYPE = "text/vtt"
SUBTITLE_CONTENT_TYPE = "text"
SUBTITLE_BANDWIDTH = 256


def strip_program_information(manifest: Manifest) -> Manifest:
    """Return a copy of ``manifest`` without ProgramInformation blocks."""
    return dataclasses.replace(manifest, program_information=[])


def next_representation_id(manifest: Manifest) -> int:
    """First free integer representation id.

    Non-numeric and missing ids are ignored; a document without numeric
    ids starts at 1.
    """
    ids = [
        rep.numeric_id
        for rep in manifest.representations()
        if rep.numeric_id is not None
    ]
    return max(ids, default=0) + 1


def subtitle_adaptation_set(
    subtitle: StreamFile, representation_id: int
) -> AdaptationSet:
    """Build the adaptation set referencing one WebVTT subtitle file."""
    return AdaptationSet(
        mime_type=SUBTITLE_MIME_TYPE,
        lang=subtitle.name,
        content_type=SUBTITLE_CONTENT_TYPE,
        representations=[
            Representation(
                id=str(representation_id),
                bandwidth=SUBTITLE_BANDWIDTH,
                base_urls=[Path(subtitle.path).name],
            )
        ],
    )


def add_subtitles(manifest: Manifest, subtitles: Sequence[StreamFile]) -> Manifest:
    """Return a copy of ``manifest`` with one adaptation set per subtitle.

    Every period gains the subtitle adaptation sets, in subtitle order.
    Each new representation gets a fresh id so ids stay unique across the
    whole document.
    """
    representation_id = next_representation_id(manifest)
    periods = []
    for period in manifest.periods:
        adaptation_sets = list(period.adaptation_sets)
        for subtitle in subtitles:
            adaptation_sets.append(
                subtitle_adaptation_set(subtitle, representation_id)
            )
            representation_id += 1
        periods.append(dataclasses.replace(period, adaptation_sets=adaptation_sets))
    return dataclasses.replace(manifest, periods=periods)


def post_process_manifest(
    manifest: Manifest, subtitles: Sequence[StreamFile]
) -> Manifest:
    """Strip program metadata and merge in out-of-band subtitles."""
    return add_subtitles(strip_program_information(manifest), subtitles)


def post_process_manifest_file(path: Path, subtitles: Sequence[StreamFile]) -> Manifest:
    """Load, post-process and save the manifest at ``path``.

    Args:
        path: Manifest written by the packager.
        subtitles: Subtitle files already relocated next to the manifest.

    Returns:
        The processed manifest, as persisted.

    Raises:
        ManifestError: If the manifest cannot be read or written.
    """
    manifest = post_process_manifest(load_manifest(path), subtitles)
    save_manifest(manifest, path)
    logger.debug(
        "Post-processed manifest %s with %d subtitle track(s)", path, len(subtitles)
    )
    return manifest
