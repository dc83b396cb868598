"""DASH manifest model, codec and post-processing."""

from dashenc.manifest.codec import load_manifest, save_manifest
from dashenc.manifest.models import (
    MPD_NAMESPACE,
    AdaptationSet,
    Manifest,
    Period,
    Representation,
)
from dashenc.manifest.postprocess import (
    add_subtitles,
    next_representation_id,
    post_process_manifest,
    post_process_manifest_file,
    strip_program_information,
)

__all__ = [
    "MPD_NAMESPACE",
    "AdaptationSet",
    "Manifest",
    "Period",
    "Representation",
    "add_subtitles",
    "load_manifest",
    "next_representation_id",
    "post_process_manifest",
    "post_process_manifest_file",
    "save_manifest",
    "strip_program_information",
]
