"""The end-to-end encode pipeline."""

from dashenc.pipeline.cleanup import clean_output_files, relocate_subtitle
from dashenc.pipeline.encoder import DashEncoder
from dashenc.pipeline.types import DashEncodeResult

__all__ = [
    "DashEncodeResult",
    "DashEncoder",
    "clean_output_files",
    "relocate_subtitle",
]
