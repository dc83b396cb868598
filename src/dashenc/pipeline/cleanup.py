"""Filesystem side effects of the encode pipeline.

Deleting intermediates and relocating subtitle files are kept apart from
the pure planning and manifest code so they can be exercised on their own.
"""

import dataclasses
import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from dashenc.domain.models import StreamFile

logger = logging.getLogger(__name__)


def clean_output_files(paths: Iterable[Path | str]) -> None:
    """Delete files, best effort.

    Missing files are skipped silently. Any other failure is logged and
    does not stop the remaining deletions.

    Args:
        paths: Files to delete.
    """
    for path in paths:
        path = Path(path)
        try:
            if path.is_file():
                logger.debug("Deleting file %s", path)
                path.unlink()
        except OSError as e:
            logger.warning("Unable to delete file %s: %s", path, e)


def relocate_subtitle(stream_file: StreamFile, output_directory: Path) -> StreamFile:
    """Move a subtitle file into ``output_directory``.

    An existing file at the destination is overwritten. The input is not
    modified; the returned StreamFile carries the new path.

    Args:
        stream_file: Subtitle produced by the transcode stage.
        output_directory: Directory holding the manifest.

    Returns:
        StreamFile pointing at the relocated file.

    Raises:
        OSError: If the file cannot be moved.
    """
    source = Path(stream_file.path)
    if not source.is_file():
        raise FileNotFoundError(f"Subtitle file not found: {source}")
    destination = Path(output_directory) / source.name
    if source.resolve() != destination.resolve():
        if destination.exists():
            destination.unlink()
        shutil.move(str(source), str(destination))
        logger.debug("Moved subtitle %s to %s", source, destination)
    return dataclasses.replace(stream_file, path=destination)
