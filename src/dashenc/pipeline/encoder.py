"""End-to-end DASH encode pipeline.

DashEncoder runs one source file through the stages of
:class:`~dashenc.domain.enums.PipelineStage` strictly in order:

1. Validating - caller input is checked; violations raise ValidationError.
2. Probing - the source is probed; failures raise ProbeError.
3. Planning - framerate/keyframe defaults, quality crushing, ffmpeg plan.
4. Transcoding - ffmpeg produces intermediates in the working directory.
5. PackagingPrep - audio/video intermediates are selected for packaging.
6. Packaging - MP4Box writes the manifest; intermediates are deleted.
7. PostProcessing - subtitles are relocated and merged into the manifest.

Failures of the external tools are not raised. They are logged, partial
output is removed and generate_dash returns None.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable, Sequence
from datetime import timedelta
from pathlib import Path

from dashenc.config.models import DashEncConfig, EncoderConfig
from dashenc.core.sinks import LineSink, LoggerSink, ProgressSink, null_sink
from dashenc.domain.enums import PipelineStage, StreamType
from dashenc.domain.models import (
    CommandPlan,
    EncodeOptions,
    Quality,
    SourceMetadata,
    StreamFile,
)
from dashenc.exceptions import ExternalToolError, ManifestError, ValidationError
from dashenc.executor.command import (
    MANIFEST_EXTENSION,
    SEGMENT_SUFFIX,
    build_package_plan,
    build_transcode_plan,
    resolve_framerate,
    resolve_keyframe_interval,
)
from dashenc.executor.interface import require_tool
from dashenc.executor.process import ProcessRunner, SubprocessRunner
from dashenc.introspector.ffprobe import FFprobeProber
from dashenc.introspector.interface import Prober
from dashenc.introspector.parsers import interpret_probe_output
from dashenc.ladder.crush import crush_qualities, validate_qualities
from dashenc.logging.context import job_context
from dashenc.manifest.postprocess import post_process_manifest_file
from dashenc.pipeline.cleanup import clean_output_files, relocate_subtitle
from dashenc.pipeline.types import DashEncodeResult
from dashenc.tools.ffmpeg_progress import ProgressTracker

logger = logging.getLogger(__name__)

# Default destination of external tool diagnostics
tool_logger = logging.getLogger("dashenc.tools")

StageListener = Callable[[PipelineStage], None]


class DashEncoder:
    """Converts media files into MPEG-DASH presentations.

    An encoder holds only read-only configuration and collaborators, so one
    instance may serve concurrent encodes that target distinct output
    directories and base names.
    """

    def __init__(
        self,
        ffmpeg_path: Path | str = "ffmpeg",
        ffprobe_path: Path | str = "ffprobe",
        mp4box_path: Path | str = "MP4Box",
        working_directory: Path | None = None,
        stdout_sink: LineSink | None = None,
        diagnostic_sink: LineSink | None = None,
        runner: ProcessRunner | None = None,
        prober: Prober | None = None,
        config: EncoderConfig | None = None,
    ) -> None:
        """Initialize the encoder.

        Args:
            ffmpeg_path: Path or command name of ffmpeg.
            ffprobe_path: Path or command name of ffprobe.
            mp4box_path: Path or command name of MP4Box.
            working_directory: Directory for intermediate files. Defaults to
                the configured working directory, then the system temp dir.
            stdout_sink: Receives stdout lines of ffmpeg and MP4Box.
            diagnostic_sink: Receives stderr lines of ffmpeg and MP4Box.
                Defaults to DEBUG records on the ``dashenc.tools`` logger.
            runner: Process runner (tests substitute a fake).
            prober: Source prober. Defaults to ffprobe at ``ffprobe_path``.
            config: Encoder options (crushing, stream copying, ...).

        Raises:
            ValidationError: If the working directory does not exist.
        """
        self.config = config or EncoderConfig()
        self.ffmpeg_path = ffmpeg_path
        self.ffprobe_path = ffprobe_path
        self.mp4box_path = mp4box_path
        self.working_directory = Path(
            working_directory
            or self.config.working_directory
            or tempfile.gettempdir()
        )
        if not self.working_directory.is_dir():
            raise ValidationError(
                f"Working directory does not exist: {self.working_directory}"
            )

        self._stdout = stdout_sink or null_sink
        self._diagnostics = diagnostic_sink or LoggerSink(tool_logger)
        self._runner = runner or SubprocessRunner()
        self._prober = prober or FFprobeProber(
            ffprobe_path, timeout=self.config.probe_timeout
        )

    @classmethod
    def from_config(
        cls,
        config: DashEncConfig,
        stdout_sink: LineSink | None = None,
        diagnostic_sink: LineSink | None = None,
    ) -> DashEncoder:
        """Build an encoder from configuration.

        Tool paths are resolved eagerly so a missing tool fails before any
        encode starts.

        Raises:
            ToolNotFoundError: If ffmpeg, ffprobe or MP4Box cannot be found.
            ValidationError: If the working directory does not exist.
        """
        return cls(
            ffmpeg_path=require_tool("ffmpeg", config.tools.ffmpeg),
            ffprobe_path=require_tool("ffprobe", config.tools.ffprobe),
            mp4box_path=require_tool("mp4box", config.tools.mp4box),
            working_directory=config.encoder.working_directory,
            stdout_sink=stdout_sink,
            diagnostic_sink=diagnostic_sink,
            config=config.encoder,
        )

    @property
    def disable_quality_crushing(self) -> bool:
        return self.config.disable_quality_crushing

    @property
    def enable_stream_copying(self) -> bool:
        return self.config.enable_stream_copying

    def probe(self, input_path: Path) -> SourceMetadata:
        """Probe a source file.

        Raises:
            ProbeError: If the prober fails or its output is malformed.
        """
        return interpret_probe_output(
            self._prober.probe(input_path), source=str(input_path)
        )

    def generate_dash(
        self,
        input_path: Path | str,
        output_basename: str,
        framerate: int = 0,
        keyframe_interval: int = 0,
        qualities: Sequence[Quality] | None = None,
        options: EncodeOptions | None = None,
        output_directory: Path | str | None = None,
        progress: ProgressSink | None = None,
        on_stage: StageListener | None = None,
    ) -> DashEncodeResult | None:
        """Convert a media file into a DASH manifest and its media files.

        Files in the output directory sharing ``output_basename`` are
        overwritten.

        Args:
            input_path: The media file to convert.
            output_basename: Base name of every output file.
            framerate: Output framerate; 0 uses the source framerate.
            keyframe_interval: Keyframe interval in frames; 0 uses three
                times the framerate.
            qualities: Ladder to encode. Bitrates must be distinct.
            options: Encoder selection and extra ffmpeg flags.
            output_directory: Directory for the manifest and media files.
                Defaults to the working directory.
            progress: Receives transcode completion fractions in [0, 1].
            on_stage: Notified as the encode enters each stage.

        Returns:
            DashEncodeResult, or None if ffmpeg or MP4Box failed.

        Raises:
            ValidationError: If the input, output directory, base name or
                ladder is invalid.
            ProbeError: If the source cannot be probed.
        """
        notify = on_stage or null_sink
        options = options or EncodeOptions()
        input_path = Path(input_path)
        output_directory = (
            Path(output_directory) if output_directory else self.working_directory
        )

        with job_context(input_path, output_basename or None):
            notify(PipelineStage.VALIDATING)
            ladder = list(qualities or ())
            self._validate(input_path, output_basename, ladder, output_directory)

            notify(PipelineStage.PROBING)
            metadata = self.probe(input_path)

            try:
                result = self._run_stages(
                    input_path,
                    output_basename,
                    framerate,
                    keyframe_interval,
                    ladder,
                    options,
                    output_directory,
                    metadata,
                    progress,
                    notify,
                )
            except (ExternalToolError, ManifestError) as e:
                logger.error("Encode of %s failed: %s", input_path, e)
                notify(PipelineStage.FAILED)
                return None

            notify(PipelineStage.DONE)
            logger.info("Generated %s", result.manifest_path)
            return result

    def _validate(
        self,
        input_path: Path,
        output_basename: str,
        qualities: Sequence[Quality],
        output_directory: Path,
    ) -> None:
        if not input_path.is_file():
            raise ValidationError(f"Input path does not exist: {input_path}")
        if not output_directory.is_dir():
            raise ValidationError(
                f"Output directory does not exist: {output_directory}"
            )
        if not output_basename:
            raise ValidationError("Output filename is empty.")
        validate_qualities(qualities)

    def _run_stages(
        self,
        input_path: Path,
        output_basename: str,
        framerate: int,
        keyframe_interval: int,
        qualities: Sequence[Quality],
        options: EncodeOptions,
        output_directory: Path,
        metadata: SourceMetadata,
        progress: ProgressSink | None,
        notify: StageListener,
    ) -> DashEncodeResult:
        notify(PipelineStage.PLANNING)
        framerate = resolve_framerate(framerate, metadata)
        keyframe_interval = resolve_keyframe_interval(keyframe_interval, framerate)
        ladder = list(qualities)
        if not self.disable_quality_crushing:
            ladder = crush_qualities(
                ladder, metadata.bitrate_kbps, self.config.crush_tolerance
            )
        ladder = sorted(ladder, key=lambda q: q.bitrate, reverse=True)

        transcode_plan = build_transcode_plan(
            input_path=input_path,
            output_directory=self.working_directory,
            output_basename=output_basename,
            options=options,
            framerate=framerate,
            keyframe_interval=keyframe_interval,
            qualities=ladder,
            metadata=metadata,
            default_bitrate=metadata.bitrate_kbps,
            enable_stream_copying=self.enable_stream_copying,
        )

        notify(PipelineStage.TRANSCODING)
        self._transcode(transcode_plan, metadata, progress)

        notify(PipelineStage.PACKAGING_PREP)
        media_pieces = transcode_plan.pieces_of(StreamType.VIDEO, StreamType.AUDIO)
        package_plan = build_package_plan(
            input_files=[piece.path for piece in media_pieces],
            output_path=output_directory / f"{output_basename}{MANIFEST_EXTENSION}",
            keyframe_interval=keyframe_interval,
            framerate=framerate,
        )

        notify(PipelineStage.PACKAGING)
        logger.info("Running MP4Box with arguments: %s", package_plan.rendered)
        try:
            package_result = self._runner.run(
                self.mp4box_path,
                package_plan.arguments,
                on_stdout=self._stdout,
                on_stderr=self._diagnostics,
            )
        finally:
            clean_output_files(piece.path for piece in media_pieces)

        notify(PipelineStage.POST_PROCESSING)
        subtitles = self._relocate_subtitles(
            transcode_plan.pieces_of(StreamType.SUBTITLE), output_directory
        )
        manifest_path = package_plan.pieces[0].path
        # Everything this encode may have left in the output directory
        package_output = [
            *(
                output_directory / f"{piece.path.stem}{SEGMENT_SUFFIX}"
                for piece in media_pieces
            ),
            *(subtitle.path for subtitle in subtitles),
            *package_result.output,
            manifest_path,
        ]

        try:
            if not manifest_path.is_file():
                raise ManifestError(
                    f"MP4Box did not produce the expected manifest at {manifest_path}",
                    path=manifest_path,
                )
            manifest = post_process_manifest_file(manifest_path, subtitles)
        except ManifestError as e:
            clean_output_files(package_output)
            if not package_result.success:
                raise ExternalToolError("MP4Box", package_result.exit_code) from e
            raise

        result = DashEncodeResult(
            manifest=manifest,
            tags=dict(metadata.tags),
            duration=self._source_duration(metadata),
            manifest_path=manifest_path,
        )

        if not package_result.success:
            clean_output_files(output_directory / name for name in result.media_files)
            clean_output_files(package_output)
            raise ExternalToolError("MP4Box", package_result.exit_code)

        return result

    def _transcode(
        self,
        plan: CommandPlan,
        metadata: SourceMetadata,
        progress: ProgressSink | None,
    ) -> None:
        tracker = ProgressTracker(
            metadata.duration, progress=progress, diagnostics=self._diagnostics
        )
        logger.info("Running ffmpeg with arguments: %s", plan.rendered)
        result = self._runner.run(
            self.ffmpeg_path,
            plan.arguments,
            on_stdout=self._stdout,
            on_stderr=tracker,
        )
        if not result.success:
            clean_output_files(plan.paths)
            raise ExternalToolError("ffmpeg", result.exit_code)

    @staticmethod
    def _relocate_subtitles(
        subtitles: Sequence[StreamFile], output_directory: Path
    ) -> list[StreamFile]:
        relocated = []
        for subtitle in subtitles:
            try:
                relocated.append(relocate_subtitle(subtitle, output_directory))
            except OSError as e:
                # ffmpeg may skip empty subtitle streams
                logger.warning("Skipping subtitle %s: %s", subtitle.path, e)
        return relocated

    @staticmethod
    def _source_duration(metadata: SourceMetadata) -> timedelta:
        seconds = None
        if metadata.video_streams:
            seconds = metadata.video_streams[0].duration
        if seconds is None:
            seconds = metadata.duration
        return timedelta(seconds=seconds or 0)
