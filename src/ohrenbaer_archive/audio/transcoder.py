"""Re-encode downloaded episodes with ffmpeg."""

import asyncio
import logging
import shutil
from pathlib import Path

from ohrenbaer_archive.audio.models import TaskStatus
from ohrenbaer_archive.utils.errors import EncodeError, EncoderNotFoundError

logger = logging.getLogger(__name__)

ENCODER_BINARY = "ffmpeg"
OUTPUT_EXTENSION = ".m4a"
AUDIO_CODEC = "aac"
AUDIO_BITRATE = "96k"  # Plenty for spoken-word content

# Number of stderr characters kept in EncodeError messages
STDERR_TAIL = 500


def transcode_output_path(input_path: Path) -> Path:
    """Output path for a transcoded file: same name, ``.m4a`` extension."""
    return input_path.with_suffix(OUTPUT_EXTENSION)


class TranscodeAgent:
    """Convert a downloaded MP3 to AAC in an M4A container."""

    def __init__(self, encoder: str = ENCODER_BINARY, bitrate: str = AUDIO_BITRATE):
        self.encoder = encoder
        self.bitrate = bitrate

    def ensure_available(self) -> str:
        """Resolve the encoder binary on PATH.

        Returns:
            Absolute path of the encoder

        Raises:
            EncoderNotFoundError: If the encoder cannot be found
        """
        resolved = shutil.which(self.encoder)
        if resolved is None:
            raise EncoderNotFoundError(
                f"{self.encoder} is not installed - it is required for --convert"
            )
        return resolved

    def build_command(self, input_path: Path, output_path: Path) -> list[str]:
        return [
            self.encoder,
            "-nostdin",
            "-y",  # Existing output is only reached in force mode
            "-loglevel",
            "error",
            "-i",
            str(input_path),
            "-c:a",
            AUDIO_CODEC,
            "-b:a",
            self.bitrate,
            str(output_path),
        ]

    async def transcode(
        self,
        input_path: Path,
        force: bool = False,
        dry_run: bool = False,
    ) -> TaskStatus:
        """Encode ``input_path`` next to itself as ``.m4a``.

        Args:
            input_path: Downloaded media file
            force: Re-encode even if the output exists
            dry_run: Only log the intended conversion

        Returns:
            TaskStatus.CONVERTED or TaskStatus.SKIPPED

        Raises:
            EncodeError: If the encoder exits non-zero or cannot be started
        """
        output_path = transcode_output_path(input_path)

        if not force and output_path.exists():
            logger.debug("Skipping conversion of %s, %s exists", input_path, output_path)
            return TaskStatus.SKIPPED

        if dry_run:
            logger.info("Would convert %s to %s", input_path, output_path)
            return TaskStatus.SKIPPED

        command = self.build_command(input_path, output_path)
        logger.debug("Running %s", " ".join(command))

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise EncodeError(f"Could not start {self.encoder}: {e}") from e

        _, stderr = await process.communicate()

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()[-STDERR_TAIL:]
            raise EncodeError(
                f"{self.encoder} failed for {input_path} (exit {process.returncode}): {message}",
                returncode=process.returncode,
                stderr=message,
            )

        return TaskStatus.CONVERTED
