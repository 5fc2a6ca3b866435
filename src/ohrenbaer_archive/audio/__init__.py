"""Audio download and conversion for the Ohrenbär archive."""

from ohrenbaer_archive.audio.downloader import FileTransferAgent
from ohrenbaer_archive.audio.models import TaskStatus
from ohrenbaer_archive.audio.transcoder import TranscodeAgent, transcode_output_path

__all__ = [
    "FileTransferAgent",
    "TaskStatus",
    "TranscodeAgent",
    "transcode_output_path",
]
