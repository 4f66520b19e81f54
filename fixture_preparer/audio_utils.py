"""
Utilities to download and process audio
"""
import logging
import shutil
import ssl
import subprocess
import urllib.request

from .core.timecodes import format_timecode, parse_timecode

logger = logging.getLogger(__name__)

USER_AGENT = 'Mozilla/5.0'
CHUNK_SIZE = 64 * 1024


def download_audio(url, output_path, timeout=None, verify_ssl=True):
    """Download an audio file from a URL.

    Errors propagate unchanged and a partially written file is left in place.
    """
    ssl_context = ssl.create_default_context()
    if not verify_ssl:
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE

    logger.info("Downloading %s -> %s", url, output_path)
    request = urllib.request.Request(url, headers={'User-Agent': USER_AGENT})
    with urllib.request.urlopen(request, context=ssl_context, timeout=timeout) as response:
        with open(output_path, 'wb') as f:
            shutil.copyfileobj(response, f, CHUNK_SIZE)
    return output_path


def resolve_transcoder(binary=None):
    """Return the transcoder executable to invoke.

    An explicit ``binary`` wins; otherwise ``ffmpeg`` is used when it is on
    PATH and pydub's own discovery (``avconv``) is the fallback.
    """
    if binary:
        return binary
    # Lazy import: pydub warns at import time when no encoder is on PATH
    from pydub.utils import get_encoder_name, which  # type: ignore
    if which('ffmpeg'):
        return 'ffmpeg'
    return get_encoder_name()


def build_transcode_command(binary, input_path, output_path):
    """Full re-encode; the output format follows the output file extension."""
    return [binary, '-nostdin', '-n', '-i', str(input_path), str(output_path)]


def build_slice_command(binary, input_path, output_path, start, end, stream_copy=True):
    """Cut ``[start, end)`` out of ``input_path``.

    With ``stream_copy`` the audio (and any cover art stream) is copied
    without re-encoding.
    """
    cmd = [
        binary, '-nostdin', '-n',
        '-i', str(input_path),
        '-ss', format_timecode(parse_timecode(start)),
        '-to', format_timecode(parse_timecode(end)),
    ]
    if stream_copy:
        cmd += ['-c:v', 'copy', '-c:a', 'copy']
    cmd.append(str(output_path))
    return cmd


def _run(cmd, timeout=None):
    logger.debug("Running: %s", ' '.join(cmd))
    subprocess.run(cmd, check=True, stdin=subprocess.DEVNULL, timeout=timeout)


def transcode_audio(input_path, output_path, binary=None, timeout=None):
    """
    Transcode an audio file, re-encoding every sample.

    Args:
        input_path: Source audio file
        output_path: Destination file; its extension selects the codec
        binary: Transcoder executable (default: discovered on PATH)
        timeout: Seconds before the tool is killed (default: no limit)

    Raises:
        subprocess.CalledProcessError: the tool exited with a non-zero status
        FileNotFoundError: the tool is not installed
    """
    logger.info("Transcoding %s -> %s", input_path, output_path)
    _run(build_transcode_command(resolve_transcoder(binary), input_path, output_path), timeout)
    return output_path


def slice_audio(input_path, output_path, start, end, stream_copy=True, binary=None, timeout=None):
    """
    Extract the ``[start, end)`` range of an audio file.

    Args:
        input_path: Path to the full audio file
        output_path: Output file path
        start: Start timecode (``HH:MM:SS`` or seconds)
        end: End timecode (``HH:MM:SS`` or seconds)
        stream_copy: Copy the encoded stream instead of re-encoding
        binary: Transcoder executable (default: discovered on PATH)
        timeout: Seconds before the tool is killed (default: no limit)
    """
    logger.info("Slicing %s [%s, %s) -> %s", input_path, start, end, output_path)
    cmd = build_slice_command(resolve_transcoder(binary), input_path, output_path,
                              start, end, stream_copy=stream_copy)
    _run(cmd, timeout)
    return output_path
