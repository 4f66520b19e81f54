"""Run the fixture steps against a working directory.

Each step is skipped when its target file already exists; otherwise the
producing operation (fetch, transcode or slice) is called. Existence is the
only completion signal: file contents are never inspected here.

Operations are injectable so tests can run without network or ffmpeg. Any
exception raised by an operation propagates unchanged and stops the run.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..audio_utils import download_audio, slice_audio, transcode_audio
from ..config import Config
from ..core.steps import FETCH, SLICE, TRANSCODE, FixtureStep, build_steps

logger = logging.getLogger(__name__)

DEFAULT_WORKING_DIR = 'tests'


@dataclass
class PrepareResult:
    working_dir: str
    produced: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def resolve_working_dir(working_dir: Optional[str] = None, config: Optional[Config] = None) -> str:
    """Explicit argument, then configured ``working_dir``, then ``./tests``."""
    path = working_dir
    if not path and config is not None:
        path = config.get('working_dir')
    return os.path.abspath(os.path.expanduser(path or DEFAULT_WORKING_DIR))


def steps_from_config(config: Config) -> List[FixtureStep]:
    return build_steps(config.get('source_url'), config.get('source_name'), config.excerpts())


def plan(working_dir: Optional[str] = None, config: Optional[Config] = None) -> List[FixtureStep]:
    """Return the steps ``prepare`` would run now, touching nothing on disk."""
    config = config or Config()
    wd = resolve_working_dir(working_dir, config)
    return [s for s in steps_from_config(config) if not os.path.exists(os.path.join(wd, s.target))]


def prepare(
    working_dir: Optional[str] = None,
    config: Optional[Config] = None,
    fetch: Optional[Callable] = None,
    transcode: Optional[Callable] = None,
    slice_: Optional[Callable] = None,
) -> PrepareResult:
    """Ensure every fixture exists under ``working_dir``.

    Args:
        working_dir: Target directory, created if missing (default: configured
            ``working_dir``, i.e. ``./tests``)
        config: Configuration (default: built-in defaults)
        fetch: ``fetch(url, output_path)``
        transcode: ``transcode(input_path, output_path)``
        slice_: ``slice_(input_path, output_path, start, end, stream_copy=True)``

    Returns:
        PrepareResult with the produced and skipped targets, in step order.
    """
    config = config or Config()
    steps = steps_from_config(config)

    wd = resolve_working_dir(working_dir, config)
    os.makedirs(wd, exist_ok=True)

    fetch = fetch or _default_fetch(config)
    transcode = transcode or _default_transcode(config)
    slice_ = slice_ or _default_slice(config)

    result = PrepareResult(working_dir=wd)
    for step in steps:
        target = os.path.join(wd, step.target)
        if os.path.exists(target):
            logger.info("Skipping %s: already present", step.target)
            result.skipped.append(step.target)
            continue

        logger.info("Producing %s (%s)", step.target, step.describe())
        if step.operation == FETCH:
            fetch(step.params['url'], target)
        elif step.operation == TRANSCODE:
            transcode(os.path.join(wd, step.dependencies[0]), target)
        elif step.operation == SLICE:
            slice_(
                os.path.join(wd, step.dependencies[0]),
                target,
                step.params['start'],
                step.params['end'],
                stream_copy=step.params.get('stream_copy', True),
            )
        result.produced.append(step.target)

    return result


def _default_fetch(config: Config) -> Callable:
    def fetch(url, output_path):
        return download_audio(
            url,
            output_path,
            timeout=config.get('fetch_timeout'),
            verify_ssl=config.get('verify_ssl', True),
        )
    return fetch


def _default_transcode(config: Config) -> Callable:
    def transcode(input_path, output_path):
        return transcode_audio(
            input_path,
            output_path,
            binary=config.get('transcoder'),
            timeout=config.get('tool_timeout'),
        )
    return transcode


def _default_slice(config: Config) -> Callable:
    def slice_(input_path, output_path, start, end, stream_copy=True):
        return slice_audio(
            input_path,
            output_path,
            start,
            end,
            stream_copy=stream_copy,
            binary=config.get('transcoder'),
            timeout=config.get('tool_timeout'),
        )
    return slice_
