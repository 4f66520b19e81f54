"""Fixture step records and the dependency-ordered step list.

A step produces exactly one file (``target``) from the files named in
``dependencies`` using one external operation. Steps are pure data; running
them is the job of ``services.preparer``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from ..errors import ConfigError
from .timecodes import format_timecode, parse_timecode

FETCH = 'fetch'
TRANSCODE = 'transcode'
SLICE = 'slice'

OPERATIONS = (FETCH, TRANSCODE, SLICE)

SOURCE_EXT = '.mp3'
LOSSLESS_EXT = '.flac'


@dataclass(frozen=True)
class FixtureStep:
    """One file to produce and how to produce it."""

    target: str
    operation: str
    dependencies: Tuple[str, ...] = ()
    params: Dict[str, object] = field(default_factory=dict)

    def describe(self) -> str:
        if self.operation == FETCH:
            return f"fetch {self.params.get('url')} -> {self.target}"
        if self.operation == SLICE:
            return (f"slice {self.dependencies[0]} "
                    f"[{self.params.get('start')}, {self.params.get('end')}) -> {self.target}")
        return f"transcode {self.dependencies[0]} -> {self.target}"


def build_steps(source_url: str, source_name: str, excerpts: Iterable[Dict]) -> List[FixtureStep]:
    """Return the steps in dependency order.

    ``excerpts`` is a list of dicts with ``name``, ``start`` and ``end``.
    Order: fetch the source, transcode it, slice every excerpt, then transcode
    every excerpt.
    """
    source_mp3 = source_name + SOURCE_EXT
    steps: List[FixtureStep] = [
        FixtureStep(source_mp3, FETCH, (), {'url': source_url}),
        FixtureStep(source_name + LOSSLESS_EXT, TRANSCODE, (source_mp3,)),
    ]

    excerpts = list(excerpts)
    for excerpt in excerpts:
        start = parse_timecode(excerpt['start'])
        end = parse_timecode(excerpt['end'])
        steps.append(FixtureStep(
            excerpt['name'] + SOURCE_EXT,
            SLICE,
            (source_mp3,),
            {
                'start': format_timecode(start),
                'end': format_timecode(end),
                'stream_copy': True,
            },
        ))
    for excerpt in excerpts:
        steps.append(FixtureStep(
            excerpt['name'] + LOSSLESS_EXT,
            TRANSCODE,
            (excerpt['name'] + SOURCE_EXT,),
        ))

    validate_order(steps)
    return steps


def validate_order(steps: Iterable[FixtureStep]) -> None:
    """Check that every dependency is produced by an earlier step.

    Raises ``ConfigError`` on unknown operations, duplicate targets or
    dependencies that are not produced before they are needed.
    """
    produced = set()
    for step in steps:
        if step.operation not in OPERATIONS:
            raise ConfigError(f"Unknown operation '{step.operation}' for {step.target}")
        for dep in step.dependencies:
            if dep not in produced:
                raise ConfigError(f"{step.target} depends on {dep}, which is not produced earlier")
        if step.target in produced:
            raise ConfigError(f"Duplicate fixture target: {step.target}")
        produced.add(step.target)
