"""Error types raised by the fixture preparer.

Failures of the external tools (download, ffmpeg) are never wrapped: they reach
the caller as the exceptions the tools raise.
"""


class FixtureError(Exception):
    """Base class for errors raised by this package."""


class ConfigError(FixtureError):
    """Invalid or unreadable configuration."""


class ChecksumMismatch(FixtureError):
    """One or more fixtures do not match their expected sha256 digest."""

    def __init__(self, mismatched):
        self.mismatched = list(mismatched)
        super().__init__(f"Checksum mismatch: {', '.join(self.mismatched)}")
