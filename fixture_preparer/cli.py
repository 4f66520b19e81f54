"""
Command-line interface for the fixture preparer
"""
import argparse
import logging
import os
import shutil
import subprocess
import sys
import urllib.error

from .config import Config
from .core.steps import FETCH
from .errors import ChecksumMismatch, ConfigError
from .services import checksums as checksums_svc
from .services.preparer import plan, prepare, resolve_working_dir, steps_from_config

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_TIMEOUT = 124
EXIT_NOT_FOUND = 127

DEFAULT_CONFIG_FILES = ('fixtures.yml', 'fixtures.yaml')


def _warn_if_no_transcoder(binary):
    """Warn before any work when the transcoder is not on PATH.

    Non-fatal: the step that needs it fails on its own.
    """
    name = binary or 'ffmpeg'
    if shutil.which(name) is None and (binary or shutil.which('avconv') is None):
        print(f"Warning: {name} not found on PATH. Transcoding steps will fail.")


def _find_default_config():
    cwd = os.getcwd()
    for candidate in DEFAULT_CONFIG_FILES:
        path = os.path.join(cwd, candidate)
        if os.path.exists(path):
            return path
    return None


def build_parser():
    parser = argparse.ArgumentParser(
        prog='fixture-preparer',
        description='Download and cut the audio fixtures used by the test suite',
    )
    parser.add_argument('working_dir', nargs='?', help='Directory to populate (default: ./tests)')
    parser.add_argument('--config', type=str, help='Path to the YAML configuration file')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Logging level (default: WARNING)')
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('--dry-run', action='store_true', help='Print the steps that would run and exit')
    mode.add_argument('--check', action='store_true',
                      help='Verify the fixtures against the configured sha256 digests and exit')
    return parser


def run_dry(config, working_dir):
    pending = plan(working_dir, config)
    wd = resolve_working_dir(working_dir, config)
    print(f"Working directory: {wd}")
    if not pending:
        print("All fixtures present, nothing to do.")
        return EXIT_OK
    print(f"{len(pending)} step(s) to run:")
    for step in pending:
        print(f"- {step.describe()}")
    return EXIT_OK


def run_check(config, working_dir):
    wd = resolve_working_dir(working_dir, config)
    names = [step.target for step in steps_from_config(config)]
    statuses = checksums_svc.verify_fixtures(wd, names, config.checksums())
    for name, status in statuses.items():
        print(f"{status.upper():>9}  {name}")

    checksums_svc.ensure_checksums(statuses)
    if any(status == checksums_svc.MISSING for status in statuses.values()):
        return EXIT_FAILURE
    return EXIT_OK


def run_prepare(config, working_dir):
    pending = plan(working_dir, config)
    if any(step.operation != FETCH for step in pending):
        _warn_if_no_transcoder(config.get('transcoder'))

    result = prepare(working_dir, config)
    for name in result.skipped:
        print(f"= {name} (already present)")
    for name in result.produced:
        print(f"✓ {name}")
    print(f"Fixtures ready in {result.working_dir}")
    return EXIT_OK


def main(argv=None):
    """Main CLI function; returns the process exit code"""
    logging.basicConfig(level=logging.WARNING)
    args = build_parser().parse_args(argv)

    try:
        config = Config(config_file=args.config or _find_default_config())
        config.update_from_args({'log_level': args.log_level})
        level = getattr(logging, str(config.get('log_level', 'WARNING')).upper(), logging.WARNING)
        logging.getLogger().setLevel(level)

        if args.dry_run:
            return run_dry(config, args.working_dir)
        if args.check:
            return run_check(config, args.working_dir)
        return run_prepare(config, args.working_dir)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except ChecksumMismatch as e:
        print(str(e), file=sys.stderr)
        return EXIT_FAILURE
    except subprocess.CalledProcessError as e:
        print(f"Command failed with exit status {e.returncode}: {' '.join(map(str, e.cmd))}", file=sys.stderr)
        # -N means killed by signal N
        if e.returncode < 0:
            return 128 - e.returncode
        return e.returncode
    except subprocess.TimeoutExpired as e:
        print(f"Command timed out after {e.timeout}s: {' '.join(map(str, e.cmd))}", file=sys.stderr)
        return EXIT_TIMEOUT
    except FileNotFoundError as e:
        print(f"Command not found: {e.filename or e}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except urllib.error.URLError as e:
        print(f"Download failed: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except OSError as e:
        print(f"I/O error: {e}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
