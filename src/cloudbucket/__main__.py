# src/cloudbucket/__main__.py
"""Command line interface for synthesizing bucket applications.

Usage:
    python -m cloudbucket synth <manifest.json> --target <target> [--output DIR] [--state FILE]
    python -m cloudbucket targets

Examples:
    # Terraform for GCP, written to target/main.tf.json
    python -m cloudbucket synth app.json --target tf-gcp

    # Simulator document for local runs
    python -m cloudbucket synth app.json --target sim --output build

Exit codes:
    0 success, 1 build-time error (capability, unsupported feature, configuration),
    2 I/O error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn, Sequence

from cloudbucket.config import DEFAULT_STATE_FILE, GcpSettings, SynthSettings
from cloudbucket.errors import BucketError
from cloudbucket.manifest import build_app, load_manifest
from cloudbucket.result import Failure, Success
from cloudbucket.targets import BUCKET_TARGETS
from cloudbucket.validation import describe_validation_error, validate_model


logger = logging.getLogger(__name__)


def cmd_synth(manifest_path: Path, target: str, output: Path, state_file: Path) -> int:
    """
    Synthesize a manifest for one target.

    Returns:
        Exit code (0 = success, 1 = build error, 2 = I/O error)
    """
    logger.info("synthesizing %s for %s into %s", manifest_path, target, output)
    match GcpSettings.from_env():
        case Failure(error):
            print(f"✗ Invalid GCP settings: {describe_validation_error(error)}", file=sys.stderr)
            return 1
        case Success(gcp):
            pass

    match validate_model(
        SynthSettings, target=target, output_dir=output, state_file=state_file, gcp=gcp
    ):
        case Failure(validation_error):
            print(f"✗ Invalid settings: {describe_validation_error(validation_error)}", file=sys.stderr)
            return 1
        case Success(settings):
            pass

    try:
        match load_manifest(manifest_path):
            case Failure(message):
                print(f"✗ Invalid manifest: {message}", file=sys.stderr)
                return 1
            case Success(manifest):
                app = build_app(manifest, settings)
                written = app.synth(settings.output_dir)
    except BucketError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"✗ I/O error: {e}", file=sys.stderr)
        return 2

    print(f"✓ Synthesized {manifest.name} for {target}")
    print(f"  {written}")
    return 0


def cmd_targets() -> int:
    for target_id in sorted(BUCKET_TARGETS):
        print(target_id)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cloudbucket",
        description="Synthesize multi-target bucket applications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    synth_parser = subparsers.add_parser("synth", help="Synthesize a manifest for a target")
    synth_parser.add_argument("manifest", type=Path, help="Application manifest (JSON)")
    synth_parser.add_argument(
        "--target", required=True, choices=sorted(BUCKET_TARGETS), help="Deployment target"
    )
    synth_parser.add_argument(
        "--output", type=Path, default=Path("target"), help="Output directory (default: target)"
    )
    synth_parser.add_argument(
        "--state",
        type=Path,
        default=DEFAULT_STATE_FILE,
        help=f"Deployment state file (default: {DEFAULT_STATE_FILE})",
    )

    subparsers.add_parser("targets", help="List supported targets")
    return parser


def run(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "synth":
        return cmd_synth(args.manifest, args.target, args.output, args.state)
    if args.command == "targets":
        return cmd_targets()
    return 2


def main() -> NoReturn:
    """Main CLI entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
