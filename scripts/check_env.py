"""Utility for verifying that the rotation function's configuration is intact.

Loads the given ``.env`` file into the environment and builds the settings
used by the Lambda handler, surfacing missing or malformed entries before a
scheduled rotation fails on them.

Example usage::

    python -m scripts.check_env --env-file /opt/token-rotator/.env
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from token_rotator.core.config import AppSettings, _load_env_file, load_settings

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_RUNTIME_ERROR = 5


def _validate_settings(env_file: Path) -> AppSettings:
    """Ensure required settings can be loaded from the supplied env file."""
    _load_env_file(str(env_file))
    return load_settings()


def _ensure_env_file(env_file: Path) -> None:
    if not env_file.exists():
        raise FileNotFoundError(
            f"Environment file {env_file} does not exist. "
            "Ensure the path is correct or create it before running this tool."
        )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate the token rotation settings in an env file."
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        type=Path,
        help="Path to the environment file (default: .env in the repo root).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    env_file: Path = args.env_file

    try:
        _ensure_env_file(env_file)
        settings = _validate_settings(env_file)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR

    print(
        "Settings OK: "
        f"{settings.rotation.source_secret_name} -> {settings.rotation.target_secret_name} "
        f"({settings.aws.region_name}, {settings.retry.max_attempts} attempts)"
    )
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
