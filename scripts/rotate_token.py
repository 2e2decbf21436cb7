#!/usr/bin/env python
"""Run a single token rotation locally through the Lambda handler."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lambdas.token_rotation.handler import lambda_handler  # noqa: E402
from token_rotator.core.config import _load_env_file  # noqa: E402


def run_once(env_file: Path | None) -> int:
    if env_file is not None:
        _load_env_file(str(env_file))
    response = lambda_handler({}, None)
    body = json.loads(response["body"])
    print(f"{response['statusCode']}: {body['message']}")
    return 0 if response["statusCode"] == 200 else 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Rotate the API token once.")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Optional env file loaded before the settings are read.",
    )
    args = parser.parse_args(argv)
    return run_once(args.env_file)


if __name__ == "__main__":  # pragma: no cover - manual execution path
    sys.exit(main())
