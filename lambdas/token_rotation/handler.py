"""
AWS Lambda entrypoint for rotating the API token.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

from botocore.exceptions import BotoCoreError
from pydantic import ValidationError

from token_rotator.core.config import describe_validation_error, get_settings
from token_rotator.core.logging import configure_logging
from token_rotator.dependencies import build_rotation_service
from token_rotator.services import RotationResult

logger = logging.getLogger(__name__)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    AWS Lambda handler invoked on a schedule.

    The trigger event is not inspected. Returns ``{"statusCode", "body"}`` with
    a JSON body carrying a ``message``.
    """
    try:
        settings = get_settings()
    except ValidationError as exc:
        configure_logging()
        message = f"Invalid configuration: {describe_validation_error(exc)}"
        logger.error(message)
        return RotationResult.failure(message).to_response()

    configure_logging(settings.log_level)
    logger.info(
        "Starting token rotation",
        extra={
            "source_secret": settings.rotation.source_secret_name,
            "target_secret": settings.rotation.target_secret_name,
        },
    )

    try:
        service = build_rotation_service(settings)
    except (BotoCoreError, ValueError) as exc:
        message = f"Invalid configuration: {exc}"
        logger.error(message)
        return RotationResult.failure(message).to_response()

    result = asyncio.run(service.rotate())
    if result.ok:
        logger.info("Token rotation completed")
    return result.to_response()


__all__ = ["lambda_handler"]
