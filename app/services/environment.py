"""Environment detection from Docker image tags.

Recognised patterns:

- ``v1.2.3`` (plain semantic version) -> production
- ``v1.2.3-stg`` -> staging
- ``v1.2.3-dev`` -> staging

Anything else falls back to staging so an unexpected tag never reaches
production.
"""

import re
from typing import Any

import structlog

from app.schemas.webhooks import Environment

logger = structlog.get_logger()

PRODUCTION_PATTERN = re.compile(r"^v\d+\.\d+\.\d+$")

STAGING_STG_PATTERN = re.compile(r"^v\d+\.\d+\.\d+-stg$")
STAGING_DEV_PATTERN = re.compile(r"^v\d+\.\d+\.\d+-dev$")
STAGING_PATTERNS = (STAGING_STG_PATTERN, STAGING_DEV_PATTERN)

EXAMPLE_TAGS: dict[Environment, list[str]] = {
    Environment.PRODUCTION: ["v1.0.0", "v2.1.3", "v10.5.2"],
    Environment.STAGING: [
        "v1.0.0-stg",
        "v2.1.3-stg",
        "v10.5.2-stg",
        "v1.0.0-dev",
        "v2.1.3-dev",
        "v10.5.2-dev",
    ],
}


def detect_environment(tag: Any) -> Environment:
    """Classify an image tag as production or staging.

    Never raises: empty, non-string and unrecognised tags all resolve to
    staging, with a warning logged.
    """
    if not isinstance(tag, str) or not tag.strip():
        logger.warning("invalid_tag_defaulting_to_staging", tag=tag)
        return Environment.STAGING

    trimmed = tag.strip()

    if PRODUCTION_PATTERN.fullmatch(trimmed):
        return Environment.PRODUCTION

    if any(pattern.fullmatch(trimmed) for pattern in STAGING_PATTERNS):
        return Environment.STAGING

    logger.warning(
        "unknown_tag_pattern_defaulting_to_staging",
        tag=tag,
        expected="v1.2.3 (production), v1.2.3-stg or v1.2.3-dev (staging)",
    )
    return Environment.STAGING


def is_production_tag(tag: Any) -> bool:
    return detect_environment(tag) is Environment.PRODUCTION


def is_staging_tag(tag: Any) -> bool:
    return detect_environment(tag) is Environment.STAGING
