"""Application configuration loaded from environment variables."""

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()

VALID_LOG_LEVELS = ("debug", "info", "warn", "error")

# Prefixes GitHub uses for classic, OAuth, user-to-server, server-to-server,
# refresh and fine-grained tokens.
GITHUB_TOKEN_PREFIXES = ("ghp_", "gho_", "ghu_", "ghs_", "ghr_", "github_pat_")

DEFAULT_SERVICE_MAP: dict[str, str] = {
    "estatemanner/est-webapp": "webapp",
    "estatemanner/est-landing": "landing",
    "estatemanner/est-server": "server",
    "estatemanner/est-pricing-server": "pricing",
    "estatemanner/est-mdp-collector": "mdp-collector",
    "estatemanner/est-mdp-collector-fe": "mdp-collector-fe",
}


class Settings(BaseSettings):
    """Application settings with environment variable loading and sensible defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "docker-hub-dispatch-bridge"
    debug: bool = False

    # GitHub repository_dispatch target
    github_token: str = ""
    github_owner: str = "Estatemanner"
    github_repo: str = "cadastral-deploy"
    github_api_url: str = "https://api.github.com"
    github_user_agent: str = "EstateManner-Webhook-Proxy/1.0"
    dispatch_event_type: str = "docker-hub-webhook"
    forward_service_name: bool = False

    # Docker Hub repository -> internal service name (JSON object in the env)
    service_map: dict[str, str] = DEFAULT_SERVICE_MAP

    # Logging
    log_level: str = "info"
    enable_request_logging: bool = False
    enable_performance_logging: bool = True

    # Webhook limits
    max_payload_size: int = 1_048_576  # 1 MB
    webhook_timeout_ms: int = 30_000


def validate_settings(cfg: Settings) -> list[str]:
    """Return every configuration problem found in *cfg*.

    An empty list means the configuration is usable for dispatching.  A token
    with an unfamiliar prefix is only logged, never reported as an error.
    """
    errors: list[str] = []

    if not cfg.github_token:
        errors.append("GitHub token is required (GITHUB_TOKEN)")
    elif not cfg.github_token.startswith(GITHUB_TOKEN_PREFIXES):
        logger.warning("github_token_format_unexpected", expected_prefixes=GITHUB_TOKEN_PREFIXES)

    if not cfg.github_owner:
        errors.append("GitHub owner is required (GITHUB_OWNER)")

    if not cfg.github_repo:
        errors.append("GitHub repository is required (GITHUB_REPO)")

    if cfg.log_level.lower() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid log level: {cfg.log_level}. Valid levels: {', '.join(VALID_LOG_LEVELS)}"
        )

    if cfg.max_payload_size <= 0:
        errors.append("Max payload size must be greater than 0")

    if cfg.webhook_timeout_ms <= 0:
        errors.append("Webhook timeout must be greater than 0")

    if not cfg.service_map:
        errors.append("Service map must contain at least one repository (SERVICE_MAP)")

    unnamed = [repo for repo, service in cfg.service_map.items() if not service.strip()]
    if unnamed:
        errors.append(f"Service map has empty service names for: {', '.join(unnamed)}")

    return errors


def log_configuration(cfg: Settings) -> None:
    """Log the active configuration with the token redacted."""
    logger.info(
        "configuration_loaded",
        github_owner=cfg.github_owner,
        github_repo=cfg.github_repo,
        github_api_url=cfg.github_api_url,
        token_configured=bool(cfg.github_token),
        event_type=cfg.dispatch_event_type,
        forward_service_name=cfg.forward_service_name,
        supported_repositories=sorted(cfg.service_map),
        log_level=cfg.log_level,
        enable_request_logging=cfg.enable_request_logging,
        enable_performance_logging=cfg.enable_performance_logging,
        max_payload_size=cfg.max_payload_size,
        webhook_timeout_ms=cfg.webhook_timeout_ms,
    )


settings = Settings()
