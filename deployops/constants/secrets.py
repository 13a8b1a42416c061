"""Secret names and service discriminators shared by the deploy tooling."""

from enum import StrEnum


class ServiceName(StrEnum):
    """Services whose servers the log uploader can pull from."""

    API_GATEWAY = "api-gateway"
    TELEGRAM_BOT = "telegram-bot"


# Environment prefix of each service's server settings.
SERVICE_ENV_PREFIXES: dict[ServiceName, str] = {
    ServiceName.API_GATEWAY: "API_GATEWAY_SERVER",
    ServiceName.TELEGRAM_BOT: "TELEGRAM_BOT_SERVER",
}

SERVER_FIELDS = ("USER", "PASSWORD", "HOST", "PORT", "ROOT_PATH", "DOCKER_COMPOSE_PATH")

# Pushed to GitHub in exactly this order.
REQUIRED_SECRETS: list[str] = [
    f"{SERVICE_ENV_PREFIXES[service]}_{field}"
    for service in (ServiceName.API_GATEWAY, ServiceName.TELEGRAM_BOT)
    for field in SERVER_FIELDS
]

GH_INSTALL_HINT = "Please install it first: https://cli.github.com/"
GH_LOGIN_HINT = "Please run: gh auth login"
ENV_FILE_HINT = "Please set these in your .env file."
WORKFLOW_HINT = "You can now trigger the workflow: Actions → Restart API Gateway → Run workflow"
