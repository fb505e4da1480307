"""
Status Responses

Small success/info/warning/error messages and the mapping from exceptions to
what the requester is told. Only EndUserError messages are shown verbatim;
everything else gets a generic text so internals never leak.
"""

import logging
from typing import TYPE_CHECKING

from src.core import limits
from src.core.exceptions import (
    ConfigurationError,
    EndUserError,
    EndUserInfo,
    IdentifierError,
    InvalidPageError,
    PermissionDeniedError,
)
from src.models.contracts.views import StatusLevel, View

if TYPE_CHECKING:
    from src.dashboards.base import TrackedInteraction

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = (
    "Oops! There's been an error while processing your request. Please contact support."
)
INVALID_REQUEST_MESSAGE = "Invalid request. Please start again from the dashboard."
PERMISSION_DENIED_MESSAGE = "✋ Insufficient permissions to perform this action."

EMOJIS: dict[StatusLevel, str] = {
    "success": "✅",
    "info": "ℹ️",
    "warning": "⚠️",
    "error": "❌",
}

COLORS: dict[StatusLevel, str] = {
    "success": "#00ff00",
    "info": "#0099ff",
    "warning": "#ffcc00",
    "error": "#ff0000",
}


def status_view(level: StatusLevel, message: str) -> View:
    text = f"{EMOJIS[level]} {message}"
    return View(
        description=limits.truncate(text, limits.DESCRIPTION_MAX),
        color=COLORS[level],
        ephemeral=True,
    )


def error_view(message: str) -> View:
    return status_view("error", message)


async def success(interaction: "TrackedInteraction", message: str) -> None:
    await interaction.respond(status_view("success", message))


async def info(interaction: "TrackedInteraction", message: str) -> None:
    await interaction.respond(status_view("info", message))


async def warning(interaction: "TrackedInteraction", message: str) -> None:
    await interaction.respond(status_view("warning", message))


async def error(interaction: "TrackedInteraction", message: str) -> None:
    await interaction.respond(status_view("error", message))


async def permission_denied(interaction: "TrackedInteraction") -> None:
    await interaction.respond(View(description=PERMISSION_DENIED_MESSAGE, ephemeral=True))


def describe_exception(exc: BaseException) -> tuple[StatusLevel, str]:
    """Level and user-facing message for an exception."""
    if isinstance(exc, EndUserInfo):
        return "info", exc.message
    if isinstance(exc, PermissionDeniedError):
        return "error", PERMISSION_DENIED_MESSAGE
    if isinstance(exc, EndUserError):
        parent = exc.parent_error
        parent_message = str(parent) if parent is not None else ""
        if parent_message:
            return "error", f"{exc.message} ➡️ {parent_message}"
        return "error", exc.message
    if isinstance(exc, IdentifierError):
        return "error", INVALID_REQUEST_MESSAGE
    return "error", DEFAULT_ERROR_MESSAGE


async def handle_exception(interaction: "TrackedInteraction", exc: BaseException) -> None:
    """
    Turn an exception into a status response.

    If the interaction already has its response, the status goes out as a
    follow-up instead.
    """
    extra = {"custom_id": interaction.custom_id, "requester": interaction.requester.id}
    if isinstance(exc, (EndUserError, EndUserInfo)):
        logger.info(f"End user error: {exc}", extra=extra)
    elif isinstance(exc, IdentifierError):
        logger.warning(f"Identifier error: {exc}", extra=extra)
    elif isinstance(exc, (InvalidPageError, ConfigurationError)):
        logger.error(f"Console misconfiguration: {exc}", extra=extra, exc_info=exc)
    else:
        logger.error(f"Unhandled error while handling interaction: {exc}", extra=extra, exc_info=exc)

    level, message = describe_exception(exc)
    await interaction.respond(status_view(level, message))
