"""
View Descriptors

Platform-neutral description of what the console wants shown. The messaging
client turns these into its own UI (embeds, buttons, select menus, modals)
and sends the custom id of an activated control back in the next request.

Size caps come from src.core.limits and are validated here, so an oversized
view fails while it is built rather than when the platform rejects it.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core import limits

# -----------------------------------------------------------------------------
# Literal Types
# -----------------------------------------------------------------------------

ButtonStyle = Literal["primary", "secondary", "success", "danger"]

StatusLevel = Literal["success", "info", "warning", "error"]

TextInputStyle = Literal["short", "paragraph"]

ResponseType = Literal["reply", "update", "modal"]

DEFAULT_COLOR = "#0099ff"


# -----------------------------------------------------------------------------
# Controls
# -----------------------------------------------------------------------------


class Button(BaseModel):
    """Clickable button."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["button"] = Field(default="button", description="Control type")
    custom_id: str = Field(max_length=limits.CUSTOM_ID_MAX, description="Re-entrant custom id")
    label: str = Field(max_length=limits.BUTTON_LABEL_MAX, description="Button text")
    style: ButtonStyle = Field(default="primary", description="Visual style")
    emoji: str | None = Field(default=None, description="Optional leading emoji")
    disabled: bool = Field(default=False, description="Rendered but not clickable")


class SelectOption(BaseModel):
    """One entry of a select menu."""

    label: str = Field(max_length=limits.SELECT_OPTION_TEXT_MAX)
    value: str = Field(max_length=limits.SELECT_OPTION_TEXT_MAX)
    description: str | None = Field(default=None, max_length=limits.SELECT_OPTION_TEXT_MAX)


class SelectMenu(BaseModel):
    """Drop-down; the chosen values arrive as SelectInteraction.values."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["select"] = Field(default="select", description="Control type")
    custom_id: str = Field(max_length=limits.CUSTOM_ID_MAX, description="Re-entrant custom id")
    placeholder: str | None = Field(default=None, max_length=limits.SELECT_PLACEHOLDER_MAX)
    options: list[SelectOption] = Field(default_factory=list, max_length=limits.SELECT_OPTIONS_MAX)
    min_values: int = Field(default=1, ge=0)
    max_values: int = Field(default=1, ge=1)


Control = Annotated[Union[Button, SelectMenu], Field(discriminator="type")]


class ControlRow(BaseModel):
    """A horizontal row of controls."""

    controls: list[Control] = Field(default_factory=list)

    @field_validator("controls")
    @classmethod
    def validate_controls(cls, v: list[Button | SelectMenu]) -> list[Button | SelectMenu]:
        if len(v) > limits.CONTROLS_PER_ROW_MAX:
            raise ValueError(f"A row holds at most {limits.CONTROLS_PER_ROW_MAX} controls")
        if any(isinstance(c, SelectMenu) for c in v) and len(v) > 1:
            raise ValueError("A select menu must be alone in its row")
        return v


# -----------------------------------------------------------------------------
# Modal forms
# -----------------------------------------------------------------------------


class TextInput(BaseModel):
    """Text field inside a modal; submitted values arrive as ModalSubmitInteraction.fields."""

    custom_id: str = Field(max_length=limits.CUSTOM_ID_MAX)
    label: str = Field(max_length=limits.TEXT_INPUT_LABEL_MAX)
    style: TextInputStyle = "short"
    required: bool = True
    placeholder: str | None = None
    value: str | None = None
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=1)


class Modal(BaseModel):
    """Pop-up form shown instead of a message."""

    custom_id: str = Field(max_length=limits.CUSTOM_ID_MAX)
    title: str = Field(max_length=limits.MODAL_TITLE_MAX)
    inputs: list[TextInput] = Field(default_factory=list, max_length=limits.MODAL_INPUTS_MAX)


# -----------------------------------------------------------------------------
# Views
# -----------------------------------------------------------------------------


class ViewField(BaseModel):
    name: str = Field(max_length=limits.FIELD_NAME_MAX)
    value: str = Field(max_length=limits.FIELD_VALUE_MAX)
    inline: bool = False


class StatusBanner(BaseModel):
    """One-shot status message overlaid on a view. Never persisted."""

    level: StatusLevel
    message: str


class View(BaseModel):
    """A rendered screen or status message."""

    title: str | None = Field(default=None, max_length=limits.TITLE_MAX)
    description: str | None = Field(default=None, max_length=limits.DESCRIPTION_MAX)
    color: str = DEFAULT_COLOR
    fields: list[ViewField] = Field(default_factory=list, max_length=limits.FIELDS_PER_VIEW_MAX)
    banner: StatusBanner | None = None
    rows: list[ControlRow] = Field(default_factory=list, max_length=limits.ROWS_PER_VIEW_MAX)
    ephemeral: bool = True

    def custom_ids(self) -> list[str]:
        """Every custom id carried by the view's controls, in display order."""
        return [control.custom_id for row in self.rows for control in row.controls]

    def with_banner(self, banner: StatusBanner | None) -> "View":
        return self.model_copy(update={"banner": banner})


class InteractionResponse(BaseModel):
    """
    The single response produced for one interaction.

    type:
        reply  - send a new message
        update - replace the message the activated control lives on
        modal  - open a form
    """

    type: ResponseType
    view: View | None = None
    modal: Modal | None = None
    follow_ups: list[View] = Field(default_factory=list)
