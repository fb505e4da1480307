"""
Inbound Interactions

InteractionEvent is what the messaging client posts. parse_interaction()
narrows it exactly once into one of the interaction variants; handlers then
work with a type whose capabilities (can it update its message, can it open
a modal, does it carry select values or form fields) are fixed by its class.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Literal

from pydantic import BaseModel, Field, model_validator

InteractionKind = Literal["open", "button", "select", "modal_submit"]


class Requester(BaseModel):
    """The person who triggered the interaction."""

    id: str = Field(..., description="Platform user id")
    display_name: str | None = Field(default=None, description="Name shown in the client")
    roles: list[str] = Field(default_factory=list, description="Role names held in the channel's server")


class InteractionEvent(BaseModel):
    """Raw inbound event."""

    kind: InteractionKind = Field(..., description="Which control produced the event")
    custom_id: str | None = Field(default=None, description="Custom id of the activated control")
    channel: str | None = Field(default=None, description="Name of the channel the event came from")
    requester: Requester
    values: list[str] = Field(default_factory=list, description="Chosen select menu values")
    fields: dict[str, str] = Field(default_factory=dict, description="Submitted modal fields")

    @model_validator(mode="after")
    def validate_payload(self) -> "InteractionEvent":
        if self.kind != "open" and not self.custom_id:
            raise ValueError(f"'{self.kind}' interactions must carry a custom_id")
        if self.kind == "select" and not self.values:
            raise ValueError("Select interactions must carry at least one value")
        return self


# ==================== VARIANTS ====================


@dataclass
class Interaction:
    """Base for all interaction variants."""

    requester: Requester
    custom_id: str | None = None
    channel: str | None = None

    can_update: ClassVar[bool] = False
    """Whether the message holding the activated control can be replaced."""

    can_show_modal: ClassVar[bool] = False
    """Whether a modal form can be opened in response."""


@dataclass
class OpenInteraction(Interaction):
    """First contact: the user opened the console with no prior state."""


@dataclass
class ButtonInteraction(Interaction):
    """A button was clicked."""

    can_update: ClassVar[bool] = True
    can_show_modal: ClassVar[bool] = True


@dataclass
class SelectInteraction(Interaction):
    """A select menu option was chosen."""

    values: list[str] = field(default_factory=list)

    can_update: ClassVar[bool] = True
    can_show_modal: ClassVar[bool] = True

    @property
    def value(self) -> str:
        """The first (usually only) chosen value."""
        return self.values[0]


@dataclass
class ModalSubmitInteraction(Interaction):
    """A modal form was submitted."""

    fields: dict[str, str] = field(default_factory=dict)

    def get_field(self, input_id: str) -> str | None:
        return self.fields.get(input_id)


AnyInteraction = OpenInteraction | ButtonInteraction | SelectInteraction | ModalSubmitInteraction


def parse_interaction(event: InteractionEvent) -> AnyInteraction:
    """Narrow a raw event into its variant."""
    common = {
        "requester": event.requester,
        "custom_id": event.custom_id,
        "channel": event.channel,
    }
    if event.kind == "button":
        return ButtonInteraction(**common)
    if event.kind == "select":
        return SelectInteraction(**common, values=list(event.values))
    if event.kind == "modal_submit":
        return ModalSubmitInteraction(**common, fields=dict(event.fields))
    return OpenInteraction(**common)
