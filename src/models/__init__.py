"""
Console Models

Pydantic contracts (inbound events, outbound views):
    from src.models import InteractionEvent, InteractionResponse, View
    from src.models.contracts.views import Button  # Granular access

Interaction variants:
    from src.models import ButtonInteraction, parse_interaction
"""

from src.models.contracts.interactions import (
    AnyInteraction,
    ButtonInteraction,
    Interaction,
    InteractionEvent,
    ModalSubmitInteraction,
    OpenInteraction,
    Requester,
    SelectInteraction,
    parse_interaction,
)
from src.models.contracts.views import (
    Button,
    ControlRow,
    InteractionResponse,
    Modal,
    SelectMenu,
    SelectOption,
    StatusBanner,
    TextInput,
    View,
    ViewField,
)

__all__ = [
    # Interactions
    "AnyInteraction",
    "ButtonInteraction",
    "Interaction",
    "InteractionEvent",
    "ModalSubmitInteraction",
    "OpenInteraction",
    "Requester",
    "SelectInteraction",
    "parse_interaction",
    # Views
    "Button",
    "ControlRow",
    "InteractionResponse",
    "Modal",
    "SelectMenu",
    "SelectOption",
    "StatusBanner",
    "TextInput",
    "View",
    "ViewField",
]
