"""
Sample governance dashboard.

A small, self-contained dashboard over an in-memory proposal store, wired the
same way a real deployment wires its own:

    GOVBOT_DASHBOARD_FACTORIES=src.dashboards.sample:build_dashboards

Home lists the two areas, "proposals" pages through proposals with a select
menu and opens one, "admin" is locked to GOVBOT_ADMIN_USER_IDS and takes a
note through a modal form.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from src.core import limits
from src.core.context import ContextKeys
from src.core.exceptions import EndUserInfo, NotFoundError
from src.dashboards.base import (
    Action,
    Dashboard,
    Handler,
    RenderArgs,
    Screen,
    TrackedInteraction,
)
from src.dashboards.pagination import SelectionPaginator
from src.dashboards.permissions import AdminPermission
from src.models.contracts.interactions import ModalSubmitInteraction, SelectInteraction
from src.models.contracts.views import (
    Button,
    ControlRow,
    Modal,
    SelectOption,
    TextInput,
    View,
    ViewField,
)

logger = logging.getLogger(__name__)

CHANNEL = "governance-admin"


@dataclass
class Proposal:
    id: int
    title: str
    author: str
    status: str = "open"


class ProposalStore:
    """In-memory proposals, in id order."""

    def __init__(self, proposals: Sequence[Proposal] = ()):
        self._proposals = {p.id: p for p in proposals}

    def all(self) -> list[Proposal]:
        return [self._proposals[k] for k in sorted(self._proposals)]

    def get(self, proposal_id: int) -> Proposal:
        proposal = self._proposals.get(proposal_id)
        if proposal is None:
            raise NotFoundError(f"Proposal #{proposal_id} not found")
        return proposal


def default_store() -> ProposalStore:
    return ProposalStore(
        [Proposal(id=i, title=f"Proposal {i}", author=f"member-{i % 7}") for i in range(1, 61)]
    )


# ==================== PROPOSALS ====================


class ProposalDetailAction(Action):
    """Shows one proposal, picked from the select menu or given as eId."""

    SHOW = "show"

    def __init__(self, store: ProposalStore):
        super().__init__("detail")
        self.store = store

    def operations(self) -> Mapping[str, Handler]:
        return {self.SHOW: self.show}

    def get_component(self, proposal_id: int, label: str = "Open") -> Button:
        return Button(
            custom_id=self.custom_id(self.SHOW, [(ContextKeys.ENTITY_ID.name, str(proposal_id))]),
            label=label,
        )

    async def show(self, interaction: TrackedInteraction) -> None:
        if isinstance(interaction.interaction, SelectInteraction):
            interaction.context.set(ContextKeys.ENTITY_ID, interaction.interaction.value)

        raw_id = interaction.get_argument(ContextKeys.ENTITY_ID)
        if raw_id is None:
            raise NotFoundError("No proposal selected")
        interaction.context.set(ContextKeys.ENTITY_ID, raw_id)
        proposal = self.store.get(interaction.context.require(ContextKeys.ENTITY_ID))

        back = self.screen.get_action("list")
        view = View(
            title=limits.truncate(proposal.title, limits.TITLE_MAX),
            fields=[
                ViewField(name="Author", value=proposal.author, inline=True),
                ViewField(name="Status", value=proposal.status, inline=True),
            ],
            rows=[ControlRow(controls=[back.get_component(label="Back to list", style="secondary")])],
        )
        await interaction.update(view)


class ProposalPaginator(SelectionPaginator[Proposal]):
    title = "Proposals"
    placeholder = "Select a proposal"

    def __init__(self, store: ProposalStore, destination: ProposalDetailAction):
        super().__init__("list", destination, ProposalDetailAction.SHOW)
        self.store = store

    async def get_items(self, interaction: TrackedInteraction) -> Sequence[Proposal]:
        return self.store.all()

    def to_option(self, item: Proposal) -> SelectOption:
        return SelectOption(
            label=limits.truncate(f"#{item.id} {item.title}", limits.SELECT_OPTION_TEXT_MAX),
            value=str(item.id),
            description=limits.truncate(f"by {item.author}", limits.SELECT_OPTION_TEXT_MAX),
        )


class ProposalsScreen(Screen):
    def __init__(self, store: ProposalStore):
        self.detail = ProposalDetailAction(store)
        self.paginator = ProposalPaginator(store, self.detail)
        super().__init__("proposals", actions=[self.paginator, self.detail])
        self.store = store

    async def get_response(self, interaction: TrackedInteraction, args: RenderArgs | None = None) -> View:
        count = len(self.store.all())
        if not count:
            raise EndUserInfo("There are no proposals yet.")
        return View(
            title="Proposals",
            description=f"{count} proposal(s) on record.",
            rows=[ControlRow(controls=[self.paginator.get_component(label="Browse proposals")])],
        )


# ==================== ADMIN ====================


class AdminNoteAction(Action):
    """Collects a note through a modal and confirms it on the admin screen."""

    FORM = "form"
    SUBMIT = "submit"
    NOTE_INPUT = "note"

    def __init__(self) -> None:
        super().__init__("note")

    def operations(self) -> Mapping[str, Handler]:
        return {self.FORM: self.show_form, self.SUBMIT: self.submit}

    def get_component(self, label: str = "Add note") -> Button:
        return Button(custom_id=self.custom_id(self.FORM), label=label)

    async def show_form(self, interaction: TrackedInteraction) -> None:
        await interaction.show_modal(
            Modal(
                custom_id=self.custom_id(self.SUBMIT),
                title="Add a note",
                inputs=[TextInput(custom_id=self.NOTE_INPUT, label="Note", style="paragraph")],
            )
        )

    async def submit(self, interaction: TrackedInteraction) -> None:
        form = interaction.require(ModalSubmitInteraction)
        note = (form.get_field(self.NOTE_INPUT) or "").strip()
        if not note:
            await self.screen.re_render(interaction, RenderArgs(error_message="The note was empty."))
            return
        logger.info(f"Admin note from {interaction.requester.id}: {note}")
        await self.screen.re_render(interaction, RenderArgs(success_message="Note saved."))


class AdminScreen(Screen):
    permissions = [AdminPermission()]

    def __init__(self) -> None:
        self.note = AdminNoteAction()
        super().__init__("admin", actions=[self.note])

    async def get_response(self, interaction: TrackedInteraction, args: RenderArgs | None = None) -> View:
        return View(
            title="Administration",
            description="Console administration tools.",
            rows=[ControlRow(controls=[self.note.get_component()])],
        )


# ==================== HOME ====================


class HomeScreen(Screen):
    def __init__(self, proposals: ProposalsScreen, admin: AdminScreen):
        super().__init__("home", sub_screens=[proposals, admin])
        self.proposals = proposals
        self.admin = admin

    async def get_response(self, interaction: TrackedInteraction, args: RenderArgs | None = None) -> View:
        return View(
            title="Governance Console",
            description="Pick an area to manage.",
            rows=[
                ControlRow(
                    controls=[
                        self.proposals.render_action.get_component(label="Proposals", emoji="🗳️"),
                        self.admin.render_action.get_component(label="Admin", emoji="🔒", style="secondary"),
                    ]
                )
            ],
        )


def build_dashboard(store: ProposalStore | None = None) -> Dashboard:
    store = store if store is not None else default_store()
    home = HomeScreen(ProposalsScreen(store), AdminScreen())
    return Dashboard("gov", home)


def build_dashboards() -> dict[str, Dashboard]:
    """Dashboard factory for GOVBOT_DASHBOARD_FACTORIES."""
    return {CHANNEL: build_dashboard()}
