"""Textual dashboard for the agent orchestrator.

Shows pending and active tasks side by side with an event log below.
All state lives in a Dashboard; this module only routes keys and gateway
results into it and renders what it holds.
"""

from __future__ import annotations

import subprocess

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult, SuspendNotSupported
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Footer, Header, Input, Label, ListItem, ListView, Static

from .config import CenterConfig
from .dispatch import execute
from .errors import Diagnostic
from .logging import get_logger
from .orchestrator import Orchestrator
from .state import (
    CommandFailed,
    Dashboard,
    FetchTasks,
    InputChanged,
    InputSubmitted,
    KeyPressed,
    LogViewerClosed,
    OpenLogViewer,
    Quit,
    Request,
    RunCommand,
    SelectionMoved,
    SnapshotLoaded,
    Tab,
    Tick,
    ViewState,
)
from .task import TaskItem

logger = get_logger("tui")

TITLE = "💠 CLAUDE ORCHESTRA | CONTROL CENTER"

COMMAND_HELP = (
    "[A] Add Task  [S] Start  [C] Complete  [X] Stop  [D] Remove  [L] Logs  [R] Scan  [Q] Exit"
)
INPUT_HELP = "[Enter]: Confirm    [Esc]: Cancel"

_LIST_IDS = {Tab.PENDING: "pending-list", Tab.ACTIVE: "active-list"}
_PANEL_IDS = {
    Tab.PENDING: "pending-panel",
    Tab.ACTIVE: "active-panel",
    Tab.EVENTS: "events-panel",
}


# === Formatters ===


def format_item(item: TaskItem) -> Text:
    """One list row: title line and description line.

    Rows are built as Text so brackets in titles and descriptions (the
    [FAILED] tag, tool output) are never parsed as markup.
    """
    text = Text(item.title, style="bold red" if item.failed else "bold")
    if item.description:
        text.append("\n")
        text.append(item.description, style="dim")
    return text


def format_events(events: list[str]) -> Text:
    """Event panel body."""
    if not events:
        return Text("(No recent events)", style="dim")
    return Text("\n".join(f"• {e}" for e in events))


def format_error(diagnostic: Diagnostic | None) -> Text:
    """Sticky error banner (empty when there is none)."""
    if diagnostic is None:
        return Text()
    return Text.assemble(("Error:", "bold red"), " ", str(diagnostic))


def format_status(state: ViewState) -> Text:
    """Mode indicator and key help shown above the footer."""
    if state.input_mode:
        return Text.assemble(("Add task", "bold"), "  ", (INPUT_HELP, "dim"))
    return Text.assemble(("(Command Mode)", "green"), "  ", (COMMAND_HELP, "dim"))


def format_subtitle(state: ViewState) -> str:
    if state.busy:
        return f"{state.spinner} working..."
    if not state.loaded:
        return "loading..."
    return f"{len(state.pending_items)} pending · {len(state.active_items)} active"


# === Widgets and messages ===


class TaskListItem(ListItem):
    """A list row that keeps the TaskItem it renders."""

    def __init__(self, item: TaskItem) -> None:
        super().__init__(Label(format_item(item)))
        self.item = item


class Panel(Vertical):
    """A bordered dashboard panel."""

    def __init__(self, title: str, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self.border_title = title


class GatewayResult(Message):
    """Carries a dashboard message from a worker back onto the app queue."""

    def __init__(self, payload: SnapshotLoaded | CommandFailed | LogViewerClosed) -> None:
        super().__init__()
        self.payload = payload


# === App ===


class ControlCenterApp(App[None]):
    """Interactive dashboard driving the orchestrator script."""

    TITLE = TITLE

    CSS = """
    Screen {
        layout: vertical;
    }

    #lists {
        height: 2fr;
    }

    Panel {
        width: 1fr;
        border: round $secondary;
        padding: 0 1;
    }

    Panel.-focused {
        border: round $accent;
    }

    #events-panel {
        height: 1fr;
        width: 100%;
    }

    ListView {
        height: 1fr;
    }

    TaskListItem {
        padding: 0 1;
    }

    #error-banner {
        height: auto;
        max-height: 6;
        padding: 0 2;
        display: none;
    }

    #error-banner.-visible {
        display: block;
    }

    #task-input {
        display: none;
    }

    #task-input.-visible {
        display: block;
    }

    #status-line {
        height: 1;
        padding: 0 2;
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("a", "press('a')", "Add Task"),
        Binding("s", "press('s')", "Start"),
        Binding("c", "press('c')", "Complete"),
        Binding("x", "press('x')", "Stop"),
        Binding("d", "press('d')", "Remove"),
        Binding("backspace", "press('backspace')", "Remove", show=False),
        Binding("l", "press('l')", "Logs"),
        Binding("r", "press('r')", "Scan"),
        Binding("q", "press('q')", "Exit"),
        Binding("tab", "press('tab')", "Switch Panel", priority=True),
        Binding("escape", "press('escape')", "Cancel", show=False, priority=True),
        Binding("ctrl+c", "press('ctrl+c')", "Exit", show=False, priority=True),
    ]

    def __init__(
        self,
        config: CenterConfig | None = None,
        orchestrator: Orchestrator | None = None,
    ) -> None:
        super().__init__()
        self._config = config or CenterConfig()
        self.orchestrator = orchestrator or Orchestrator(self._config)
        self.dashboard = Dashboard(event_log_limit=self._config.event_log_limit)
        self._shown_input_mode = False

    @property
    def state(self) -> ViewState:
        return self.dashboard.state

    def compose(self) -> ComposeResult:
        """Build the widget tree."""
        yield Header()
        with Horizontal(id="lists"):
            with Panel("Pending Tasks", id=_PANEL_IDS[Tab.PENDING]):
                yield ListView(id=_LIST_IDS[Tab.PENDING])
            with Panel("Active / Recent", id=_PANEL_IDS[Tab.ACTIVE]):
                yield ListView(id=_LIST_IDS[Tab.ACTIVE])
        with Panel("Event Log", id=_PANEL_IDS[Tab.EVENTS]):
            yield Static(id="events")
        yield Static(id="error-banner")
        yield Input(placeholder="Task description...", max_length=156, id="task-input")
        yield Static(id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        """Issue the first fetch and start the spinner tick."""
        self.sub_title = format_subtitle(self.state)
        self.set_interval(self._config.tick_seconds, self._tick)
        self._render_view()
        self._submit(self.dashboard.start())

    # --- Inputs into the dashboard ---

    def action_press(self, key: str) -> None:
        """Every bound key goes through the dashboard's key map."""
        self._feed(KeyPressed(key))

    def on_input_changed(self, event: Input.Changed) -> None:
        self._feed(InputChanged(event.value))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._feed(InputSubmitted(event.value))

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        # Clearing a list highlights nothing; the snapshot fold already
        # clamped the selection
        if event.item is None:
            return
        for tab, list_id in _LIST_IDS.items():
            if event.list_view.id == list_id:
                self._feed(SelectionMoved(tab, event.list_view.index))

    async def on_gateway_result(self, message: GatewayResult) -> None:
        self._feed(message.payload)
        if isinstance(message.payload, SnapshotLoaded):
            await self._render_lists()

    def _tick(self) -> None:
        if self.state.busy:
            self._feed(Tick())

    def _feed(self, message) -> None:
        """Apply one message, re-render, then carry out its requests."""
        requests = self.dashboard.handle(message)
        self._render_view()
        self._submit(requests)

    # --- Requests out of the dashboard ---

    def _submit(self, requests: list[Request]) -> None:
        for request in requests:
            if isinstance(request, Quit):
                self.exit()
            elif isinstance(request, OpenLogViewer):
                self._open_log_viewer()
            elif isinstance(request, (FetchTasks, RunCommand)):
                self._run_request(request)

    @work(thread=True, group="gateway")
    def _run_request(self, request: FetchTasks | RunCommand) -> None:
        """Call the gateway off the UI thread and post the outcome back."""
        self.post_message(GatewayResult(execute(request, self.orchestrator)))

    def _open_log_viewer(self) -> None:
        """Hand the terminal to the log viewer until it exits."""
        cmd = self.orchestrator.log_viewer_command()
        diagnostic = None
        logger.info("Opening log viewer", cmd=cmd)
        try:
            with self.suspend():
                result = subprocess.run(cmd, cwd=self._config.project_root)
            if result.returncode != 0:
                diagnostic = Diagnostic(
                    f"log viewer failed: exit status {result.returncode}",
                    returncode=result.returncode,
                )
        except SuspendNotSupported as e:
            diagnostic = Diagnostic(f"log viewer unavailable: {e}")
        except OSError as e:
            diagnostic = Diagnostic(f"log viewer failed: {e}")
        self.post_message(GatewayResult(LogViewerClosed(diagnostic)))

    # --- Rendering ---

    def _render_view(self) -> None:
        state = self.state
        self.sub_title = format_subtitle(state)

        for tab, panel_id in _PANEL_IDS.items():
            self.query_one(f"#{panel_id}", Panel).set_class(
                tab is state.active_tab and not state.input_mode, "-focused"
            )

        self.query_one("#events", Static).update(format_events(state.recent_events()))

        banner = self.query_one("#error-banner", Static)
        banner.update(format_error(state.last_error))
        banner.set_class(state.last_error is not None, "-visible")

        self.query_one("#status-line", Static).update(format_status(state))

        text_input = self.query_one("#task-input", Input)
        if state.input_mode != self._shown_input_mode:
            self._shown_input_mode = state.input_mode
            text_input.value = ""
            text_input.set_class(state.input_mode, "-visible")
            if state.input_mode:
                text_input.focus()
                return
        if not state.input_mode:
            self._focus_active_list()

    def _focus_active_list(self) -> None:
        list_id = _LIST_IDS.get(self.state.active_tab)
        if list_id is None:
            self.set_focus(None)
        else:
            self.query_one(f"#{list_id}", ListView).focus()

    async def _render_lists(self) -> None:
        for tab, list_id in _LIST_IDS.items():
            selection = self.state.selection(tab)
            items = self.state.items(tab)
            view = self.query_one(f"#{list_id}", ListView)
            await view.clear()
            await view.extend([TaskListItem(item) for item in items])
            view.index = selection
