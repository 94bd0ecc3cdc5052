"""Dashboard view state and its transition function.

Key presses and gateway results arrive as messages. `Dashboard.handle`
applies one message to completion and returns the requests (gateway calls,
terminal handoff, quit) the runtime should carry out. This module has no
textual dependency, so the state machine is testable on its own.

Results are folded unconditionally: a snapshot that arrives after the user
switched tabs or opened the input box still replaces the previous one, and
a failure never undoes UI changes made in the meantime.
"""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from .config import EVENT_DISPLAY_COUNT
from .errors import Diagnostic
from .orchestrator import Verb
from .task import Snapshot, TaskItem, project

SPINNER_FRAMES = ("⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷")


class Tab(IntEnum):
    """Focusable panels, in cycle order."""

    PENDING = 0
    ACTIVE = 1
    EVENTS = 2

    def next(self) -> "Tab":
        return Tab((self + 1) % len(Tab))


class Intent(Enum):
    """What a key press asks the dashboard to do in command mode."""

    CYCLE_TAB = "cycle_tab"
    BEGIN_ADD = "begin_add"
    START = "start"
    COMPLETE = "complete"
    STOP = "stop"
    REMOVE = "remove"
    REFRESH = "refresh"
    OPEN_LOGS = "open_logs"
    QUIT = "quit"
    ESCAPE = "escape"


KEYMAP: dict[str, Intent] = {
    "tab": Intent.CYCLE_TAB,
    "a": Intent.BEGIN_ADD,
    "s": Intent.START,
    "c": Intent.COMPLETE,
    "x": Intent.STOP,
    "d": Intent.REMOVE,
    "backspace": Intent.REMOVE,
    "r": Intent.REFRESH,
    "l": Intent.OPEN_LOGS,
    "q": Intent.QUIT,
    "ctrl+c": Intent.QUIT,
    "escape": Intent.ESCAPE,
}

# Which verb each selection intent dispatches, the tabs it applies to,
# and the event text it logs before dispatch
_SELECTION_INTENTS: dict[Intent, tuple[Verb, frozenset[Tab], str]] = {
    Intent.START: (Verb.START, frozenset({Tab.PENDING}), "Starting task #{id}..."),
    Intent.COMPLETE: (Verb.COMPLETE, frozenset({Tab.ACTIVE}), "Completing task #{id}..."),
    Intent.STOP: (Verb.STOP, frozenset({Tab.ACTIVE}), "Stopping task #{id}..."),
    Intent.REMOVE: (
        Verb.REMOVE,
        frozenset({Tab.PENDING, Tab.ACTIVE}),
        "Removing task #{id}...",
    ),
}


# === Messages ===


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class InputChanged:
    """The text field's content changed (mirrors its editing)."""

    value: str


@dataclass(frozen=True)
class InputSubmitted:
    """The text field was confirmed with the given content."""

    value: str


@dataclass(frozen=True)
class SelectionMoved:
    tab: Tab
    index: int | None


@dataclass(frozen=True)
class SnapshotLoaded:
    snapshot: Snapshot


@dataclass(frozen=True)
class CommandFailed:
    diagnostic: Diagnostic


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class LogViewerClosed:
    diagnostic: Diagnostic | None = None


Message = (
    KeyPressed
    | InputChanged
    | InputSubmitted
    | SelectionMoved
    | SnapshotLoaded
    | CommandFailed
    | Tick
    | LogViewerClosed
)


# === Requests ===


@dataclass(frozen=True)
class FetchTasks:
    pass


@dataclass(frozen=True)
class RunCommand:
    verb: Verb
    argument: str


@dataclass(frozen=True)
class OpenLogViewer:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Request = FetchTasks | RunCommand | OpenLogViewer | Quit


# === View State ===


@dataclass
class ViewState:
    """Everything the presentation layer renders."""

    active_tab: Tab = Tab.PENDING
    input_mode: bool = False
    input_buffer: str = ""
    pending_selection: int | None = None
    active_selection: int | None = None
    last_error: Diagnostic | None = None
    events: deque[str] = field(default_factory=lambda: deque(maxlen=100))
    snapshot: Snapshot | None = None
    pending_items: list[TaskItem] = field(default_factory=list)
    active_items: list[TaskItem] = field(default_factory=list)
    in_flight: int = 0
    spinner_frame: int = 0
    quitting: bool = False

    @property
    def loaded(self) -> bool:
        return self.snapshot is not None

    @property
    def busy(self) -> bool:
        return self.in_flight > 0

    @property
    def spinner(self) -> str:
        return SPINNER_FRAMES[self.spinner_frame % len(SPINNER_FRAMES)]

    def recent_events(self, count: int = EVENT_DISPLAY_COUNT) -> list[str]:
        """Newest events first, at most `count`."""
        return list(self.events)[:count]

    def items(self, tab: Tab) -> list[TaskItem]:
        if tab is Tab.PENDING:
            return self.pending_items
        if tab is Tab.ACTIVE:
            return self.active_items
        return []

    def selection(self, tab: Tab) -> int | None:
        if tab is Tab.PENDING:
            return self.pending_selection
        if tab is Tab.ACTIVE:
            return self.active_selection
        return None

    def selected_item(self, tab: Tab) -> TaskItem | None:
        """The highlighted row of `tab`'s list, if any."""
        index = self.selection(tab)
        items = self.items(tab)
        if index is None or not 0 <= index < len(items):
            return None
        return items[index]


def _clamp(index: int | None, length: int) -> int | None:
    if length == 0:
        return None
    if index is None:
        return 0
    return max(0, min(index, length - 1))


# === Transition function ===


class Dashboard:
    """Single owner of ViewState; applies one message at a time."""

    def __init__(self, event_log_limit: int = 100):
        self.state = ViewState(events=deque(maxlen=event_log_limit))

    def start(self) -> list[Request]:
        """Requests to issue when the dashboard comes up."""
        return self._request(FetchTasks())

    def handle(self, message: Message) -> list[Request]:
        """Apply `message` and return follow-up requests."""
        if isinstance(message, KeyPressed):
            if self.state.input_mode:
                return self._input_key(message.key)
            return self._command_key(message.key)
        if isinstance(message, InputChanged):
            if self.state.input_mode:
                self.state.input_buffer = message.value
            return []
        if isinstance(message, InputSubmitted):
            if self.state.input_mode:
                return self._confirm_input(message.value)
            return []
        if isinstance(message, SelectionMoved):
            self._move_selection(message.tab, message.index)
            return []
        if isinstance(message, SnapshotLoaded):
            self._resolved()
            self._load(message.snapshot)
            return []
        if isinstance(message, CommandFailed):
            self._resolved()
            self._fail(message.diagnostic)
            return []
        if isinstance(message, Tick):
            self.state.spinner_frame = (self.state.spinner_frame + 1) % len(SPINNER_FRAMES)
            return []
        if isinstance(message, LogViewerClosed):
            if message.diagnostic is not None:
                self._fail(message.diagnostic)
            else:
                self.log("Log viewer closed.")
            return []
        raise TypeError(f"unhandled message: {message!r}")

    def log(self, text: str) -> None:
        """Prepend an event to the event log."""
        self.state.events.appendleft(text)

    # --- Input mode ---

    def _input_key(self, key: str) -> list[Request]:
        if key == "escape":
            self._leave_input()
            return []
        if key == "enter":
            return self._confirm_input(self.state.input_buffer)
        # Everything else belongs to the text field's own editing
        return []

    def _confirm_input(self, value: str) -> list[Request]:
        description = value.strip()
        self._leave_input()
        if not description:
            return []
        self.log(f"Adding task: {description}...")
        return self._request(RunCommand(Verb.ADD, description))

    def _leave_input(self) -> None:
        self.state.input_buffer = ""
        self.state.input_mode = False

    # --- Command mode ---

    def _command_key(self, key: str) -> list[Request]:
        intent = KEYMAP.get(key)
        if intent is None or intent is Intent.ESCAPE:
            # Escape is consumed so it never quits the dashboard
            return []

        if intent is Intent.CYCLE_TAB:
            self.state.active_tab = self.state.active_tab.next()
            return []
        if intent is Intent.BEGIN_ADD:
            self.state.input_buffer = ""
            self.state.input_mode = True
            return []
        if intent is Intent.REFRESH:
            self.log("Scanning tasks...")
            return self._request(FetchTasks())
        if intent is Intent.OPEN_LOGS:
            return [OpenLogViewer()]
        if intent is Intent.QUIT:
            self.state.quitting = True
            return [Quit()]
        return self._act_on_selection(intent)

    def _act_on_selection(self, intent: Intent) -> list[Request]:
        verb, tabs, event = _SELECTION_INTENTS[intent]
        tab = self.state.active_tab
        if tab not in tabs:
            return []
        item = self.state.selected_item(tab)
        if item is None or item.task_id <= 0:
            return []
        self.log(event.format(id=item.task_id))
        return self._request(RunCommand(verb, str(item.task_id)))

    def _move_selection(self, tab: Tab, index: int | None) -> None:
        length = len(self.state.items(tab))
        if index is not None and not 0 <= index < length:
            return
        if tab is Tab.PENDING:
            self.state.pending_selection = index
        elif tab is Tab.ACTIVE:
            self.state.active_selection = index

    # --- Results ---

    def _load(self, snapshot: Snapshot) -> None:
        state = self.state
        state.snapshot = snapshot
        state.pending_items, state.active_items = project(snapshot)
        state.pending_selection = _clamp(state.pending_selection, len(state.pending_items))
        state.active_selection = _clamp(state.active_selection, len(state.active_items))
        state.last_error = None
        self.log("Tasks refreshed.")

    def _fail(self, diagnostic: Diagnostic) -> None:
        self.state.last_error = diagnostic
        self.log(f"Error: {diagnostic.summary}")

    def _request(self, request: Request) -> list[Request]:
        self.state.in_flight += 1
        return [request]

    def _resolved(self) -> None:
        self.state.in_flight = max(0, self.state.in_flight - 1)
