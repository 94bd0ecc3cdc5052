"""Carry out gateway requests and turn their outcome into a message.

`execute` blocks on the orchestrator, so the dashboard runs it on a worker
thread and posts the returned message back to its own queue. Each request
produces exactly one message.
"""

from collections.abc import Callable

from .errors import GatewayError
from .logging import get_logger
from .orchestrator import Orchestrator, Verb
from .state import CommandFailed, FetchTasks, RunCommand, SnapshotLoaded
from .task import Snapshot

logger = get_logger("dispatch")


def _task_id(argument: str) -> int:
    return int(argument)


def _verb_calls(orchestrator: Orchestrator) -> dict[Verb, Callable[[str], Snapshot]]:
    return {
        Verb.ADD: orchestrator.add,
        Verb.START: lambda arg: orchestrator.start(_task_id(arg)),
        Verb.STOP: lambda arg: orchestrator.stop(_task_id(arg)),
        Verb.COMPLETE: lambda arg: orchestrator.complete(_task_id(arg)),
        Verb.REMOVE: lambda arg: orchestrator.remove(_task_id(arg)),
    }


def execute(
    request: FetchTasks | RunCommand,
    orchestrator: Orchestrator,
) -> SnapshotLoaded | CommandFailed:
    """Run one gateway request to completion.

    Args:
        request: A fetch or an orchestrator subcommand.
        orchestrator: Gateway to call.

    Returns:
        SnapshotLoaded with the fresh snapshot, or CommandFailed carrying
        the diagnostic.
    """
    try:
        if isinstance(request, FetchTasks):
            snapshot = orchestrator.fetch()
        else:
            call = _verb_calls(orchestrator).get(request.verb)
            if call is None:
                raise ValueError(f"{request.verb.value} is not a dispatchable command")
            snapshot = call(request.argument)
    except GatewayError as e:
        logger.warning("Request failed", request=repr(request), error=e.diagnostic.summary)
        return CommandFailed(e.diagnostic)

    logger.debug("Request finished", request=repr(request), tasks=len(snapshot))
    return SnapshotLoaded(snapshot)
