from __future__ import annotations

from guildwheel.core.errors import (
    AuthorityRejected,
    AuthorityUnreachable,
    NoEligibleCandidates,
    SpinError,
    SpinErrorKind,
)
from guildwheel.core.state import SpinState, SpinStateMachine


def test_happy_path():
    machine = SpinStateMachine()
    seen = []
    machine.add_listener(lambda old, new, ctx: seen.append((old, new)))

    assert machine.is_idle
    assert machine.transition(SpinState.REQUESTING, session_id=3)
    assert machine.context.session_id == 3
    assert machine.transition(SpinState.ANIMATING)
    assert machine.transition(SpinState.RESOLVED, result="winner")
    assert machine.context.result == "winner"
    assert machine.transition(SpinState.IDLE)

    assert machine.context.session_id is None
    assert seen == [
        (SpinState.IDLE, SpinState.REQUESTING),
        (SpinState.REQUESTING, SpinState.ANIMATING),
        (SpinState.ANIMATING, SpinState.RESOLVED),
        (SpinState.RESOLVED, SpinState.IDLE),
    ]


def test_invalid_transitions_are_refused():
    machine = SpinStateMachine()
    assert not machine.transition(SpinState.ANIMATING)
    assert not machine.transition(SpinState.RESOLVED)
    assert machine.state == SpinState.IDLE

    machine.transition(SpinState.REQUESTING)
    assert not machine.transition(SpinState.REQUESTING)
    assert not machine.transition(SpinState.RESOLVED)
    assert machine.state == SpinState.REQUESTING


def test_abort_returns_to_idle():
    machine = SpinStateMachine()
    seen = []
    machine.add_listener(lambda old, new, ctx: seen.append((new, ctx.error_kind)))
    machine.transition(SpinState.REQUESTING)

    assert machine.abort(SpinErrorKind.AUTHORITY_UNREACHABLE)
    assert machine.is_idle
    assert seen[-2] == (SpinState.ABORTED, SpinErrorKind.AUTHORITY_UNREACHABLE)
    assert seen[-1] == (SpinState.IDLE, None)


def test_abort_from_resolved_is_refused():
    machine = SpinStateMachine()
    machine.transition(SpinState.REQUESTING)
    machine.transition(SpinState.ANIMATING)
    machine.transition(SpinState.RESOLVED)
    assert not machine.abort()
    assert machine.state == SpinState.RESOLVED


def test_listener_errors_do_not_break_transitions():
    machine = SpinStateMachine()
    calls = []

    def broken(old, new, ctx):
        raise RuntimeError("boom")

    machine.add_listener(broken)
    machine.add_listener(lambda old, new, ctx: calls.append(new))
    assert machine.transition(SpinState.REQUESTING)
    assert calls == [SpinState.REQUESTING]

    machine.remove_listener(broken)
    machine.remove_listener(broken)
    assert machine.abort()


def test_error_kinds_carry_messages():
    assert NoEligibleCandidates().kind is SpinErrorKind.NO_ELIGIBLE_CANDIDATES
    assert AuthorityUnreachable("timeout").detail == "timeout"
    assert AuthorityRejected().message == SpinErrorKind.AUTHORITY_REJECTED.value
    assert SpinError("x", kind=SpinErrorKind.AUTHORITY_UNREACHABLE).kind is SpinErrorKind.AUTHORITY_UNREACHABLE
    assert str(NoEligibleCandidates()) == "No eligible candidates to spin for"
    assert not SpinErrorKind.SESSION_SUPERSEDED.user_visible
    assert SpinErrorKind.AUTHORITY_REJECTED.user_visible
