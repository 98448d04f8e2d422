from __future__ import annotations

import pytest

from guildwheel.config.settings import Settings
from guildwheel.controller import SpinController
from guildwheel.simulator.window import SimulatorWindow, winner_lines
from guildwheel.wheel.models import Candidate, CandidateSet, SpinResult

from conftest import FakeAuthority


@pytest.fixture
def window_and_controller(abcd, scheduler, wheel_settings):
    authority = FakeAuthority(abcd, winner_id="C")
    window = SimulatorWindow(authority, Settings(_env_file=None))
    controller = SpinController(
        authority,
        scheduler,
        render=window._on_render,
        settings=wheel_settings,
        candidates=abcd,
    )
    window.attach(controller)
    return window, controller


@pytest.mark.asyncio
async def test_winner_highlighted_after_spin(window_and_controller, scheduler):
    window, controller = window_and_controller
    await controller.spin()
    scheduler.run_until_idle()

    assert window._highlight is True
    assert window._status[0] == "Winner: C"


@pytest.mark.asyncio
async def test_queued_roster_clears_winner_highlight(window_and_controller, scheduler):
    window, controller = window_and_controller
    await controller.spin()
    scheduler.step()
    controller.set_candidates(CandidateSet.from_labels("X", "Y"))
    scheduler.run_until_idle()

    assert controller.candidates.ids == ("X", "Y")
    assert window._layout is controller.layout
    assert window._highlight is False
    assert not any(line.startswith("Winner") for line in window._status)


def test_winner_card_lines():
    winner = Candidate("101", "Aldric", {"rank": "Officer", "days_in_guild": 412})
    assert winner_lines(SpinResult("101", winner)) == [
        "Winner: Aldric",
        "Rank: Officer  |  Days in Guild: 412",
    ]
    assert winner_lines(SpinResult("102", Candidate("102", "Brienne"))) == ["Winner: Brienne"]
    assert winner_lines(SpinResult("103")) == ["Winner: 103"]
