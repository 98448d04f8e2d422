"""
Desktop host for the wheel using pygame.

Keyboard Mapping:
    SPACE: Spin
    R: Refresh eligible candidates from the authority
    G: Toggle link quality (silver/gold)
    ESC: Exit
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pygame

from guildwheel.authority.base import WinnerAuthority
from guildwheel.config.settings import Settings
from guildwheel.controller import SpinController
from guildwheel.core.errors import SpinError, SpinErrorKind
from guildwheel.core.events import Event, EventType
from guildwheel.graphics.primitives import new_buffer
from guildwheel.graphics.wheel import DEFAULT_STYLE, render_wheel, wheel_geometry
from guildwheel.scheduling import AsyncioFrameScheduler
from guildwheel.wheel.geometry import SegmentLayout, label_position
from guildwheel.wheel.models import SpinCriteria, SpinResult

logger = logging.getLogger(__name__)

EMPTY_WHEEL_PROMPT = "Select quality and spin!"


def winner_lines(result: SpinResult) -> list[str]:
    """Winner card text: name, then rank and days in guild when known."""
    winner = result.winner
    lines = [f"Winner: {winner.label if winner else result.winner_id}"]
    if winner is None:
        return lines
    details = []
    if winner.metadata.get("rank"):
        details.append(f"Rank: {winner.metadata['rank']}")
    if winner.metadata.get("days_in_guild") is not None:
        details.append(f"Days in Guild: {winner.metadata['days_in_guild']}")
    if details:
        lines.append("  |  ".join(details))
    return lines


@dataclass
class WindowConfig:
    """Simulator window configuration."""
    size: int = 256
    scale: int = 2
    title: str = "Guild Wheel"
    fps: int = 60
    status_height: int = 66

    # Colors
    bg_color: tuple[int, int, int] = (20, 20, 30)
    text_color: tuple[int, int, int] = (200, 200, 220)
    error_color: tuple[int, int, int] = (255, 120, 120)
    accent_color: tuple[int, int, int] = (255, 215, 0)

    @classmethod
    def from_settings(cls, settings: Settings) -> "WindowConfig":
        display = settings.display
        return cls(size=display.size, scale=display.scale, title=display.title, fps=display.fps)


class SimulatorWindow:
    """Pygame window hosting a SpinController."""

    def __init__(
        self,
        authority: WinnerAuthority,
        settings: Settings,
        config: Optional[WindowConfig] = None,
    ) -> None:
        self.settings = settings
        self.config = config or WindowConfig.from_settings(settings)
        self._authority = authority
        self._quality = settings.authority.default_quality

        self._buffer = new_buffer(self.config.size, self.config.size, DEFAULT_STYLE.background)
        self._layout: Optional[SegmentLayout] = None
        self._rotation = 0.0
        self._highlight = False
        self._status: list[str] = ["SPACE to spin, R to refresh"]
        self._status_is_error = False

        self._screen: Optional[pygame.Surface] = None
        self._clock: Optional[pygame.time.Clock] = None
        self._font: Optional[pygame.font.Font] = None
        self._label_font: Optional[pygame.font.Font] = None
        self._running = False
        self._tasks: set[asyncio.Task] = set()

        self.controller: Optional[SpinController] = None

    # Controller callbacks
    def _on_render(self, wheel: SegmentLayout, rotation: float) -> None:
        self._layout = wheel
        self._rotation = rotation
        self._paint()

    def _paint(self) -> None:
        if self._layout is None:
            return
        render_wheel(
            self._buffer,
            self._layout,
            self._rotation,
            pointer_angle=self.settings.wheel.pointer_angle,
            highlight=self._highlight,
        )

    def _on_resolved(self, result: SpinResult) -> None:
        self._highlight = True
        self._paint()
        self._set_status(*winner_lines(result))

    def _on_aborted(self, kind: SpinErrorKind, message: str) -> None:
        self._set_status(message, error=True)

    def _on_candidates_changed(self, event: Event) -> None:
        # The old winner is not necessarily under the pointer of the new layout
        self._highlight = False
        self._set_status(f"Wheel updated: {event.data['count']} candidates")

    def _on_spin_requested(self, event: Event) -> None:
        self._highlight = False
        self._set_status("Picking a winner...")

    def _set_status(self, *lines: str, error: bool = False) -> None:
        self._status = list(lines)
        self._status_is_error = error

    # Input
    def _criteria(self) -> SpinCriteria:
        return SpinCriteria(quality=self._quality)

    def _start_task(self, coro) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _refresh(self) -> None:
        try:
            candidates = await self.controller.refresh_candidates(self._criteria())
        except SpinError as e:
            logger.warning(f"Refresh failed: {e}")
            self._set_status(e.message, error=True)
            return
        self._set_status(f"{len(candidates)} eligible for {self._quality} links")

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_SPACE:
                    self._start_task(self.controller.spin(self._criteria()))
                elif event.key == pygame.K_r:
                    self._start_task(self._refresh())
                elif event.key == pygame.K_g and not self.controller.is_busy:
                    self._quality = "gold" if self._quality == "silver" else "silver"
                    self._start_task(self._refresh())

    # Drawing
    def _init_pygame(self) -> None:
        pygame.init()
        pygame.display.set_caption(self.config.title)
        side = self.config.size * self.config.scale
        self._screen = pygame.display.set_mode((side, side + self.config.status_height))
        self._clock = pygame.time.Clock()
        pygame.font.init()
        self._font = pygame.font.SysFont(None, 22)
        self._label_font = pygame.font.SysFont(None, 18)
        logger.info(f"Pygame initialized: {side}x{side + self.config.status_height}")

    def _render(self) -> None:
        screen = self._screen
        screen.fill(self.config.bg_color)

        side = self.config.size * self.config.scale
        surface = pygame.surfarray.make_surface(np.ascontiguousarray(self._buffer.swapaxes(0, 1)))
        screen.blit(pygame.transform.scale(surface, (side, side)), (0, 0))

        if self._layout is not None and self._layout.is_empty:
            prompt = self._font.render(EMPTY_WHEEL_PROMPT, True, (60, 60, 60))
            screen.blit(prompt, prompt.get_rect(center=(side // 2, side // 2)))
        elif self._layout is not None:
            cx, cy, radius = wheel_geometry(self._buffer)
            scale = self.config.scale
            for segment in self._layout.segments:
                x, y = label_position(segment, (cx, cy), radius, self._rotation)
                text = self._label_font.render(segment.candidate.label[:12], True, (0, 0, 0))
                rect = text.get_rect(center=(int(x * scale), int(y * scale)))
                screen.blit(text, rect)

        color = self.config.error_color if self._status_is_error else self.config.text_color
        for i, line in enumerate(self._status[:2]):
            screen.blit(self._font.render(line, True, color), (10, side + 6 + i * 20))

        info = f"{self.controller.state.name}  |  {self._quality}  |  {len(self.controller.candidates)} on wheel"
        screen.blit(self._font.render(info, True, self.config.accent_color), (10, side + 46))

        pygame.display.flip()

    def attach(self, controller: SpinController) -> None:
        """Wire the window's callbacks into a controller."""
        self.controller = controller
        controller.set_on_resolved(self._on_resolved)
        controller.set_on_aborted(self._on_aborted)
        controller.event_bus.subscribe(EventType.SPIN_REQUESTED, self._on_spin_requested)
        controller.event_bus.subscribe(EventType.CANDIDATES_CHANGED, self._on_candidates_changed)

    async def run(self) -> None:
        """Main simulator loop."""
        self._init_pygame()
        self.attach(SpinController(
            authority=self._authority,
            scheduler=AsyncioFrameScheduler(fps=self.config.fps),
            render=self._on_render,
            settings=self.settings.wheel,
        ))
        self.controller.render_current()
        self._start_task(self._refresh())

        self._running = True
        logger.info("Simulator started")

        try:
            while self._running:
                self._handle_events()
                self._render()
                self._clock.tick(self.config.fps)
                # Yield to frame callbacks and authority requests
                await asyncio.sleep(0)
        finally:
            self.controller.teardown()
            for task in list(self._tasks):
                task.cancel()
            pygame.quit()
            logger.info("Simulator stopped")
