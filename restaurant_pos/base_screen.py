"""Shared behaviour for the router-driven screens."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from textual.css.query import NoMatches
from textual.screen import Screen

if TYPE_CHECKING:
    from restaurant_pos.controller import PosController


class PosScreen(Screen[None]):
    """A screen bound to one router view; it re-renders from controller state."""

    view_name: ClassVar[str] = ""

    @property
    def controller(self) -> PosController:
        return self.app.controller  # type: ignore[attr-defined]

    def on_mount(self) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        try:
            self.render_state()
        except NoMatches:
            # Not composed yet; on_mount renders again.
            return

    def render_state(self) -> None:
        raise NotImplementedError
