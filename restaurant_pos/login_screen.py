"""Login / sign-up screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.reactive import reactive
from textual.widgets import Footer, Header, Input, Static

from restaurant_pos.base_screen import PosScreen


class LoginScreen(PosScreen):
    """Credential form; Ctrl+N switches between signing in and signing up."""

    view_name = "login"

    BINDINGS = [
        Binding("ctrl+n", "toggle_mode", "Sign in / Sign up", priority=True),
        ("ctrl+q", "app.quit", "Quit"),
    ]

    CSS = """
    LoginScreen {
        align: center middle;
    }

    #login-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #login-title {
        text-style: bold;
        margin-bottom: 1;
    }

    #login-help {
        margin-top: 1;
        color: $text-muted;
    }
    """

    sign_up_mode = reactive(False)

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="login-dialog"):
            yield Static(id="login-title")
            yield Input(placeholder="Username", id="username")
            yield Input(placeholder="Password", password=True, id="password")
            yield Static(id="login-help")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_view()
        self.query_one("#username", Input).focus()

    def render_state(self) -> None:
        title = self.query_one("#login-title", Static)
        help_text = self.query_one("#login-help", Static)
        if self.sign_up_mode:
            title.update("Create a waiter account")
            help_text.update("Enter to sign up. Ctrl+N to sign in instead.")
        else:
            title.update("Restaurant POS - Sign In")
            help_text.update("Enter to sign in. Ctrl+N to create an account.")

    def action_toggle_mode(self) -> None:
        self.sign_up_mode = not self.sign_up_mode
        self.refresh_view()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        if event.input.id == "username":
            self.query_one("#password", Input).focus()
            return
        self._submit()

    def _submit(self) -> None:
        username = self.query_one("#username", Input).value
        password_input = self.query_one("#password", Input)
        if self.sign_up_mode:
            ok = self.controller.sign_up(username, password_input.value)
        else:
            ok = self.controller.login(username, password_input.value)
        if not ok:
            password_input.value = ""
            password_input.focus()
