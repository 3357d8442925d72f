from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Header, Footer, Static, Button, RichLog
from textual.containers import Vertical
from textual.binding import Binding


class SyncScreen(Screen):
    """Screen to trigger and monitor a shared photo sync."""

    BINDINGS = [
        Binding("escape", "go_back", "Back", show=True),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="sync-container"):
            yield Static("", id="sync-status")
            yield Button("Sync Photos", id="sync-button", variant="primary")
            yield RichLog(id="sync-log", highlight=True, markup=True)
        yield Footer()

    def on_mount(self) -> None:
        self._update_status()

    def _update_status(self):
        """Show photo storage state."""
        photo_sync = self.app.photo_sync
        settings = photo_sync.settings
        status = self.query_one("#sync-status", Static)
        synced = "yes" if photo_sync.initialized else "Never"
        status.update(
            f"[bold]Photo feed:[/bold] {settings.query_url or 'not configured'}\n"
            f"[bold]Stored photos:[/bold] {photo_sync.storage.count()}/{settings.cache_size}\n"
            f"[bold]Synced:[/bold] {synced}"
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "sync-button":
            event.button.disabled = True
            event.button.label = "Syncing..."
            self.run_worker(self._do_sync, exclusive=True, thread=True)

    def _do_sync(self):
        """Execute one sync pass in a worker thread."""
        log = self.query_one("#sync-log", RichLog)

        def log_msg(msg: str):
            self.app.call_from_thread(log.write, msg)

        try:
            log_msg("Starting photo sync...")
            pages = self.app.photo_sync.run()
            log_msg(f"[bold green]Sync complete after {pages} page(s).[/bold green]")
        except Exception as e:
            log_msg(f"[bold red]Error: {e}[/bold red]")
        finally:
            self.app.call_from_thread(self._finish_sync)

    def _finish_sync(self):
        button = self.query_one("#sync-button", Button)
        button.disabled = False
        button.label = "Sync Photos"
        self._update_status()

    def action_go_back(self) -> None:
        self.app.pop_screen()
