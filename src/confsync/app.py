from pathlib import Path

from textual.app import App
from textual.binding import Binding

from confsync.client import ConferenceClient
from confsync.config import Config
from confsync.photo_sync import PhotoSharingSync


CSS_PATH = Path(__file__).parent / "styles" / "app.tcss"


class ConfSyncApp(App):
    """Conference schedule, ratings and photo sync browser."""

    TITLE = "confsync"
    SUB_TITLE = "Conference Feed"
    CSS_PATH = CSS_PATH

    BINDINGS = [
        Binding("1", "show_schedule", "Schedule", show=True, priority=True),
        Binding("2", "show_ratings", "Ratings", show=True, priority=True),
        Binding("3", "show_sync", "Photos", show=True, priority=True),
        Binding("q", "quit", "Quit", show=True, priority=True),
    ]

    def __init__(self, config: Config):
        super().__init__()
        self.config = config
        self.client: ConferenceClient = ConferenceClient(config.conference)
        self.photo_sync: PhotoSharingSync = PhotoSharingSync(config.photo_sharing, self.client.rest)

    def on_mount(self) -> None:
        from confsync.screens.schedule import ScheduleScreen
        self.install_screen(ScheduleScreen(), "schedule")

        self.sub_title = self.client.name
        rooms = len(self.client.get_rooms())
        tracks = len(self.client.get_tracks())
        if rooms or tracks:
            self.notify(f"Loaded {rooms} rooms and {tracks} tracks", severity="information")
        else:
            self.notify(
                "No reference data found. Check event_base_uri in your configuration",
                severity="warning",
            )
        if self.client.rating_client is None:
            self.notify("Statistics API not configured, ratings disabled", severity="warning")
        self.push_screen("schedule")

    def action_show_schedule(self) -> None:
        self.switch_screen("schedule")

    def action_show_ratings(self) -> None:
        from confsync.screens.ratings import RatingsScreen
        self.push_screen(RatingsScreen())

    def action_show_sync(self) -> None:
        from confsync.screens.sync import SyncScreen
        self.push_screen(SyncScreen())

    def action_quit(self) -> None:
        self.client.close()
        self.exit()
