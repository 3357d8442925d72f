from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Header, Footer, Static, Label
from textual.containers import VerticalScroll
from textual.binding import Binding

from confsync.day_utils import format_time_range
from confsync.models import ScheduleSlot


class TalkDetailScreen(Screen):
    """Detailed view of a single talk, fetched fresh from the feed."""

    BINDINGS = [
        Binding("escape", "go_back", "Back", show=True),
    ]

    def __init__(self, talk_id: str, slot: ScheduleSlot | None = None):
        super().__init__()
        self.talk_id = talk_id
        self.slot = slot

    def compose(self) -> ComposeResult:
        yield Header()
        yield VerticalScroll(id="detail-container")
        yield Footer()

    def on_mount(self) -> None:
        self._populate()

    def _populate(self):
        """Fill the detail view with talk data."""
        container = self.query_one("#detail-container", VerticalScroll)

        talk = self.app.client.get_talk(self.talk_id)
        if not talk and self.slot:
            talk = self.slot.talk
        if not talk:
            container.mount(Static("Talk not found."))
            return

        container.mount(Static(f"[bold]{talk.name or talk.id}[/bold]"))

        meta_parts = []
        if self.slot and self.slot.date_time_range and self.slot.date_time_range.start:
            time_range = self.slot.date_time_range
            time_str = format_time_range(time_range.start, time_range.end, separator=" - ")
            meta_parts.append(f"[bold]Time:[/bold] {time_range.start:%A} {time_str}")
        if self.slot and self.slot.room:
            meta_parts.append(f"[bold]Room:[/bold] {self.slot.room.name}")
        if talk.session_type:
            meta_parts.append(f"[bold]Type:[/bold] {talk.session_type.name}")
        if talk.track:
            meta_parts.append(f"[bold]Track:[/bold] {talk.track.name}")
        if talk.language:
            meta_parts.append(f"[bold]Language:[/bold] {talk.language}")
        if talk.audience_level:
            meta_parts.append(f"[bold]Level:[/bold] {talk.audience_level}")
        if talk.favorite_count is not None:
            meta_parts.append(f"[bold]Favorites:[/bold] {talk.favorite_count}")
        if talk.tags:
            meta_parts.append(f"[bold]Tags:[/bold] {', '.join(talk.tags)}")
        container.mount(Static("\n".join(meta_parts)))

        for speaker in talk.speakers:
            container.mount(Static(""))
            container.mount(Label(f"[bold]Speaker: {speaker.full_name or speaker.id}[/bold]"))

            speaker_meta = []
            if speaker.company:
                speaker_meta.append(f"[bold]Company:[/bold] {speaker.company}")
            for platform, handle in sorted(speaker.social_media.items()):
                speaker_meta.append(f"[bold]{platform.title()}:[/bold] {handle}")
            if speaker_meta:
                container.mount(Static("\n".join(speaker_meta)))

    def action_go_back(self) -> None:
        self.app.pop_screen()
