from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Header, Footer, DataTable, Input, Label, Static, TabbedContent, TabPane
from textual.containers import Horizontal, Vertical
from textual.binding import Binding

from confsync.models import ScheduleSlot
from confsync.day_utils import WEEKDAYS, make_tab_label, format_time_range


def speaker_names(slot: ScheduleSlot) -> str:
    if not slot.talk:
        return ""
    return ", ".join(s.full_name for s in slot.talk.speakers if s.full_name)


class ScheduleScreen(Screen):
    """Main schedule browsing screen, one tab per weekday."""

    BINDINGS = [
        Binding("slash", "focus_search", "Search", show=True),
        Binding("t", "cycle_track", "Filter Track", show=True),
        Binding("r", "reload_day", "Reload", show=True),
        Binding("enter", "view_detail", "Details", show=True),
        Binding("escape", "clear_search", "Clear", show=False),
    ]

    def __init__(self):
        super().__init__()
        self._slots: dict[str, list[ScheduleSlot]] = {}
        self._tracks: list[str] = []
        self._current_track_idx: int = -1
        self._search_text: str = ""

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="schedule-content"):
            with Horizontal(id="search-bar"):
                yield Label("Search:")
                yield Input(placeholder="Filter by title or speaker...", id="search-input")
                yield Static("All Tracks", id="track-filter")
            with TabbedContent(id="day-tabs"):
                for day in WEEKDAYS:
                    yield TabPane(make_tab_label(day), id=f"day-{day}")
        yield Footer()

    def on_mount(self) -> None:
        self._tracks = sorted(t.name for t in self.app.client.get_tracks() if t.name)
        self.call_later(self._populate_active_tab)

    def on_tabbed_content_tab_activated(self, event: TabbedContent.TabActivated) -> None:
        self.call_later(self._populate_active_tab)

    def _active_day(self) -> str | None:
        active_id = self.query_one("#day-tabs", TabbedContent).active
        return active_id.replace("day-", "") if active_id else None

    def _day_slots(self, day: str) -> list[ScheduleSlot]:
        """Schedule slots of a day, fetched on first use."""
        if day not in self._slots:
            self._slots[day] = self.app.client.get_schedule(day)
        return self._slots[day]

    def _build_slot_row(self, slot: ScheduleSlot) -> tuple:
        """Row fields for a slot: (time, title, speakers, track, room, favorites)."""
        time_range = slot.date_time_range
        time_str = format_time_range(time_range.start, time_range.end) if time_range else ""
        talk = slot.talk
        title = talk.name if talk and talk.name else ""
        if talk and talk.session_type and talk.session_type.pause:
            title = f"[{talk.session_type.name or 'Break'}] {title}".strip()
        track = talk.track.name if talk and talk.track else ""
        room = slot.room.name if slot.room else ""
        favorites = talk.favorite_count if talk and talk.favorite_count is not None else slot.favorite_count
        return (time_str, title, speaker_names(slot), track or "", room or "", str(favorites or ""))

    def _populate_active_tab(self):
        """Populate the DataTable for the currently active day tab."""
        day = self._active_day()
        if not day:
            return

        pane = self.query_one(f"#day-{day}", TabPane)
        existing = pane.query("DataTable")
        if existing:
            table = existing.first()
        else:
            table = DataTable(id=f"table-{day}")
            pane.mount(table)
            table.add_columns("Time", "Title", "Speakers", "Track", "Room", "Favorites")
            table.cursor_type = "row"

        table.clear()
        for slot in self._get_filtered_slots(day):
            table.add_row(*self._build_slot_row(slot), key=slot.id)

    def _get_filtered_slots(self, day: str) -> list[ScheduleSlot]:
        """Slots of a day, applying search and track filter, sorted by start time."""
        slots = list(self._day_slots(day))

        if self._search_text:
            query = self._search_text.lower()
            slots = [
                s for s in slots
                if s.talk and (query in (s.talk.name or "").lower() or query in speaker_names(s).lower())
            ]

        if self._current_track_idx >= 0:
            track = self._tracks[self._current_track_idx]
            slots = [s for s in slots if s.talk and s.talk.track and s.talk.track.name == track]

        slots.sort(key=lambda s: (s.date_time_range.start.isoformat() if s.date_time_range and s.date_time_range.start else ""))
        return slots

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search-input":
            self._search_text = event.value
            self._populate_active_tab()

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    def action_clear_search(self) -> None:
        inp = self.query_one("#search-input", Input)
        inp.value = ""
        self._search_text = ""
        self._populate_active_tab()

    def action_cycle_track(self) -> None:
        if not self._tracks:
            return
        self._current_track_idx += 1
        if self._current_track_idx >= len(self._tracks):
            self._current_track_idx = -1

        label = self.query_one("#track-filter", Static)
        if self._current_track_idx < 0:
            label.update("All Tracks")
        else:
            label.update(self._tracks[self._current_track_idx])
        self._populate_active_tab()

    def action_reload_day(self) -> None:
        day = self._active_day()
        if day:
            self._slots.pop(day, None)
            self._populate_active_tab()

    def action_view_detail(self) -> None:
        day = self._active_day()
        if not day:
            return
        tables = self.query_one(f"#day-{day}", TabPane).query("DataTable")
        if not tables or tables.first().row_count == 0:
            return
        table = tables.first()
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        self._open_detail(day, row_key.value)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        day = self._active_day()
        if day:
            self._open_detail(day, event.row_key.value)

    def _open_detail(self, day: str, slot_id: str):
        slot = next((s for s in self._day_slots(day) if s.id == slot_id), None)
        if not slot or not slot.talk:
            self.notify("No talk in this slot", severity="warning")
            return
        from confsync.screens.talk_detail import TalkDetailScreen
        self.app.push_screen(TalkDetailScreen(slot.talk.id, slot))
