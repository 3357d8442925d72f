from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Header, Footer, DataTable, Static, TabbedContent, TabPane
from textual.containers import Vertical
from textual.binding import Binding

from confsync.day_utils import WEEKDAYS, make_tab_label
from confsync.models import RatedTalk

WEEK_TAB = "week"
TOP_COUNT = 20


class RatingsScreen(Screen):
    """Audience voting results per day and for the whole week."""

    BINDINGS = [
        Binding("r", "refresh", "Refresh", show=True),
        Binding("escape", "go_back", "Back", show=True),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="ratings-content"):
            yield Static("", id="ratings-header")
            with TabbedContent(id="rating-tabs"):
                for day in WEEKDAYS:
                    yield TabPane(make_tab_label(day), id=f"rating-{day}")
                yield TabPane("Week", id=f"rating-{WEEK_TAB}")
        yield Footer()

    def on_mount(self) -> None:
        header = self.query_one("#ratings-header", Static)
        if self.app.client.rating_client is None and not self.app.config.conference.random_rated_talks:
            header.update("[bold]Ratings[/bold] - [red]statistics API not configured[/red]")
        else:
            header.update(f"[bold]Ratings[/bold] - top {TOP_COUNT} talks by average rating")
        self.call_later(self._populate_tab)

    def on_tabbed_content_tab_activated(self, event: TabbedContent.TabActivated) -> None:
        self.call_later(self._populate_tab)

    def _rated_talks(self, key: str) -> list[RatedTalk]:
        client = self.app.client
        if key == WEEK_TAB:
            rated = client.get_rated_talks_overall()
        else:
            rated = client.get_rated_talks(key)
        return sorted(rated, key=lambda r: (r.average_rating, r.total_rating), reverse=True)[:TOP_COUNT]

    def _populate_tab(self):
        """Populate the DataTable for the active tab."""
        tabs = self.query_one("#rating-tabs", TabbedContent)
        active_id = tabs.active
        if not active_id:
            return

        key = active_id.replace("rating-", "")
        pane = tabs.query_one(f"#{active_id}", TabPane)

        existing = pane.query("DataTable")
        if existing:
            table = existing.first()
        else:
            table = DataTable(id=f"rating-table-{key}")
            pane.mount(table)
            table.add_columns("#", "Title", "Speakers", "Average", "Votes")
            table.cursor_type = "row"

        table.clear()
        for rank, rated in enumerate(self._rated_talks(key), 1):
            speakers = ", ".join(s.full_name for s in rated.talk.speakers if s.full_name)
            table.add_row(
                str(rank), rated.talk.name or rated.talk.id, speakers,
                f"{rated.average_rating:.2f}", str(rated.total_rating),
            )

    def action_refresh(self) -> None:
        self._populate_tab()

    def action_go_back(self) -> None:
        self.app.pop_screen()
