from queue import ShutDown

from textual.app import App
from textual.app import ComposeResult
from textual.widgets import DataTable
from textual.widgets import Footer
from textual.widgets import Header

from .computation import ComputationErrored
from .computation import ComputationResumed
from .computation import ComputationStarted
from .computation import ComputationSucceeded
from .computation import ComputationSuspended
from .computation import ComputationThrew
from .corun import Corun
from .thread import Thread

type ComputationEvent = (
    ComputationStarted
    | ComputationSuspended
    | ComputationResumed
    | ComputationThrew
    | ComputationSucceeded
    | ComputationErrored
)


class Monitor(App):
    """TUI for monitoring computation events."""

    TITLE = "corun Monitor"

    def __init__(self):
        super().__init__()
        self.__corun = Corun()
        self.__thread = Thread(target=self.__listen)
        self.__events = self.__corun.subscribe(
            {
                ComputationStarted,
                ComputationSuspended,
                ComputationResumed,
                ComputationThrew,
                ComputationSucceeded,
                ComputationErrored,
            }
        )

    def __listen(self):
        while True:
            try:
                event = self.__events.get()
            except ShutDown:
                break

            self.call_from_thread(self.handle_computation_event, event)

    def handle_computation_event(self, event: ComputationEvent):
        table = self.query_one(DataTable)
        match event:
            case ComputationStarted():
                table.add_row(event.id, event.factory, "Started", "", key=event.id)
                return
            case ComputationSuspended():
                status, detail = "Suspended", event.awaitable
            case ComputationResumed():
                status, detail = "Resumed", event.value
            case ComputationThrew():
                status, detail = "Threw", event.exception
            case ComputationSucceeded():
                status, detail = "Succeeded", event.value
            case ComputationErrored():
                status, detail = "Errored", event.exception

        if event.id not in table.rows:
            # Started before the monitor was listening.
            table.add_row(event.id, "?", status, detail, key=event.id)
            return
        table.update_cell(event.id, self.__column_keys[2], status)
        table.update_cell(event.id, self.__column_keys[3], detail)

    def compose(self) -> ComposeResult:
        yield Header()
        yield DataTable(cursor_type="row", zebra_stripes=True)
        yield Footer()

    def on_mount(self):
        table = self.query_one(DataTable)
        self.__column_keys = table.add_columns("ID", "Factory", "Status", "Detail")
        self.__thread.start()

    def on_unmount(self) -> None:
        self.__corun.shutdown()
        self.__thread.join()
