"""Full-screen terminal UI for the stopwatch, timer and history pages."""

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from .pages import Page, PageController, PageViewModel
from .session import SessionMode, SessionStatus

FOOTER_HINTS = "[space] Start/Reset [q] Quit [h]/[l] Change Page [j]/[k] Adjust/Scroll"
PANEL_WIDTH = 32


def format_duration(seconds: float) -> str:
    """Format seconds as ``MM:SS.cc``; minutes are not wrapped at 60."""
    centis = int(max(0.0, seconds) * 100)
    mins, centis = divmod(centis, 6000)
    secs, centis = divmod(centis, 100)
    return f"{mins:02d}:{secs:02d}.{centis:02d}"


def format_history(model: PageViewModel) -> str:
    """Render the visible history window as a two-column table."""
    lines = [f"{'Date':<11} | {'Minutes':>7}", "-" * 21]
    for day, minutes in model.history:
        lines.append(f"{day.isoformat():<11} | {minutes:>7}")

    # Keys we could not read as dates go after the oldest entry
    if model.history_offset + len(model.history) >= model.history_total:
        for key in model.unparsed_history:
            lines.append(f"{key[:11]:<11} | {'?':>7}")
    return "\n".join(lines)


class TimerDisplay:
    """Draws PageViewModel snapshots and drives the input/tick loop."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def create_layout(self, model: PageViewModel) -> Layout:
        """Create the layout for one frame."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        header_text = Text(
            f"< Page {model.page_number} of {model.page_count} >",
            style="cyan",
            justify="center",
        )
        layout["header"].update(Align.center(header_text, vertical="middle"))
        layout["body"].update(Align.center(self._create_body_content(model), vertical="middle"))

        footer_text = Text(FOOTER_HINTS, style="dim", justify="center")
        layout["footer"].update(Align.center(footer_text, vertical="middle"))
        return layout

    def _create_body_content(self, model: PageViewModel) -> Group:
        components = []

        style = ""
        match model.page:
            case Page.STOPWATCH:
                body = self._stopwatch_text(model)
            case Page.TIMER:
                body = self._timer_text(model)
                if model.mode is SessionMode.TIMER and model.status is SessionStatus.COMPLETED:
                    style = "red"
            case Page.HISTORY:
                body = format_history(model)

        panel = Panel(
            Text(body, style=style, justify="center"),
            title=f" {model.page.title} ",
            title_align="left",
            border_style="grey50",
            width=PANEL_WIDTH,
        )
        components.append(Align.center(panel))

        if model.page is not Page.HISTORY and not model.page_session_running:
            components.append(
                Text(
                    f"{model.minutes_today} minutes focused today",
                    style="yellow",
                    justify="center",
                )
            )

        if model.notice:
            components.append(Text(model.notice, style="bold red", justify="center"))

        return Group(*components)

    @staticmethod
    def _stopwatch_text(model: PageViewModel) -> str:
        if model.mode is SessionMode.STOPWATCH:
            return format_duration(model.elapsed)
        return format_duration(0)

    @staticmethod
    def _timer_text(model: PageViewModel) -> str:
        if model.mode is SessionMode.TIMER and model.status is not SessionStatus.IDLE:
            return format_duration(model.remaining)
        return format_duration(model.target_minutes * 60)

    def run(self, controller: PageController, keyboard=None, tick_interval: float = 0.1) -> str:
        """
        Run the full-screen UI until the user quits.

        Each iteration waits up to *tick_interval* seconds for a key, then
        always ticks the session before drawing.

        Returns 'quit' or 'interrupted'.
        """
        from .keyboard import get_keyboard_handler

        keyboard = keyboard or get_keyboard_handler()
        controller.history_rows = max(1, self.console.height // 2 - 4)

        try:
            with Live(
                self.create_layout(controller.view_model()),
                console=self.console,
                auto_refresh=False,
                screen=True,
            ) as live:
                while True:
                    key = keyboard.get_key(tick_interval)
                    if key is not None:
                        controller.handle_key(key)
                        if controller.quit_requested:
                            return "quit"

                    if controller.tick() is not None:
                        self.console.bell()

                    live.update(self.create_layout(controller.view_model()), refresh=True)

        except KeyboardInterrupt:
            return "interrupted"
        finally:
            keyboard.stop()
