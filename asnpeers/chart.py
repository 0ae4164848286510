"""
asnpeers - Terminal bar chart
Draws peers-per-ASN as a full-screen bar chart and waits for 'q' to quit

Init -> Rendered -> (await quit) -> Closed. The terminal is always restored
on the way out, whatever happens in between.
"""

import os
import select
import sys
from typing import List, Optional, Sequence, TextIO

from rich.console import Console, ConsoleOptions, Group, RenderableType, RenderResult
from rich.live import Live
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from asnpeers.errors import UIInitError
from asnpeers.log import get_logger
from asnpeers.models import ASNSummary

log = get_logger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# LAYOUT
# ═══════════════════════════════════════════════════════════════════════════════

CHART_TITLE = "Peers per ASN Chart"

# Fixed chart region, columns x rows
CHART_WIDTH = 170
CHART_HEIGHT = 25

BAR_WIDTH = 10
BAR_GAP = 1
BAR_CHAR = "█"

QUIT_KEYS = ('q', 'Q', '\x03')

# ═══════════════════════════════════════════════════════════════════════════════
# STYLES
# ═══════════════════════════════════════════════════════════════════════════════

STYLE_HEADER = Style(color="dodger_blue1", bold=True)
STYLE_BORDER = Style(color="steel_blue")
STYLE_DIM = Style(color="grey70")
STYLE_COUNT = Style(color="white", bold=True)
STYLE_LABEL = Style(color="white")

BAR_STYLES = [
    Style(color="red"),
    Style(color="green"),
    Style(color="yellow"),
    Style(color="dodger_blue1"),
    Style(color="magenta"),
    Style(color="cyan"),
]


# ═══════════════════════════════════════════════════════════════════════════════
# CHART BUILDING
# ═══════════════════════════════════════════════════════════════════════════════

def _bar_heights(counts: Sequence[int], rows: int) -> List[int]:
    """Scale counts to bar heights in rows; any non-zero count gets at least one"""
    peak = max(counts, default=0)
    if peak <= 0 or rows <= 0:
        return [0 for _ in counts]
    return [max(1, round(count * rows / peak)) if count > 0 else 0 for count in counts]


def _cell(text: str, width: int = BAR_WIDTH) -> str:
    return text[:width].center(width)


class BarChart:
    """
    Bar chart panel, sized when it is rendered.

    The panel is `width` columns or the console width, whichever is
    smaller. Only the bars that fit that width are drawn, and every row
    is cropped rather than wrapped so labels stay under their bars.
    """

    def __init__(self, summaries: Sequence[ASNSummary], width: int = CHART_WIDTH,
                 height: int = CHART_HEIGHT):
        self.summaries = list(summaries)
        self.width = width
        self.height = height

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        yield self.panel(min(self.width, options.max_width))

    def panel(self, width: int) -> Panel:
        panel_opts = dict(
            title=Text(CHART_TITLE, style=STYLE_HEADER),
            border_style=STYLE_BORDER,
            width=width,
            height=self.height,
        )

        if not self.summaries:
            return Panel(Text("No peers resolved", style=STYLE_DIM), **panel_opts)

        # Border and padding take 4 columns
        inner_width = width - 4
        max_bars = max(1, (inner_width + BAR_GAP) // (BAR_WIDTH + BAR_GAP))
        shown = self.summaries[:max_bars]
        if len(shown) < len(self.summaries):
            log.debug("Chart shows %d of %d ASNs at width %d", len(shown), len(self.summaries), width)

        # Borders take 2 rows; one row for the count above the tallest bar, one for labels
        bar_rows = max(1, self.height - 4)
        heights = _bar_heights([s.count for s in shown], bar_rows)
        gap = " " * BAR_GAP

        lines = []
        for level in range(bar_rows + 1, 0, -1):
            line = Text(no_wrap=True, overflow="crop")
            for i, (summary, bar_height) in enumerate(zip(shown, heights)):
                if i:
                    line.append(gap)
                if level <= bar_height:
                    line.append(BAR_CHAR * BAR_WIDTH, style=BAR_STYLES[i % len(BAR_STYLES)])
                elif level == bar_height + 1:
                    line.append(_cell(str(summary.count)), style=STYLE_COUNT)
                else:
                    line.append(" " * BAR_WIDTH)
            lines.append(line)

        labels = Text(no_wrap=True, overflow="crop")
        for i, summary in enumerate(shown):
            if i:
                labels.append(gap)
            labels.append(_cell(summary.label), style=STYLE_LABEL)
        lines.append(labels)

        body = Text("\n", no_wrap=True, overflow="crop").join(lines)
        return Panel(body, **panel_opts)


def build_chart(summaries: Sequence[ASNSummary], width: int = CHART_WIDTH,
                height: int = CHART_HEIGHT) -> BarChart:
    """Bar chart of peers per ASN: one bar per ASN, count on top, label below"""
    return BarChart(summaries, width, height)


def build_summary_table(summaries: Sequence[ASNSummary], n_peers: str) -> Table:
    """Text listing shown beneath the chart"""
    table = Table(
        title=f"Number of Peers: {n_peers}",
        show_header=True,
        header_style=STYLE_HEADER,
        border_style=STYLE_BORDER,
        box=None,
    )
    table.add_column("ASN", justify="right", width=10)
    table.add_column("ASName", width=40)
    table.add_column("Count", justify="right", width=6)

    for summary in summaries:
        table.add_row(str(summary.asn), summary.name, str(summary.count))
    return table


# ═══════════════════════════════════════════════════════════════════════════════
# TERMINAL SESSION
# ═══════════════════════════════════════════════════════════════════════════════

class ChartSession:
    """
    Full-screen terminal context for the chart.

    Entering puts stdin in cbreak mode and starts a rich Live screen;
    leaving stops the screen and restores the saved terminal attributes.
    """

    def __init__(self, console: Optional[Console] = None, stream: Optional[TextIO] = None):
        self.console = console or Console()
        self.stream = stream if stream is not None else sys.stdin
        self._fd = None
        self._old_settings = None
        self._live = None

    def __enter__(self) -> "ChartSession":
        try:
            import termios
            import tty
        except ImportError as e:
            raise UIInitError(f"terminal control is not available: {e}") from e

        try:
            fd = self.stream.fileno()
            if not os.isatty(fd):
                raise UIInitError("stdin is not a terminal")
            self._old_settings = termios.tcgetattr(fd)
            self._fd = fd
            tty.setcbreak(fd)
        except UIInitError:
            raise
        except (OSError, ValueError, termios.error) as e:
            self._restore()
            raise UIInitError(f"failed to initialize terminal: {e}") from e

        try:
            live = Live(console=self.console, screen=True, auto_refresh=False)
            live.start()
        except Exception as e:
            self._restore()
            raise UIInitError(f"failed to start full-screen display: {e}") from e
        self._live = live
        return self

    def __exit__(self, *exc):
        try:
            if self._live is not None:
                self._live.stop()
                self._live = None
        finally:
            self._restore()

    def _restore(self):
        if self._old_settings is None:
            return
        import termios
        termios.tcsetattr(self._fd, termios.TCSADRAIN, self._old_settings)
        self._old_settings = None

    def render(self, renderable: RenderableType):
        self._live.update(renderable, refresh=True)

    def wait_for_quit(self):
        """Block until the quit key (or Ctrl-C / end of input) arrives"""
        fd = self.stream.fileno()
        while True:
            try:
                ready, _, _ = select.select([fd], [], [])
                if not ready:
                    continue
                # Unbuffered so select() keeps seeing pending keys
                data = os.read(fd, 1)
            except KeyboardInterrupt:
                return
            if not data or data.decode(errors="ignore") in QUIT_KEYS:
                return


def show_chart(summaries: Sequence[ASNSummary], n_peers: str,
               console: Optional[Console] = None, stream: Optional[TextIO] = None):
    """Render the chart full-screen and block until the user quits"""
    layout = Group(
        build_chart(summaries),
        build_summary_table(summaries, n_peers),
        Text("Press 'q' to quit", style=STYLE_DIM),
    )
    with ChartSession(console, stream) as session:
        session.render(layout)
        session.wait_for_quit()
