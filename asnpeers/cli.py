"""
asnpeers - Command line entry point

    asnpeers                              # RPC_URL from .env / environment
    asnpeers --rpc-url http://node:26657 -w 8
    asnpeers --no-chart                   # print the listing only
"""

import sys
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.markup import escape

from asnpeers.aggregate import aggregate
from asnpeers.asn import Resolver
from asnpeers.chart import show_chart
from asnpeers.config import DEFAULT_ENV_FILE, Config, load_config
from asnpeers.errors import ConfigError, DecodeError, NetworkError, UIInitError
from asnpeers.log import get_logger, setup_logging
from asnpeers.rpc import fetch_net_info

app = typer.Typer(help="Show how a node's peers are spread across autonomous systems.")

log = get_logger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# PIPELINE
# ═══════════════════════════════════════════════════════════════════════════════

def run(config: Config, console: Optional[Console] = None,
        show: Optional[Callable] = show_chart, resolver: Optional[Resolver] = None) -> int:
    """
    Fetch peers, resolve their ASNs, print the tally and show the chart.

    Returns the process exit code. Pass show=None to skip the chart.
    """
    console = console or Console()

    try:
        net_info = fetch_net_info(config.rpc_url, timeout=config.timeout)
    except (NetworkError, DecodeError) as e:
        console.print(f"[red]Error querying RPC endpoint:[/] {escape(str(e))}", highlight=False)
        return 1

    log.debug("Fetched %d peer(s) from %s", len(net_info.peers), config.net_info_url)
    console.print(f"Number of Peers: {net_info.n_peers}", highlight=False)

    own_resolver = resolver is None
    if own_resolver:
        resolver = Resolver(config.asn_api_url, config.timeout)
    try:
        resolved = resolver.resolve_all(net_info.remote_ips, workers=config.workers)
    finally:
        if own_resolver:
            resolver.close()

    summaries = aggregate(resolved)
    for summary in summaries:
        console.print(
            f"ASN: {summary.asn}, ASName: {summary.name}, Count: {summary.count}",
            markup=False, highlight=False,
        )

    if show is None:
        return 0

    try:
        show(summaries, net_info.n_peers, console)
    except UIInitError as e:
        console.print(f"[red]Failed to initialize terminal UI:[/] {escape(str(e))}", highlight=False)
        return 1
    return 0


# ═══════════════════════════════════════════════════════════════════════════════
# CLI
# ═══════════════════════════════════════════════════════════════════════════════

@app.command()
def chart(
        rpc_url: Optional[str] = typer.Option(
            None,
            "--rpc-url",
            "-u",
            help="Node RPC base URL (default: $RPC_URL or http://localhost:26657).",
        ),
        env_file: Path = typer.Option(
            Path(DEFAULT_ENV_FILE),
            "--env-file",
            "-e",
            help="Optional KEY=VALUE file read before the environment.",
        ),
        workers: Optional[int] = typer.Option(
            None,
            "--workers",
            "-w",
            help="Concurrent ASN lookups (default: 1, sequential).",
        ),
        timeout: Optional[float] = typer.Option(
            None,
            "--timeout",
            help="Per-request HTTP timeout in seconds.",
        ),
        no_chart: bool = typer.Option(
            False,
            "--no-chart",
            help="Print the per-ASN listing without the full-screen chart.",
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-v",
            help="Debug logging on stderr.",
        ),
):
    """
    Query <rpc-url>/net_info, map each peer IP to its ASN and chart peers per ASN.

    Press 'q' (or Ctrl-C) to leave the chart.
    """
    setup_logging(verbose)
    console = Console()

    try:
        config = load_config(env_file=env_file, rpc_url=rpc_url, workers=workers, timeout=timeout)
    except ConfigError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}", highlight=False)
        raise typer.Exit(code=1)

    code = run(config, console=console, show=None if no_chart else show_chart)
    raise typer.Exit(code=code)


def main() -> None:
    """Entry point for console_scripts."""
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Interrupted by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
