#!/usr/bin/env python3
"""
Demonstration script for pollwatch.

Watches a directory (and optionally a single file inside it) by polling,
printing every change report as it arrives and a statistics table at the end.

Usage:
    python examples/folder_watch_demo.py [--watch-dir PATH] [--duration SECONDS]
"""

import asyncio
import logging
import logging.config
import time
from pathlib import Path

import click
from pollwatch import ChangeReport, WatchCoordinator, WatcherConfig
from pollwatch.core import BufferedDiagnosticSink
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

logger = logging.getLogger(__name__)

console = Console()


def create_report_table(report: ChangeReport) -> Table:
    """Create a rich table for a single change report."""
    table = Table(title=f"Changes at {report.timestamp:%H:%M:%S}", show_header=True)
    table.add_column("Change", style="cyan", width=10)
    table.add_column("Path", style="white")

    for path in report.new:
        table.add_row("[green]new[/green]", path)
    for path in report.moved:
        table.add_row("[red]moved[/red]", path)
    for path in report.modified:
        table.add_row("[yellow]modified[/yellow]", path)

    return table


def create_stats_table(stats: dict) -> Table:
    """Create a rich table for coordinator statistics."""
    table = Table(title="Watcher Statistics", show_header=True)
    table.add_column("Kind", style="cyan")
    table.add_column("Path", style="white")
    table.add_column("State", style="dim")
    table.add_column("Interval (s)", style="dim")

    for watcher in stats["watchers"]:
        table.add_row(watcher["kind"], watcher["path"], watcher["state"], f"{watcher['interval_seconds']:.2f}")

    table.caption = f"live file watchers: {stats['file_watchers']}, live folder watchers: {stats['folder_watchers']}"
    return table


async def print_reports(channel, report_counter: list[int]) -> None:
    async for report in channel:
        report_counter[0] += 1
        console.print(create_report_table(report))


async def print_signals(label: str, channel) -> None:
    async for _ in channel:
        console.print(f"[bold red]{label}[/bold red]")


async def demonstrate_watching(
    watch_directory: Path, duration: int, config: WatcherConfig, watch_file: Path | None
) -> None:
    """
    Run the folder watcher (and an optional file watcher) for a fixed duration.

    Args:
        watch_directory: Directory to watch for changes
        duration: How long to run the demo (in seconds)
        config: Watcher defaults
        watch_file: Optional single file to watch as well
    """
    console.print(
        Panel.fit(
            f"Watching: [cyan]{watch_directory}[/cyan] | Duration: [yellow]{duration}s[/yellow]\n"
            f"Strategy: [magenta]{config.detection_strategy}[/magenta] | "
            f"Poll every [yellow]{config.default_interval * config.tick_unit_seconds:.2f}s[/yellow]",
            title="pollwatch demo",
            border_style="blue",
        )
    )

    sink = BufferedDiagnosticSink(capacity=10)
    coordinator = WatchCoordinator(config=config, diagnostics=sink)
    folder_watcher = coordinator.watch_folder(watch_directory)

    report_counter = [0]
    consumers = [
        asyncio.create_task(print_reports(folder_watcher.changes, report_counter)),
        asyncio.create_task(print_signals(f"Folder {watch_directory} moved or inaccessible", folder_watcher.moved)),
    ]

    if watch_file is not None:
        file_watcher = coordinator.watch_file(watch_file)
        consumers.append(asyncio.create_task(print_signals(f"File {watch_file} modified", file_watcher.modified)))
        consumers.append(asyncio.create_task(print_signals(f"File {watch_file} moved", file_watcher.moved)))

    console.print("Create, modify or delete files in the watched directory to see reports.")

    start_time = time.monotonic()
    try:
        while time.monotonic() - start_time < duration:
            await asyncio.sleep(1)
    finally:
        await coordinator.stop_all(timeout=max(5.0, config.tick_unit_seconds * config.default_interval * 2))
        for task in consumers:
            task.cancel()
        await asyncio.gather(*consumers, return_exceptions=True)

    console.print(create_stats_table(coordinator.get_monitoring_stats()))
    console.print(f"[bold green]{report_counter[0]} change reports received[/bold green]")

    if sink.messages:
        console.print("[dim]Last diagnostic messages:[/dim]")
        for message in sink.drain():
            console.print(f"  [dim]{message}[/dim]")


@click.command()
@click.option(
    '--watch-dir',
    '-d',
    type=click.Path(path_type=Path),
    default=Path('./watched'),
    help='Directory to watch (will be created if it doesn\'t exist)',
)
@click.option('--duration', '-t', type=int, default=60, help='Duration to run the demo in seconds')
@click.option('--interval', '-i', type=int, default=1, help='Tick units between polls')
@click.option('--tick', type=float, default=1.0, help='Length of one tick unit in seconds')
@click.option(
    '--strategy', type=click.Choice(['timestamp', 'digest']), default='timestamp', help='Change detection strategy'
)
@click.option('--file', '-f', 'watch_file', type=click.Path(path_type=Path), help='Also watch this single file')
@click.option('--flat', is_flag=True, help='Only watch direct children of the directory')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def main(
    watch_dir: Path,
    duration: int,
    interval: int,
    tick: float,
    strategy: str,
    watch_file: Path | None,
    flat: bool,
    verbose: bool,
):
    """
    Run the pollwatch demonstration.

    Example usage:

        # Watch ./watched for 60 seconds, polling once a second
        python examples/folder_watch_demo.py

        # Poll /path/to/docs every half second using content digests
        python examples/folder_watch_demo.py -d /path/to/docs --tick 0.5 --strategy digest
    """
    watch_dir.mkdir(parents=True, exist_ok=True)

    try:
        config = WatcherConfig(
            default_interval=interval,
            tick_unit_seconds=tick,
            detection_strategy=strategy,
            recursive=not flat,
            log_level='DEBUG' if verbose else 'INFO',
        )
        logging.config.dictConfig(config.get_log_config())
        asyncio.run(demonstrate_watching(watch_dir, duration, config, watch_file))
    except KeyboardInterrupt:
        console.print("\n[yellow]Demo interrupted by user[/yellow]")
    except Exception as e:
        console.print(f"[red]Demo failed:[/red] {e}")
        logger.exception("Full error details:")
        raise SystemExit(1) from e


if __name__ == '__main__':
    main()
