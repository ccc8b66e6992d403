#!/usr/bin/env python3
"""
AGCP Dashboard - Console log follower
Prints the current daemon config and the tail of the daemon log, then
follows the log until interrupted
"""
import sys
import time
from typing import Optional

from rich.console import Console
from rich.text import Text

from AGCP.app_logging import setup_logging
from AGCP.settings import Settings, load_settings
from AGCP.UI.config_editor import ConfigFieldSet, ConfigLoadError, build_config_fields, load_config
from AGCP.UI.log_viewer import LogEntry, LogMonitor
from AGCP.UI.log_viewer.log_stats import current_time_secs, format_uptime


def render_entry(entry: LogEntry) -> Text:
    return Text(entry.raw_text, style=entry.level.color)


def print_config(console: Console, fields: ConfigFieldSet) -> None:
    for section, section_fields in fields.sections():
        console.print(Text(f"[{section}]", style="bold"))
        for field in section_fields:
            console.print(f"  {field.key} = {fields.format_display(field)}", markup=False)


def follow(settings: Settings, console: Console, max_polls: Optional[int] = None) -> LogMonitor:
    """
    Print the initial log tail, then poll for new lines

    Args:
        settings: Dashboard settings
        console: Output console
        max_polls: Stop after this many polls (None = until interrupted)

    Returns:
        The monitor used, for inspection by callers
    """
    monitor = LogMonitor(
        settings.daemon_log_path,
        initial_lines=settings.initial_log_lines,
        capacity=settings.max_log_entries,
    )
    monitor.start()

    for entry in monitor.history:
        console.print(render_entry(entry))

    uptime = format_uptime(monitor.daemon_start_time, current_time_secs())
    console.print(Text(f"-- following {monitor.path} (uptime {uptime}) --", style="dim"))

    polls = 0
    try:
        while max_polls is None or polls < max_polls:
            for entry in monitor.refresh():
                console.print(render_entry(entry))
            polls += 1
            time.sleep(settings.poll_interval)
    finally:
        monitor.close()

    return monitor


def main() -> None:
    settings = load_settings()
    logger = setup_logging(settings.app_log_dir, settings.app_log_level)
    console = Console()

    print("Starting AGCP log follower...")
    print("Press Ctrl+C to quit")
    print("-" * 80)

    try:
        print_config(console, build_config_fields(load_config(settings.config_path)))
    except ConfigLoadError as e:
        logger.error(str(e))
        console.print(Text(str(e), style="red"))

    try:
        follow(settings, console)
    except KeyboardInterrupt:
        print("\nAGCP follower terminated by user")
    except Exception as e:
        logger.exception("Follower crashed")
        print(f"\nError running AGCP follower: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
