import logging
import os
import sys
from typing import Any

import structlog
from rich.console import Console

# Shared console for command output and development logs
console = Console()
# Logs go to stderr so `sbomdiff diff --json` stays machine readable
log_console = Console(stderr=True)

# Third-party loggers that are chatty at INFO
NOISY_LOGGERS = ('clickhouse_connect', 'urllib3', 'uvicorn.access')


class RichConsoleRenderer:
    """
    Render structlog events as a single styled line on a rich console.

    Levels map to colors, remaining keys are printed as key=value pairs.
    An optional '_style' key applies a style to the whole line.
    """

    level_styles = {
        'debug': 'dim',
        'info': 'green',
        'warning': 'yellow',
        'error': 'bold red',
        'critical': 'bold magenta',
    }

    def __init__(self, out: Console | None = None):
        self._console = out or log_console

    def __call__(self, logger, name, event_dict):
        custom_style = event_dict.pop('_style', None)

        event = event_dict.pop('event', '')
        log_level = event_dict.pop('level', 'info')
        logger_name = event_dict.pop('logger', None)
        timestamp = event_dict.pop('timestamp', '')
        exception = event_dict.pop('exception', None)
        stack_info = event_dict.pop('stack_info', None)
        event_dict.pop('exc_info', None)

        level_style = self.level_styles.get(log_level, 'white')
        parts = []
        if timestamp:
            parts.append(f"[dim]{timestamp}[/dim]")
        if logger_name:
            parts.append(f"[bold]{logger_name}[/bold]")
        parts.append(f"[{level_style}]{log_level:<8}[/{level_style}]")
        parts.append(str(event))
        parts.extend(
            f"[cyan]{key}[/cyan]=[green]{value!r}[/green]"
            for key, value in event_dict.items()
        )

        line = ' '.join(parts)
        if exception:
            line += f"\n[red]{exception}[/red]"
        if stack_info:
            line += f"\n[dim]{stack_info}[/dim]"

        self._console.print(line, style=custom_style, highlight=False)

        # Already printed; stop the stdlib logger from emitting a blank record
        raise structlog.DropEvent


def drop_style_processor(logger, method_name, event_dict):
    """Strip the '_style' hint so it never reaches JSON output."""
    event_dict.pop('_style', None)
    return event_dict


def setup_logging(level: str = 'INFO') -> None:
    """
    Configure structured logging for the CLI and the API server.

    ENV=production switches to one JSON object per line.
    """
    logging.basicConfig(format='%(message)s', stream=sys.stderr, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.getLevelName(level), logging.WARNING))

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if os.getenv('ENV') == 'production':
        processors = shared_processors + [
            drop_style_processor,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    else:
        processors = shared_processors + [RichConsoleRenderer()]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
