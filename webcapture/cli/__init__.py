"""CLI module for webpage capture.

This package provides the ``webcapture`` command-line interface for
capturing targets, listing emulated devices and streaming progress.
"""

from .main import ExitCode, app, cli_main
from .progress import RealTimeOutput, create_real_time_output, format_results

__all__ = [
    # Exit codes
    'ExitCode',

    # Typer application
    'app',
    'cli_main',

    # Progress output
    'RealTimeOutput',
    'create_real_time_output',
    'format_results',
]
