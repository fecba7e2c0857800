#!/usr/bin/env python3
"""Main CLI entry point for webpage capture using Typer.

The ``capture`` command renders one or more targets (URLs, HTML strings,
``.html`` files or ``.txt`` lists of targets) into the output directory.
"""

import asyncio
import logging
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from .. import __version__
from ..capture.config import load_settings, print_settings
from ..capture.engine import WebpageCapture
from ..exceptions import ConfigurationError, InvalidViewportError, UnsupportedOutputTypeError
from ..models.capture import SCREENSHOT_TYPES, CaptureOptions, CaptureResult, CaptureType
from ..utils.devices import DEVICES
from ..utils.viewports import expand_viewports, resolve_category
from .progress import create_real_time_output, format_results


class ExitCode(IntEnum):
    """CLI exit codes for scripting."""
    SUCCESS = 0           # Batch completed, individual sources may have failed
    CONFIG_ERROR = 3      # Invalid options or settings, nothing was captured
    RUNTIME_ERROR = 4     # Browser or unexpected error during execution


app = typer.Typer(
    name="webcapture",
    help="Capture web pages and HTML as images, PDFs or HTML documents",
    add_completion=False,
)


@app.callback()
def main():
    """
    Webpage capture - render URLs and HTML with a headless browser.

    Outputs can be PNG or JPEG screenshots, PDF documents, rendered HTML
    or base64 encoded screenshots, for desktop and emulated devices.
    """
    pass


@app.command(name="version")
def show_version():
    """Show version information."""
    typer.echo(f"webcapture v{__version__}")


def _split_viewports(values: Optional[List[str]]) -> List[str]:
    """Split comma separated --viewport values."""
    viewports = []
    for value in values or []:
        viewports.extend(part.strip() for part in value.split(",") if part.strip())
    return viewports


def _configure_logging(verbose: bool):
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def capture(
    targets: Annotated[
        List[str],
        typer.Argument(help="URLs, HTML strings, .html files or .txt files listing targets")
    ],

    # Browser options
    debug: Annotated[
        bool,
        typer.Option("--debug", "-d", help="Run the browser with GUI, slowed down")
    ] = False,

    timeout: Annotated[
        Optional[int],
        typer.Option("--timeout", "-t", help="Navigation timeout in milliseconds")
    ] = None,

    wait_until: Annotated[
        Optional[str],
        typer.Option("--wait-until", help="Load event to wait for (load, domcontentloaded, networkidle)")
    ] = None,

    # Capture options
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output type: png, jpeg, pdf, html or base64")
    ] = CaptureType.PNG.value,

    selector: Annotated[
        Optional[str],
        typer.Option("--selector", "-s", help="CSS selector of the element to capture")
    ] = None,

    crop: Annotated[
        bool,
        typer.Option("--crop", "-c", help="Limit screenshots to the viewport instead of the full page")
    ] = False,

    viewport: Annotated[
        Optional[List[str]],
        typer.Option("--viewport", "-v", help="Device name or WIDTHxHEIGHT, repeat or comma separate for several")
    ] = None,

    viewport_category: Annotated[
        Optional[str],
        typer.Option("--viewport-category", help="Capture every device of a category (desktop, touch, mobile, landscape)")
    ] = None,

    # Output options
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Directory for output files")
    ] = None,

    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", help="Path to a YAML or JSON settings file")
    ] = None,

    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results and progress as JSON")
    ] = False,

    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Quiet mode (no progress output)")
    ] = False,

    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging")
    ] = False,

    print_config: Annotated[
        bool,
        typer.Option("--print-config", help="Print effective settings and exit")
    ] = False,
):
    """
    Capture one or more targets.

    Examples:

        # Full page PNG of a single URL
        webcapture capture https://example.com

        # PDF of a local file into ./out
        webcapture capture page.html -f pdf -o out

        # Every mobile device, cropped to the viewport
        webcapture capture https://example.com --viewport-category mobile --crop

        # Two devices for every URL listed in a file
        webcapture capture urls.txt -v "iPhone X,iPad"
    """
    _configure_logging(verbose)

    # Validate capture options before anything is launched
    try:
        capture_type = CaptureType.parse(output_format)
    except UnsupportedOutputTypeError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    if capture_type == CaptureType.BUFFER:
        typer.echo("❌ The buffer output type is only available from the Python API", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    viewports = _split_viewports(viewport)
    try:
        if viewports:
            expand_viewports(viewports)
        if viewport_category and not resolve_category(viewport_category):
            typer.echo(f"❌ No devices match viewport category '{viewport_category}'", err=True)
            raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)
    except InvalidViewportError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    cli_overrides: Dict[str, Any] = {
        'debug': True if debug else None,
        'output_dir': output_dir,
        'timeout_ms': timeout,
        'wait_until': wait_until,
    }

    try:
        settings = load_settings(
            config_file=config_file,
            cli_overrides=cli_overrides,
            search_paths=[Path.cwd()]
        )
    except (ConfigurationError, ValidationError) as e:
        typer.echo(f"❌ Configuration error: {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    if print_config:
        typer.echo("# Effective Settings")
        typer.echo("# Loaded from: " + " -> ".join(settings.loaded_from))
        typer.echo(print_settings(settings, "yaml"))
        raise typer.Exit()

    options = CaptureOptions(
        type=capture_type,
        selector=selector,
        viewport=viewports or None,
        viewport_category=viewport_category,
        options={'full_page': not crop} if capture_type in SCREENSHOT_TYPES else {},
    )

    try:
        engine = WebpageCapture(settings.get_engine_config())
    except ConfigurationError as e:
        typer.echo(f"❌ Configuration error: {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    output = create_real_time_output(format_type="json" if json_output else "text", quiet=quiet)
    output.attach(engine)

    try:
        results = asyncio.run(_run_capture(engine, targets, options))
    except FileNotFoundError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)
    except Exception as e:
        typer.echo(f"❌ Capture failed: {e}", err=True)
        raise typer.Exit(code=ExitCode.RUNTIME_ERROR.value)

    typer.echo(format_results(results, "json" if json_output else "text"))


async def _run_capture(
    engine: WebpageCapture,
    targets: List[str],
    options: CaptureOptions
) -> List[CaptureResult]:
    """Run a capture batch and always release the browser."""
    try:
        return await engine.capture(targets, options)
    finally:
        await engine.close()


@app.command()
def devices(
    category: Annotated[
        Optional[str],
        typer.Option("--category", help="Only list devices of a category or matching a pattern")
    ] = None,
):
    """List the device names accepted by --viewport."""
    if category:
        try:
            matched = resolve_category(category)
        except InvalidViewportError as e:
            typer.echo(f"❌ {e}", err=True)
            raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)
    else:
        matched = DEVICES

    for device in matched:
        flags = []
        if device.is_mobile:
            flags.append("mobile")
        if device.has_touch:
            flags.append("touch")
        if device.is_landscape:
            flags.append("landscape")
        typer.echo(f"{device.name:<28} {device.width}x{device.height} @{device.device_scale_factor:g}x  {' '.join(flags)}".rstrip())


def cli_main():
    """Entry point for console script."""
    app()


if __name__ == "__main__":
    cli_main()
