"""Output file naming for captures written to disk."""

import time
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlsplit

from ..models.capture import CaptureType


def build_output_path(
    input: str,
    type: Union[str, CaptureType],
    output_dir: Union[str, Path],
    counter: int = 0,
    name: Optional[str] = None,
    viewport_name: Optional[str] = None,
    timestamp: Optional[int] = None,
) -> Path:
    """Build the absolute output path for a capture.

    An explicit name is used verbatim when it has an extension, otherwise the
    type is appended; it is resolved against the working directory. Without a
    name the file is placed in ``output_dir`` and named from the source
    hostname (or the zero-padded capture counter when there is none), the
    device name and a millisecond timestamp, joined with ``-``.

    Args:
        input: The capture source
        type: Output type, also used as the file extension
        output_dir: Directory for generated names
        counter: Session capture counter
        name: Explicit output name
        viewport_name: Name of the emulated device, if any
        timestamp: Milliseconds since epoch (defaults to now)
    """
    extension = type.value if isinstance(type, CaptureType) else str(type)

    if name:
        if not Path(name).suffix:
            name = f"{name}.{extension}"
        return Path(name).expanduser().resolve()

    try:
        hostname = urlsplit(input or "").hostname
    except ValueError:
        hostname = None

    parts = [hostname or str(counter).zfill(4)]
    parts.append(viewport_name)
    parts.append(str(timestamp if timestamp is not None else int(time.time() * 1000)))

    filename = "-".join(part for part in parts if part)
    return (Path(output_dir) / f"{filename}.{extension}").resolve()
