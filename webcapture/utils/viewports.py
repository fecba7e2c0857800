"""Viewport resolution.

A viewport spec can be a device name, a ``"WxH"`` or ``"W"`` string, a number
for a square viewport, a mapping with numeric width and height, a Playwright
device descriptor, or a list of any of these. ``resolve_viewport`` is the
single dispatch point every consumer goes through; unknown specs resolve to
``None`` and callers decide whether that means an error.
"""

import logging
import re
from functools import singledispatch
from numbers import Real
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from ..exceptions import InvalidViewportError
from ..models.capture import ResolvedViewport
from .devices import DEVICES, get_device

logger = logging.getLogger(__name__)


VIEWPORT_STRING_PATTERN = re.compile(r"^(\d{1,4})(?:x)?(\d{1,4})?$")

CATEGORY_FILTERS: Dict[str, Callable[[ResolvedViewport], bool]] = {
    "desktop": lambda device: device.is_mobile is False,
    "touch": lambda device: device.has_touch is True,
    "mobile": lambda device: device.is_mobile is True,
    "landscape": lambda device: device.is_landscape is True,
}

Resolved = Union[ResolvedViewport, List[Any], None]


def _build(data: Dict[str, Any]) -> Optional[ResolvedViewport]:
    try:
        return ResolvedViewport.model_validate(data)
    except ValidationError as e:
        logger.debug(f"Rejected viewport {data}: {e.error_count()} validation errors")
        return None


@singledispatch
def resolve_viewport(spec: Any) -> Resolved:
    """Resolve a viewport spec into concrete viewport settings.

    Returns:
        A ResolvedViewport, a list mirroring a list input, or None when the
        spec cannot be resolved
    """
    return None


@resolve_viewport.register(ResolvedViewport)
def _resolve_resolved(spec: ResolvedViewport) -> Resolved:
    return spec


@resolve_viewport.register(bool)
def _resolve_bool(spec: bool) -> Resolved:
    return None


@resolve_viewport.register(Real)
def _resolve_number(spec: Real) -> Resolved:
    if not float(spec).is_integer():
        return None
    return _build({"width": int(spec), "height": int(spec)})


@resolve_viewport.register(str)
def _resolve_string(spec: str) -> Resolved:
    match = VIEWPORT_STRING_PATTERN.match(spec)
    if match:
        width, height = match.groups()
        return _build({"width": int(width), "height": int(height or width)})

    return get_device(spec)


@resolve_viewport.register(dict)
def _resolve_mapping(spec: Dict[str, Any]) -> Resolved:
    if _is_number(spec.get("width")) and _is_number(spec.get("height")):
        return _build(spec)

    # Playwright device descriptors nest the size under "viewport"
    nested = spec.get("viewport")
    if isinstance(nested, dict) and _is_number(nested.get("width")) and _is_number(nested.get("height")):
        data = {key: value for key, value in spec.items() if key != "viewport"}
        data.update(nested)
        return _build(data)

    return None


@resolve_viewport.register(list)
@resolve_viewport.register(tuple)
def _resolve_sequence(spec) -> Resolved:
    return [resolve_viewport(item) for item in spec]


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def resolve_category(category: str) -> List[ResolvedViewport]:
    """Return every known device in a category.

    The hardcoded categories are ``desktop``, ``touch``, ``mobile`` and
    ``landscape``. Any other value is matched case-insensitively as a regular
    expression against device names.

    Raises:
        InvalidViewportError: If the category is not a valid pattern
    """
    device_filter = CATEGORY_FILTERS.get(category)
    if device_filter is not None:
        return [device for device in DEVICES if device_filter(device)]

    try:
        pattern = re.compile(category, re.IGNORECASE)
    except re.error as e:
        raise InvalidViewportError(category, reason=f"bad category pattern ({e})") from e

    return [device for device in DEVICES if pattern.search(device.name)]


def expand_viewports(
    viewport: Any = None,
    category: Optional[str] = None
) -> List[ResolvedViewport]:
    """Resolve the viewports a single source should be rendered with.

    A category takes precedence over an explicit viewport spec. An empty list
    means the session default viewport should be used.

    Raises:
        InvalidViewportError: If any part of the spec cannot be resolved
    """
    if category:
        return resolve_category(category)

    if viewport is None:
        return []

    resolved = resolve_viewport(viewport)
    if resolved is None:
        raise InvalidViewportError(viewport)

    if not isinstance(resolved, list):
        return [resolved]

    return _flatten(viewport, resolved)


def _flatten(specs: Any, resolved: List[Any]) -> List[ResolvedViewport]:
    viewports = []
    for spec, item in zip(specs, resolved):
        if item is None:
            raise InvalidViewportError(spec)
        if isinstance(item, list):
            viewports.extend(_flatten(spec, item))
        else:
            viewports.append(item)
    return viewports
