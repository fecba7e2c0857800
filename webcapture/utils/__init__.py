"""Viewport, source and output helpers for the capture engine."""

from .devices import DEVICES, DEVICE_NAMES, get_device, normalize_device_name
from .output_path import build_output_path
from .sources import prepare_resource_options, prepare_sources
from .validators import (
    is_valid_base64,
    is_valid_html,
    is_valid_path,
    is_valid_url,
)
from .viewports import expand_viewports, resolve_category, resolve_viewport

__all__ = [
    'DEVICES',
    'DEVICE_NAMES',
    'get_device',
    'normalize_device_name',
    'build_output_path',
    'prepare_sources',
    'prepare_resource_options',
    'is_valid_base64',
    'is_valid_html',
    'is_valid_path',
    'is_valid_url',
    'expand_viewports',
    'resolve_category',
    'resolve_viewport',
]
