"""Unit tests for viewport resolution and the device table."""

import pytest

from webcapture.exceptions import InvalidViewportError
from webcapture.models.capture import ResolvedViewport
from webcapture.utils.devices import DEVICES, DEVICE_NAMES, get_device, normalize_device_name
from webcapture.utils.viewports import expand_viewports, resolve_category, resolve_viewport


class TestDeviceTable:
    """Tests for the static device table."""

    def test_names_are_normalized(self):
        assert normalize_device_name("iPhone X") == "iphone-x"
        assert normalize_device_name("  Galaxy   Note 3 ") == "galaxy-note-3"
        assert all(name == name.lower() and " " not in name for name in DEVICE_NAMES)

    def test_handhelds_have_landscape_variants(self):
        portrait = get_device("iphone-x")
        landscape = get_device("iphone-x-landscape")

        assert portrait is not None and landscape is not None
        assert (landscape.width, landscape.height) == (portrait.height, portrait.width)
        assert landscape.is_landscape is True
        assert portrait.is_landscape is False
        assert landscape.is_mobile and landscape.has_touch

    def test_desktop_devices(self):
        desktops = [device for device in DEVICES if not device.is_mobile]
        names = {device.name for device in desktops}

        assert {"desktop-edge", "desktop-safari", "desktop-firefox"} <= names
        assert all(device.user_agent for device in desktops)

    @pytest.mark.parametrize("name,size", [
        ("iPhone 6", (375, 667)),
        ("iPhone 7 Plus", (414, 736)),
        ("iPad Mini", (768, 1024)),
        ("Nexus 5X", (412, 732)),
        ("Galaxy S III", (360, 640)),
        ("Nokia N9 landscape", (854, 480)),
    ])
    def test_builtin_devices_resolve(self, name, size):
        viewport = resolve_viewport(name)

        assert viewport is not None
        assert (viewport.width, viewport.height) == size
        assert viewport.user_agent

    def test_lookup_accepts_display_names(self):
        assert get_device("iPhone X") == get_device("iphone-x")
        assert get_device("Nokia N9000") is None


class TestResolveViewport:
    """Tests for resolve_viewport dispatch."""

    def test_device_name(self):
        viewport = resolve_viewport("iPhone X")

        assert isinstance(viewport, ResolvedViewport)
        assert viewport.name == "iphone-x"
        assert viewport.is_mobile is True
        assert viewport.user_agent is not None

    def test_size_strings(self):
        assert resolve_viewport("1024x768").size == {"width": 1024, "height": 768}
        assert resolve_viewport("1024").size == {"width": 1024, "height": 1024}
        assert resolve_viewport("1024x768").device_scale_factor == 1

    def test_numbers(self):
        assert resolve_viewport(800).size == {"width": 800, "height": 800}
        assert resolve_viewport(800.0).size == {"width": 800, "height": 800}
        assert resolve_viewport(800.5) is None
        assert resolve_viewport(0) is None

    def test_booleans_are_rejected(self):
        assert resolve_viewport(True) is None
        assert resolve_viewport(False) is None

    def test_mappings(self):
        viewport = resolve_viewport({"width": 600, "height": 400, "isMobile": True})

        assert viewport.size == {"width": 600, "height": 400}
        assert viewport.is_mobile is True

    def test_playwright_descriptor(self):
        descriptor = {
            "viewport": {"width": 375, "height": 812},
            "device_scale_factor": 3,
            "is_mobile": True,
            "has_touch": True,
            "user_agent": "Test UA",
        }
        viewport = resolve_viewport(descriptor)

        assert viewport.size == {"width": 375, "height": 812}
        assert viewport.device_scale_factor == 3
        assert viewport.user_agent == "Test UA"

    def test_mapping_without_numeric_size(self):
        assert resolve_viewport({"width": "600", "height": 400}) is None
        assert resolve_viewport({"height": 400}) is None

    def test_lists_mirror_input(self):
        resolved = resolve_viewport(["iphone-x", "nope", 320])

        assert isinstance(resolved, list)
        assert resolved[0].name == "iphone-x"
        assert resolved[1] is None
        assert resolved[2].size == {"width": 320, "height": 320}

    def test_unknown_values(self):
        assert resolve_viewport("not-a-device") is None
        assert resolve_viewport(None) is None
        assert resolve_viewport(object()) is None


class TestCategories:
    """Tests for viewport categories."""

    def test_builtin_categories(self):
        assert all(not device.is_mobile for device in resolve_category("desktop"))
        assert all(device.is_mobile for device in resolve_category("mobile"))
        assert all(device.has_touch for device in resolve_category("touch"))
        assert all(device.is_landscape for device in resolve_category("landscape"))
        assert resolve_category("desktop")

    def test_pattern_categories(self):
        devices = resolve_category("IPHONE")

        assert devices
        assert all("iphone" in device.name for device in devices)

    def test_no_matches(self):
        assert resolve_category("does-not-exist") == []

    def test_invalid_pattern(self):
        with pytest.raises(InvalidViewportError):
            resolve_category("iphone(")


class TestExpandViewports:
    """Tests for expand_viewports."""

    def test_nothing_requested(self):
        assert expand_viewports() == []

    def test_single_size(self):
        viewports = expand_viewports("800x600")
        assert [viewport.size for viewport in viewports] == [{"width": 800, "height": 600}]

    def test_category_wins_over_viewport(self):
        viewports = expand_viewports("800x600", "desktop")
        assert viewports == resolve_category("desktop")

    def test_nested_lists_are_flattened(self):
        viewports = expand_viewports(["iphone-x", ["ipad", 500]])
        assert [viewport.name for viewport in viewports] == ["iphone-x", "ipad", None]

    def test_invalid_spec_raises(self):
        with pytest.raises(InvalidViewportError) as exc_info:
            expand_viewports("nokia-n9000")

        assert 'Invalid viewport "nokia-n9000"' in str(exc_info.value)

    def test_invalid_list_member_raises(self):
        with pytest.raises(InvalidViewportError):
            expand_viewports(["iphone-x", {"width": 10}])
