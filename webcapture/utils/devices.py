"""Static table of named devices available for emulation.

Device names are normalized to lowercase with whitespace collapsed to hyphens,
e.g. ``"iPhone X"`` becomes ``"iphone-x"``. Every handheld device also has a
``-landscape`` variant with swapped dimensions.
"""

import re
from typing import Dict, List, Optional

from ..models.capture import ResolvedViewport


CHROME_MOBILE = "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/75.0.3765.0 Mobile Safari/537.36"
CHROME_TABLET = "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/75.0.3765.0 Safari/537.36"

IOS_10_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 10_3_1 like Mac OS X) AppleWebKit/603.1.30 "
    "(KHTML, like Gecko) Version/10.0 Mobile/14E304 Safari/602.1"
)
IOS_11_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 11_0 like Mac OS X) AppleWebKit/604.1.38 "
    "(KHTML, like Gecko) Version/11.0 Mobile/15A372 Safari/604.1"
)
IPAD_UA = (
    "Mozilla/5.0 (iPad; CPU OS 11_0 like Mac OS X) AppleWebKit/604.1.34 "
    "(KHTML, like Gecko) Version/11.0 Mobile/15A5341f Safari/604.1"
)

# Puppeteer's built-in device descriptors: name, width, height, scale factor, user agent
_HANDHELD_DEVICES = [
    ("Blackberry PlayBook", 600, 1024, 1,
     "Mozilla/5.0 (PlayBook; U; RIM Tablet OS 2.1.0; en-US) AppleWebKit/536.2+ "
     "(KHTML like Gecko) Version/7.2.1.0 Safari/536.2+"),
    ("BlackBerry Z30", 360, 640, 2,
     "Mozilla/5.0 (BB10; Touch) AppleWebKit/537.10+ (KHTML, like Gecko) "
     "Version/10.0.9.2372 Mobile Safari/537.10+"),
    ("Galaxy Note 3", 360, 640, 3,
     "Mozilla/5.0 (Linux; U; Android 4.3; en-us; SM-N900T Build/JSS15J) AppleWebKit/534.30 "
     "(KHTML, like Gecko) Version/4.0 Mobile Safari/534.30"),
    ("Galaxy Note II", 360, 640, 2,
     "Mozilla/5.0 (Linux; U; Android 4.1; en-us; GT-N7100 Build/JRO03C) AppleWebKit/534.30 "
     "(KHTML, like Gecko) Version/4.0 Mobile Safari/534.30"),
    ("Galaxy S III", 360, 640, 2,
     "Mozilla/5.0 (Linux; U; Android 4.0; en-us; GT-I9300 Build/IMM76D) AppleWebKit/534.30 "
     "(KHTML, like Gecko) Version/4.0 Mobile Safari/534.30"),
    ("Galaxy S5", 360, 640, 3,
     f"Mozilla/5.0 (Linux; Android 5.0; SM-G900P Build/LRX21T) {CHROME_MOBILE}"),
    ("iPad", 768, 1024, 2, IPAD_UA),
    ("iPad Mini", 768, 1024, 2, IPAD_UA),
    ("iPad Pro", 1024, 1366, 2, IPAD_UA),
    ("iPhone 4", 320, 480, 2,
     "Mozilla/5.0 (iPhone; CPU iPhone OS 7_1_2 like Mac OS X) AppleWebKit/537.51.2 "
     "(KHTML, like Gecko) Version/7.0 Mobile/11D257 Safari/9537.53"),
    ("iPhone 5", 320, 568, 2, IOS_10_UA),
    ("iPhone 6", 375, 667, 2, IOS_11_UA),
    ("iPhone 6 Plus", 414, 736, 3, IOS_11_UA),
    ("iPhone 7", 375, 667, 2, IOS_11_UA),
    ("iPhone 7 Plus", 414, 736, 3, IOS_11_UA),
    ("iPhone 8", 375, 667, 2, IOS_11_UA),
    ("iPhone 8 Plus", 414, 736, 3, IOS_11_UA),
    ("iPhone SE", 320, 568, 2, IOS_10_UA),
    ("iPhone X", 375, 812, 3, IOS_11_UA),
    ("iPhone XR", 414, 896, 3,
     "Mozilla/5.0 (iPhone; CPU iPhone OS 12_0 like Mac OS X) AppleWebKit/605.1.15 "
     "(KHTML, like Gecko) Version/12.0 Mobile/15E148 Safari/604.1"),
    ("JioPhone 2", 240, 320, 1,
     "Mozilla/5.0 (Mobile; LYF/F300B/LYF-F300B-001-01-15-130718-i;Android; rv:48.0) "
     "Gecko/48.0 Firefox/48.0 KAIOS/2.5"),
    ("Kindle Fire HDX", 800, 1280, 2,
     "Mozilla/5.0 (Linux; U; en-us; KFAPWI Build/JDQ39) AppleWebKit/535.19 "
     "(KHTML, like Gecko) Silk/3.13 Safari/535.19 Silk-Accelerated=true"),
    ("LG Optimus L70", 384, 640, 1.25,
     "Mozilla/5.0 (Linux; U; Android 4.4.2; en-us; LGMS323 Build/KOT49I.MS32310c) "
     "AppleWebKit/537.36 (KHTML, like Gecko) Version/4.0 Chrome/75.0.3765.0 Mobile Safari/537.36"),
    ("Microsoft Lumia 550", 640, 360, 2,
     "Mozilla/5.0 (Windows Phone 10.0; Android 4.2.1; Microsoft; Lumia 550) AppleWebKit/537.36 "
     "(KHTML, like Gecko) Chrome/42.0.2311.135 Mobile Safari/537.36 Edge/14.14263"),
    ("Microsoft Lumia 950", 360, 640, 4,
     "Mozilla/5.0 (Windows Phone 10.0; Android 4.2.1; Microsoft; Lumia 950) AppleWebKit/537.36 "
     "(KHTML, like Gecko) Chrome/42.0.2311.135 Mobile Safari/537.36 Edge/14.14263"),
    ("Nexus 10", 800, 1280, 2,
     f"Mozilla/5.0 (Linux; Android 6.0.1; Nexus 10 Build/MOB31T) {CHROME_TABLET}"),
    ("Nexus 4", 384, 640, 2,
     f"Mozilla/5.0 (Linux; Android 4.4.2; Nexus 4 Build/KOT49H) {CHROME_MOBILE}"),
    ("Nexus 5", 360, 640, 3,
     f"Mozilla/5.0 (Linux; Android 6.0; Nexus 5 Build/MRA58N) {CHROME_MOBILE}"),
    ("Nexus 5X", 412, 732, 2.625,
     f"Mozilla/5.0 (Linux; Android 8.0.0; Nexus 5X Build/OPR4.170623.006) {CHROME_MOBILE}"),
    ("Nexus 6", 412, 732, 3.5,
     f"Mozilla/5.0 (Linux; Android 7.1.1; Nexus 6 Build/N6F26U) {CHROME_MOBILE}"),
    ("Nexus 6P", 412, 732, 3.5,
     f"Mozilla/5.0 (Linux; Android 8.0.0; Nexus 6P Build/OPP3.170518.006) {CHROME_MOBILE}"),
    ("Nexus 7", 600, 960, 2,
     f"Mozilla/5.0 (Linux; Android 6.0.1; Nexus 7 Build/MOB30X) {CHROME_TABLET}"),
    ("Nokia Lumia 520", 320, 533, 1.5,
     "Mozilla/5.0 (compatible; MSIE 10.0; Windows Phone 8.0; Trident/6.0; IEMobile/10.0; "
     "ARM; Touch; NOKIA; Lumia 520)"),
    ("Nokia N9", 480, 854, 1,
     "Mozilla/5.0 (MeeGo; NokiaN9) AppleWebKit/534.13 (KHTML, like Gecko) "
     "NokiaBrowser/8.5.0 Mobile Safari/534.13"),
    ("Pixel 2", 411, 731, 2.625,
     f"Mozilla/5.0 (Linux; Android 8.0; Pixel 2 Build/OPD3.170816.012) {CHROME_MOBILE}"),
    ("Pixel 2 XL", 411, 823, 3.5,
     f"Mozilla/5.0 (Linux; Android 8.0.0; Pixel 2 XL Build/OPD1.170816.004) {CHROME_MOBILE}"),
    ("Moto G4", 360, 640, 3,
     f"Mozilla/5.0 (Linux; Android 7.0; Moto G (4)) {CHROME_MOBILE}"),
]

_DESKTOP_DEVICES = [
    ("desktop-edge",
     "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
     "Chrome/42.0.2311.135 Safari/537.36 Edge/12.246"),
    ("desktop-safari",
     "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_11_2) AppleWebKit/601.3.9 "
     "(KHTML, like Gecko) Version/9.0.2 Safari/601.3.9"),
    ("desktop-firefox",
     "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:15.0) Gecko/20100101 Firefox/15.0.1"),
]


def normalize_device_name(name: str) -> str:
    """Collapse whitespace to hyphens and lowercase a device name."""
    return re.sub(r"\s+", "-", name.strip()).lower()


def _build_devices() -> List[ResolvedViewport]:
    devices = []

    for name, width, height, scale, user_agent in _HANDHELD_DEVICES:
        portrait = ResolvedViewport(
            name=normalize_device_name(name),
            width=width,
            height=height,
            device_scale_factor=scale,
            is_mobile=True,
            has_touch=True,
            user_agent=user_agent,
        )
        landscape = portrait.model_copy(update={
            "name": f"{portrait.name}-landscape",
            "width": height,
            "height": width,
            "is_landscape": True,
        })
        devices.extend([portrait, landscape])

    for name, user_agent in _DESKTOP_DEVICES:
        devices.append(ResolvedViewport(
            name=name,
            width=1920,
            height=1080,
            user_agent=user_agent,
        ))

    return devices


DEVICES: List[ResolvedViewport] = _build_devices()

DEVICES_BY_NAME: Dict[str, ResolvedViewport] = {device.name: device for device in DEVICES}

DEVICE_NAMES: List[str] = [device.name for device in DEVICES]


def get_device(name: str) -> Optional[ResolvedViewport]:
    """Look up a device by name, normalizing case and whitespace."""
    return DEVICES_BY_NAME.get(normalize_device_name(name))
