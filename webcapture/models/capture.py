"""Pydantic models for capture options, viewports, results and progress events.

This module defines the data models shared by the capture engine, the
viewport resolver and the command line interface.
"""

from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator
from pydantic.alias_generators import to_camel

from ..exceptions import UnsupportedOutputTypeError


class CaptureType(str, Enum):
    """Supported capture output types."""
    PNG = "png"
    JPEG = "jpeg"
    PDF = "pdf"
    HTML = "html"
    BASE64 = "base64"
    BUFFER = "buffer"

    @classmethod
    def parse(cls, value: Union[str, "CaptureType"]) -> "CaptureType":
        """Parse a user supplied output type, case-insensitively.

        Raises:
            UnsupportedOutputTypeError: If the value is not a supported type
        """
        if isinstance(value, cls):
            return value

        normalized = str(value).strip().lower()
        normalized = TYPE_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedOutputTypeError(
                str(value).lower(),
                supported=[t.value for t in SUPPORTED_TYPE_ORDER]
            ) from None

    @property
    def is_in_memory(self) -> bool:
        """Whether the output is returned instead of written to disk."""
        return self in IN_MEMORY_TYPES


SUPPORTED_TYPE_ORDER: Tuple[CaptureType, ...] = (
    CaptureType.PDF,
    CaptureType.PNG,
    CaptureType.JPEG,
    CaptureType.HTML,
    CaptureType.BASE64,
    CaptureType.BUFFER,
)

IN_MEMORY_TYPES: FrozenSet[CaptureType] = frozenset({CaptureType.BASE64, CaptureType.BUFFER})

# Outputs produced by a page or element screenshot
SCREENSHOT_TYPES: FrozenSet[CaptureType] = frozenset({
    CaptureType.PNG, CaptureType.JPEG, CaptureType.BASE64, CaptureType.BUFFER
})

TYPE_ALIASES: Dict[str, str] = {"jpg": "jpeg"}


class CaptureEvent(str, Enum):
    """Progress notifications emitted during a capture batch."""
    START = "capture:start"
    END = "capture:end"
    ERROR = "capture:error"


class ResolvedViewport(BaseModel):
    """Concrete viewport and device emulation settings."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    width: PositiveInt = Field(description="Viewport width in CSS pixels")
    height: PositiveInt = Field(description="Viewport height in CSS pixels")
    device_scale_factor: float = Field(default=1, gt=0, description="Device pixel ratio")
    is_mobile: bool = Field(default=False, description="Emulate a mobile device")
    has_touch: bool = Field(default=False, description="Enable touch events")
    is_landscape: bool = Field(default=False, description="Landscape orientation")
    user_agent: Optional[str] = Field(default=None, description="User-Agent override")
    name: Optional[str] = Field(default=None, description="Device name used in output names")

    @property
    def is_device(self) -> bool:
        """Named device profiles carry a name used for emulation and labeling."""
        return self.name is not None

    @property
    def size(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}

    @property
    def emulation_profile(self) -> Tuple[Any, ...]:
        """Settings that can only be changed by opening a new browser context."""
        return (self.device_scale_factor, self.is_mobile, self.has_touch, self.user_agent)

    def to_context_options(self) -> Dict[str, Any]:
        """Convert to Playwright browser context options."""
        options: Dict[str, Any] = {
            "viewport": self.size,
            "device_scale_factor": self.device_scale_factor,
            "is_mobile": self.is_mobile,
            "has_touch": self.has_touch,
        }
        if self.user_agent:
            options["user_agent"] = self.user_agent
        return options


class CaptureOptions(BaseModel):
    """Per-call capture configuration."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    type: CaptureType = Field(default=CaptureType.PNG, description="Output type")
    viewport: Optional[Any] = Field(
        default=None,
        description="Viewport spec: device name, 'WxH' string, number, mapping or list of those"
    )
    viewport_category: Optional[str] = Field(
        default=None,
        description="Capture every device of a category (desktop, touch, mobile, landscape or a name pattern)"
    )
    selector: Optional[str] = Field(default=None, description="CSS selector of the element to capture")
    name: Optional[str] = Field(default=None, description="Explicit output file name")
    wait_until: Optional[str] = Field(default=None, description="Navigation load event to wait for")
    wait_for: Optional[Union[float, str]] = Field(
        default=None,
        description="Milliseconds to sleep or a selector to wait for after loading"
    )
    scripts: List[str] = Field(default_factory=list, description="Script URLs, paths or inline code")
    styles: List[str] = Field(default_factory=list, description="Style URLs, paths or inline CSS")
    options: Dict[str, Any] = Field(
        default_factory=dict,
        description="Engine specific output options, e.g. quality or format"
    )

    @field_validator('type', mode='before')
    @classmethod
    def validate_type(cls, v):
        return CaptureType.parse(v)

    @field_validator('scripts', 'styles', mode='before')
    @classmethod
    def coerce_resource_list(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


class CaptureResult(BaseModel):
    """Outcome of capturing one source."""

    model_config = ConfigDict(frozen=True)

    input: str = Field(description="The prepared source that was captured")
    output: Any = Field(
        default=None,
        description="Output path, base64 text or bytes; a list when several viewports applied"
    )
    duration: float = Field(default=0.0, description="Capture duration in milliseconds")
    error: Optional[str] = Field(default=None, description="Error description if the capture failed")

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def export_summary(self) -> Dict[str, Any]:
        """Export a JSON friendly summary of the result."""
        output = self.output
        if isinstance(output, bytes):
            output = f"<{len(output)} bytes>"
        elif isinstance(output, list):
            output = [f"<{len(o)} bytes>" if isinstance(o, bytes) else o for o in output]
        return {
            "input": self.input,
            "output": output,
            "duration_ms": round(self.duration, 1),
            "error": self.error,
        }


class CaptureProgress(BaseModel):
    """Payload delivered to capture event listeners."""

    input: str
    output: Any = None
    total: int
    current: int
    remaining: int
    duration: Optional[float] = None
    error: Optional[str] = None
