"""Real-time progress output for CLI capture runs.

Capture events from the engine are streamed to stderr as formatted text
lines or JSON lines so stdout stays reserved for results.
"""

import json
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional, TextIO

from ..capture.engine import WebpageCapture
from ..models.capture import CaptureEvent, CaptureProgress, CaptureResult


class RealTimeOutput:
    """Real-time output formatter for capture events."""

    def __init__(self, format_type: str = "text", quiet: bool = False, stream: Optional[TextIO] = None):
        self.format_type = format_type.lower()
        self.quiet = quiet
        self._stream = stream
        self._buffer: List[Dict[str, Any]] = []

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stderr

    def attach(self, engine: WebpageCapture) -> "RealTimeOutput":
        """Subscribe to the engine's capture events."""
        for event in CaptureEvent:
            engine.on(event, self._listener_for(event))
        return self

    def _listener_for(self, event: CaptureEvent):
        def listener(progress: CaptureProgress):
            data = progress.model_dump(mode="json", exclude={'output'})
            data['output'] = _describe_output(progress.output)
            self.emit_event(event.value, data)
        return listener

    def emit_event(self, event_type: str, data: Dict[str, Any], timestamp: Optional[datetime] = None):
        """Emit a real-time event."""
        if self.quiet:
            return

        event = {
            "type": event_type,
            "timestamp": (timestamp or datetime.now()).isoformat(),
            "data": data
        }

        self._buffer.append(event)

        if self.format_type == "json":
            self._emit_json_event(event)
        else:
            self._emit_text_event(event)

    def _emit_json_event(self, event: Dict[str, Any]):
        """Emit event as JSON line."""
        print(json.dumps(event), file=self.stream)

    def _emit_text_event(self, event: Dict[str, Any]):
        """Emit event as formatted text."""
        event_type = event["type"]
        data = event["data"]
        timestamp = datetime.fromisoformat(event["timestamp"]).strftime("%H:%M:%S")
        position = f"{data.get('current', '?')}/{data.get('total', '?')}"

        if event_type == CaptureEvent.START.value:
            print(f"📸 [{timestamp}] ({position}) Capturing: {_shorten(data.get('input'))}", file=self.stream)

        elif event_type == CaptureEvent.END.value:
            status_emoji = "❌" if data.get("error") else "✅"
            duration = round(data.get("duration") or 0)
            print(f"{status_emoji} [{timestamp}] ({position}) {_shorten(data.get('input'))} ({duration}ms)", file=self.stream)

            if data.get("output") and not data.get("error"):
                print(f"   💾 {data['output']}", file=self.stream)

        elif event_type == CaptureEvent.ERROR.value:
            print(f"   ⚠️  {data.get('error', 'unknown error')}", file=self.stream)

    def get_events(self) -> List[Dict[str, Any]]:
        """Get all buffered events."""
        return self._buffer.copy()

    def clear_buffer(self):
        """Clear the event buffer."""
        self._buffer.clear()


def _shorten(value: Optional[str], limit: int = 80) -> str:
    """Collapse long inputs such as literal HTML for display."""
    if not value:
        return "unknown"
    value = " ".join(value.split())
    return value if len(value) <= limit else f"{value[:limit - 3]}..."


def _describe_output(output: Any) -> Any:
    if isinstance(output, bytes):
        return f"<{len(output)} bytes>"
    if isinstance(output, str) and len(output) > 200:
        return f"<{len(output)} chars>"
    if isinstance(output, list):
        return [_describe_output(item) for item in output]
    return output


def format_results(results: List[CaptureResult], format_type: str = "text") -> str:
    """Format capture results for stdout."""
    if format_type == "json":
        return json.dumps([result.export_summary() for result in results], indent=2)

    succeeded = sum(1 for result in results if result.succeeded)
    lines = []
    for result in results:
        summary = result.export_summary()
        if result.succeeded:
            outputs = summary["output"] if isinstance(summary["output"], list) else [summary["output"]]
            for output in outputs:
                lines.append(f"✅ {_shorten(result.input)} -> {_describe_output(output)}")
        else:
            lines.append(f"❌ {_shorten(result.input)}: {result.error}")

    lines.append(f"📊 {succeeded}/{len(results)} captures succeeded")
    return "\n".join(lines)


def create_real_time_output(format_type: str = "text", quiet: bool = False) -> RealTimeOutput:
    """Create a real-time output formatter."""
    return RealTimeOutput(format_type=format_type, quiet=quiet)
