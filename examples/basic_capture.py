#!/usr/bin/env python3
"""
Basic capture example for webpage capture.

This example demonstrates capturing URLs and HTML strings as files,
base64 text and raw bytes, and rendering the same page on several devices.
"""

import asyncio
import logging
from pathlib import Path
import sys

# Add the parent directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from webcapture import CaptureEvent, create_capture_engine


OUTPUT_DIR = Path(__file__).parent / "output"


async def file_capture_example():
    """Capture a URL and an HTML string as PNG files."""
    print("=== File Capture Example ===")

    capture = create_capture_engine(output_dir=OUTPUT_DIR)
    capture.on(CaptureEvent.END, lambda p: print(f"[{p.current}/{p.total}] {p.input[:40]} ({p.duration:.0f}ms)"))

    async with capture:
        results = await capture.capture([
            "https://example.com",
            "<h1 style='font-family: sans-serif'>Hello from HTML</h1>",
        ])

        for result in results:
            if result.succeeded:
                print(f"Saved: {result.output}")
            else:
                print(f"Failed: {result.input} - {result.error}")


async def in_memory_example():
    """Capture a page as base64 text and as raw bytes."""
    print("\n=== In-Memory Capture Example ===")

    async with create_capture_engine(output_dir=OUTPUT_DIR) as capture:
        encoded = await capture.base64("<p>Encoded</p>")
        raw = await capture.buffer("<p>Raw</p>", selector="p")

        print(f"Base64 length: {len(encoded.output)}")
        print(f"Element screenshot: {len(raw.output)} bytes")


async def device_example():
    """Render a page once per mobile device and as a PDF."""
    print("\n=== Device Example ===")

    async with create_capture_engine(output_dir=OUTPUT_DIR) as capture:
        results = await capture.capture(
            "https://example.com",
            viewport=["iphone-x", "ipad-landscape"],
            options={'full_page': True},
        )
        for path in results[0].output or []:
            print(f"Device capture: {path}")

        pdf = await capture.file("https://example.com", OUTPUT_DIR / "example.pdf")
        print(f"PDF: {pdf.output}")


async def main():
    """Run all examples."""
    logging.basicConfig(level=logging.INFO)

    try:
        await file_capture_example()
        await in_memory_example()
        await device_example()

    except KeyboardInterrupt:
        print("\nExamples interrupted by user")
    except Exception as e:
        print(f"Example failed: {e}")
        import traceback
        traceback.print_exc()


if __name__ == "__main__":
    print("Webpage Capture Examples")
    print("=" * 40)
    asyncio.run(main())
