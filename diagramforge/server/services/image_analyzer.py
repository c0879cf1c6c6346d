"""
Mockup analyzer — turns an uploaded mockup image into a component skeleton.

This is a layout heuristic, not computer vision.  Pillow is used only to read
the image dimensions; the layout itself is chosen from the size of the
base64 payload and the aspect ratio:

    payload > 100 000 chars   complex     4 sections, image placeholder
    payload >  50 000 chars   grid        3 sections
    aspect ratio > 2          horizontal  3 sections
    otherwise                 vertical    3 sections

Sections cycle through header → content → sidebar → footer.
"""
from __future__ import annotations

import base64
import binascii
import io
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_COMPONENT_NAME = "GeneratedComponent"
DEFAULT_SIZE = (800, 600)

COMPLEX_THRESHOLD = 100_000
GRID_THRESHOLD = 50_000
WIDE_ASPECT = 2.0

_LAYOUT_CLASSES = {
    "horizontal": "flex flex-row items-center justify-between p-6 bg-white rounded-lg shadow-md",
    "grid": "grid grid-cols-1 md:grid-cols-2 lg:grid-cols-3 gap-6 p-6 bg-white rounded-lg shadow-md",
    "complex": "flex flex-col lg:flex-row gap-6 p-6 bg-white rounded-lg shadow-md min-h-screen",
    "vertical": "flex flex-col space-y-6 p-6 bg-white rounded-lg shadow-md max-w-md mx-auto",
}

_SECTION_ORDER = ("header", "content", "sidebar", "footer")


@dataclass
class ImageAnalysis:
    width: int
    height: int
    dominant_colors: List[str] = field(default_factory=lambda: ["#ffffff", "#f3f4f6", "#1f2937"])
    has_text: bool = True
    has_buttons: bool = True
    has_images: bool = False
    layout: str = "vertical"
    sections: int = 3


@dataclass
class MockupAnalysisResult:
    success: bool
    componentName: str
    code: str
    description: str
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


class MockupError(ValueError):
    """Raised when the upload cannot be decoded."""


# ── Decoding ──────────────────────────────────────────────────────────────────

def _strip_data_url(encoded: str) -> str:
    # "data:image/png;base64,AAAA..." → "AAAA..."
    if encoded.startswith("data:") and "," in encoded:
        return encoded.split(",", 1)[1]
    return encoded


def decode_image(image: Union[bytes, str]) -> Tuple[bytes, str]:
    """Return (raw bytes, base64 text) for either representation."""
    if isinstance(image, bytes):
        return image, base64.b64encode(image).decode("ascii")
    encoded = _strip_data_url(image.strip())
    if not encoded:
        raise MockupError("No image data supplied")
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MockupError(f"Image is not valid base64: {exc}") from exc
    return raw, encoded


def image_size(raw: bytes) -> Tuple[int, int]:
    try:
        with Image.open(io.BytesIO(raw)) as img:
            return img.size
    except (UnidentifiedImageError, OSError):
        logger.debug("could not read image dimensions, using %s", DEFAULT_SIZE)
        return DEFAULT_SIZE


# ── Analysis ──────────────────────────────────────────────────────────────────

def analyze_structure(raw: bytes, encoded: str) -> ImageAnalysis:
    width, height = image_size(raw)
    analysis = ImageAnalysis(width=width, height=height)

    payload = len(encoded)
    if payload > COMPLEX_THRESHOLD:
        analysis.has_images = True
        analysis.layout = "complex"
        analysis.sections = 4
    elif payload > GRID_THRESHOLD:
        analysis.layout = "grid"
    elif height and width / height > WIDE_ASPECT:
        analysis.layout = "horizontal"
    return analysis


# ── Code generation ───────────────────────────────────────────────────────────

def _header_section(analysis: ImageAnalysis) -> List[str]:
    lines = [
        "{/* Header Section */}",
        '<header className="flex items-center justify-between py-4 border-b border-gray-200">',
        '  <h1 className="text-2xl font-bold text-gray-900">Your App Title</h1>',
    ]
    if analysis.has_buttons:
        lines += [
            '  <button className="px-4 py-2 bg-blue-600 text-white rounded-md hover:bg-blue-700 transition-colors">',
            "    Get Started",
            "  </button>",
        ]
    lines.append("</header>")
    return lines


def _content_section(analysis: ImageAnalysis) -> List[str]:
    lines = [
        "{/* Main Content */}",
        '<main className="flex-1 py-6">',
        '  <div className="space-y-4">',
        '    <h2 className="text-xl font-semibold text-gray-800">Main Content</h2>',
        '    <p className="text-gray-600 leading-relaxed">',
        "      This is the main content area of your component. You can customize this text",
        "      and layout based on your specific needs.",
        "    </p>",
    ]
    if analysis.has_images:
        lines += [
            '    <div className="w-full h-48 bg-gray-200 rounded-lg flex items-center justify-center">',
            '      <span className="text-gray-500">Image Placeholder</span>',
            "    </div>",
        ]
    if analysis.has_buttons:
        lines += [
            '    <div className="flex gap-3">',
            '      <button className="px-6 py-2 bg-green-600 text-white rounded-md hover:bg-green-700 transition-colors">',
            "        Primary Action",
            "      </button>",
            '      <button className="px-6 py-2 border border-gray-300 text-gray-700 rounded-md hover:bg-gray-50 transition-colors">',
            "        Secondary Action",
            "      </button>",
            "    </div>",
        ]
    lines += ["  </div>", "</main>"]
    return lines


def _sidebar_section(analysis: ImageAnalysis) -> List[str]:
    lines = [
        "{/* Sidebar */}",
        '<aside className="w-full lg:w-64 bg-gray-50 rounded-lg p-4">',
        '  <h3 className="font-medium text-gray-900 mb-3">Quick Links</h3>',
        '  <nav className="space-y-2">',
    ]
    for link in ("Dashboard", "Settings", "Profile"):
        lines += [
            '    <a href="#" className="block px-3 py-2 text-sm text-gray-700 hover:bg-gray-200 rounded">',
            f"      {link}",
            "    </a>",
        ]
    lines += ["  </nav>", "</aside>"]
    return lines


def _footer_section(analysis: ImageAnalysis) -> List[str]:
    return [
        "{/* Footer */}",
        '<footer className="py-4 border-t border-gray-200 text-center">',
        '  <p className="text-sm text-gray-500">',
        "    © 2024 Your Company. All rights reserved.",
        "  </p>",
        "</footer>",
    ]


_SECTION_BUILDERS = {
    "header": _header_section,
    "content": _content_section,
    "sidebar": _sidebar_section,
    "footer": _footer_section,
}


def generate_component(analysis: ImageAnalysis, component_name: str) -> str:
    layout_classes = _LAYOUT_CLASSES.get(analysis.layout, _LAYOUT_CLASSES["vertical"])
    lines = [
        "import React from 'react';",
        "",
        f"interface {component_name}Props {{",
        "  className?: string;",
        "}",
        "",
        f"export function {component_name}({{ className = '' }}: {component_name}Props) {{",
        "  return (",
        f"    <div className={{`{layout_classes} ${{className}}`}}>",
    ]
    for index in range(analysis.sections):
        section = _SECTION_ORDER[index % len(_SECTION_ORDER)]
        lines.extend("      " + line for line in _SECTION_BUILDERS[section](analysis))
    lines += [
        "    </div>",
        "  );",
        "}",
        "",
        f"export default {component_name};",
    ]
    return "\n".join(lines)


def describe(analysis: ImageAnalysis, component_name: str) -> str:
    buttons = "with buttons" if analysis.has_buttons else "without buttons"
    images = "with images" if analysis.has_images else "without images"
    return (
        f"Generated {component_name} component with {analysis.layout} layout, "
        f"{analysis.sections} sections, {buttons}, {images}"
    )


def analyze_mockup(
    image: Union[bytes, str],
    component_name: str = DEFAULT_COMPONENT_NAME,
) -> MockupAnalysisResult:
    """Analyze *image* (raw bytes or base64 text) and emit a component skeleton."""
    component_name = component_name or DEFAULT_COMPONENT_NAME
    try:
        raw, encoded = decode_image(image)
    except MockupError as exc:
        logger.warning("mockup analysis failed: %s", exc)
        return MockupAnalysisResult(
            success=False,
            componentName=component_name,
            code="",
            description="Failed to analyze mockup",
            error=str(exc),
        )

    analysis = analyze_structure(raw, encoded)
    return MockupAnalysisResult(
        success=True,
        componentName=component_name,
        code=generate_component(analysis, component_name),
        description=describe(analysis, component_name),
    )
