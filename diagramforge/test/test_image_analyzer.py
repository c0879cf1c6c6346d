import base64
import io

import pytest
from PIL import Image

from diagramforge.server.services.image_analyzer import (
    COMPLEX_THRESHOLD,
    GRID_THRESHOLD,
    ImageAnalysis,
    analyze_mockup,
    analyze_structure,
    decode_image,
    generate_component,
)


def png_bytes(width=40, height=30):
    buf = io.BytesIO()
    Image.new("RGB", (width, height), "white").save(buf, format="PNG")
    return buf.getvalue()


class TestDecode:

    def test_bytes_are_encoded(self):
        raw, encoded = decode_image(b"abc")
        assert raw == b"abc"
        assert encoded == base64.b64encode(b"abc").decode("ascii")

    def test_data_url_prefix_is_stripped(self):
        encoded = base64.b64encode(b"hello").decode("ascii")
        raw, text = decode_image(f"data:image/png;base64,{encoded}")
        assert raw == b"hello"
        assert text == encoded


class TestAnalyzeStructure:

    def test_reads_dimensions(self):
        raw = png_bytes(64, 48)
        analysis = analyze_structure(raw, base64.b64encode(raw).decode())
        assert (analysis.width, analysis.height) == (64, 48)
        assert analysis.layout == "vertical"
        assert analysis.sections == 3

    def test_unreadable_image_uses_default_size(self):
        analysis = analyze_structure(b"not an image", "x" * 10)
        assert (analysis.width, analysis.height) == (800, 600)

    def test_wide_image_is_horizontal(self):
        raw = png_bytes(300, 50)
        analysis = analyze_structure(raw, base64.b64encode(raw).decode())
        assert analysis.layout == "horizontal"

    @pytest.mark.parametrize("size, layout, sections, images", [
        (GRID_THRESHOLD + 1, "grid", 3, False),
        (COMPLEX_THRESHOLD + 1, "complex", 4, True),
    ])
    def test_payload_size_heuristic(self, size, layout, sections, images):
        analysis = analyze_structure(b"", "A" * size)
        assert analysis.layout == layout
        assert analysis.sections == sections
        assert analysis.has_images is images


class TestGenerateComponent:

    def test_sections_cycle(self):
        code = generate_component(ImageAnalysis(width=1, height=1, sections=4), "Landing")
        order = [code.index(marker) for marker in
                 ("Header Section", "Main Content */", "Sidebar", "Footer")]
        assert order == sorted(order)
        assert code.startswith("import React from 'react';")
        assert "interface LandingProps {" in code
        assert code.endswith("export default Landing;")

    def test_optional_blocks(self):
        bare = generate_component(
            ImageAnalysis(width=1, height=1, has_buttons=False, has_images=False), "Bare"
        )
        assert "Get Started" not in bare
        assert "Image Placeholder" not in bare


class TestAnalyzeMockup:

    def test_success(self):
        result = analyze_mockup(base64.b64encode(png_bytes()).decode(), "Landing")
        assert result.success is True
        assert result.componentName == "Landing"
        assert "export default Landing;" in result.code
        assert result.description == (
            "Generated Landing component with vertical layout, 3 sections, "
            "with buttons, without images"
        )

    def test_default_component_name(self):
        result = analyze_mockup(png_bytes(), "")
        assert result.componentName == "GeneratedComponent"

    @pytest.mark.parametrize("image", ["", "***not base64***"])
    def test_invalid_upload(self, image):
        result = analyze_mockup(image)
        assert result.success is False
        assert result.code == ""
        assert result.description == "Failed to analyze mockup"
        assert result.error
        assert "error" in result.to_dict()
