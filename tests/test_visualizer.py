import cv2
import numpy as np
import pytest

from logoguard.schemas.analysis_schemas import AnalysisResult
from logoguard.visualizer import DefectOverlayVisualizer, VisualizationError, VisualizerConfig


@pytest.fixture
def fail_result():
    return AnalysisResult.model_validate(
        {
            "verdict": "FAIL",
            "confidence": 92,
            "reasoning": "x",
            "defects": [
                {"description": "missing stroke", "box_2d": [500, 500, 800, 900]},
                {"description": "no box"},
                {"description": "inverted", "box_2d": [900, 900, 100, 100]},
            ],
        }
    )


def test_draw_marks_only_mapped_region(fail_result):
    image = np.full((100, 200, 3), 255, dtype=np.uint8)
    visualizer = DefectOverlayVisualizer(VisualizerConfig(show_banner=False, show_labels=False, fill_alpha=0.0))
    out = visualizer.draw(image, fail_result)

    assert out.shape == image.shape
    assert np.array_equal(image, np.full((100, 200, 3), 255, dtype=np.uint8))  # input untouched
    # box edge at x=100 (50% of 200), y=50 (50% of 100) is red
    assert tuple(out[50, 120]) == (0, 0, 255)
    # region outside any box untouched
    assert tuple(out[10, 10]) == (255, 255, 255)


def test_draw_scales_with_resolution(fail_result):
    visualizer = DefectOverlayVisualizer(VisualizerConfig(show_banner=False, show_labels=False, fill_alpha=0.0))
    small = visualizer.draw(np.full((100, 200, 3), 255, dtype=np.uint8), fail_result)
    large = visualizer.draw(np.full((400, 800, 3), 255, dtype=np.uint8), fail_result)
    assert tuple(small[50, 150]) == (0, 0, 255)
    assert tuple(large[200, 600]) == (0, 0, 255)


def test_render_returns_png(reference_asset, fail_result):
    png = DefectOverlayVisualizer().render(reference_asset, fail_result)
    assert png[:8] == b"\x89PNG\r\n\x1a\n"
    decoded = cv2.imdecode(np.frombuffer(png, np.uint8), cv2.IMREAD_COLOR)
    assert decoded.shape == (100, 200, 3)


def test_render_rejects_undecodable_asset(fail_result):
    with pytest.raises(VisualizationError):
        DefectOverlayVisualizer().render("data:image/png;base64,QUJD", fail_result)


def test_pass_result_draws_banner_only(reference_asset):
    result = AnalysisResult.model_validate({"verdict": "PASS", "confidence": 99, "reasoning": "ok"})
    png = DefectOverlayVisualizer().render(reference_asset, result)
    assert png.startswith(b"\x89PNG")


def test_render_tolerates_huge_box(reference_asset):
    result = AnalysisResult.model_validate(
        {
            "verdict": "FAIL",
            "confidence": 80,
            "reasoning": "x",
            "defects": [{"description": "everywhere", "box_2d": [0, 0, 1e12, 1e12]}],
        }
    )
    png = DefectOverlayVisualizer().render(reference_asset, result)
    decoded = cv2.imdecode(np.frombuffer(png, np.uint8), cv2.IMREAD_COLOR)
    assert decoded.shape == (100, 200, 3)
