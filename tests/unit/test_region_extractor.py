"""
Region extraction from text-detection payloads.
"""
import pytest

from menulens.models.overlay import Point, TextRegion
from menulens.schemas.recognition import AnnotateResponse
from menulens.services.region_extractor import extract_regions, normalize_corners, parse_payload


def annotation(text, vertices):
    return {"description": text, "boundingPoly": {"vertices": vertices}}


def box(x0, y0, x1, y1):
    return [{"x": x0, "y": y0}, {"x": x1, "y": y0}, {"x": x1, "y": y1}, {"x": x0, "y": y1}]


def payload(*annotations):
    return {"responses": [{"textAnnotations": list(annotations)}]}


class TestExtractRegions:

    def test_drops_aggregate_and_preserves_order(self):
        raw = payload(
            annotation("MENU\nラーメン\n餃子", box(0, 0, 100, 100)),
            annotation("ラーメン", box(10, 10, 50, 30)),
            annotation("餃子", box(10, 40, 40, 60)),
            annotation("寿司", box(10, 70, 40, 90)),
        )
        regions = extract_regions(raw)

        assert [r.text for r in regions] == ["ラーメン", "餃子", "寿司"]
        assert len(regions) == 4 - 1

    def test_scenario_single_region(self):
        raw = payload(
            {"description": "MENU"},
            annotation("ラーメン", box(10, 10, 50, 30)),
        )
        regions = extract_regions(raw)

        assert regions == [
            TextRegion(
                text="ラーメン",
                corners=(Point(10, 10), Point(50, 10), Point(50, 30), Point(10, 30)),
            )
        ]

    def test_aggregate_only_yields_no_regions(self):
        assert extract_regions(payload({"description": "MENU"})) == []

    @pytest.mark.parametrize("raw", [
        {},
        None,
        {"responses": []},
        {"responses": [{}]},
        {"responses": [{"textAnnotations": None}]},
        {"responses": [{"error": {"code": 3, "message": "Bad image data."}}]},
        "not a payload",
        {"responses": "garbage"},
    ])
    def test_missing_or_malformed_payload_is_empty(self, raw):
        assert extract_regions(raw) == []

    def test_missing_coordinates_default_to_zero(self):
        raw = payload(
            {"description": "all"},
            annotation("右端", [{"y": 5}, {"x": 40}, {"x": 40, "y": 25}, {}]),
        )
        (region,) = extract_regions(raw)

        assert region.corners == (Point(0, 5), Point(40, 0), Point(40, 25), Point(0, 0))

    def test_null_coordinates_default_to_zero(self):
        raw = payload(
            {"description": "all"},
            annotation("x", [{"x": None, "y": 3}, {"x": 9, "y": None}, None, {"x": 9, "y": 7}]),
        )
        (region,) = extract_regions(raw)

        assert region.corners == (Point(0, 3), Point(9, 0), Point(0, 0), Point(9, 7))

    def test_short_polygon_padded_with_origin(self):
        raw = payload({"description": "all"}, annotation("x", [{"x": 4, "y": 4}]))
        (region,) = extract_regions(raw)

        assert len(region.corners) == 4
        assert region.corners[1:] == (Point(0, 0),) * 3

    def test_missing_bounding_poly_and_description(self):
        raw = payload({"description": "all"}, {})
        (region,) = extract_regions(raw)

        assert region.text == ""
        assert region.corners == (Point(0, 0),) * 4

    def test_extra_vertices_are_ignored(self):
        vertices = box(1, 2, 3, 4) + [{"x": 99, "y": 99}]
        raw = payload({"description": "all"}, annotation("x", vertices))
        (region,) = extract_regions(raw)

        assert Point(99, 99) not in region.corners

    def test_accepts_validated_model(self):
        model = AnnotateResponse.model_validate(
            payload({"description": "all"}, annotation("ラーメン", box(1, 1, 2, 2)))
        )
        assert [r.text for r in extract_regions(model)] == ["ラーメン"]

    def test_text_keeps_recognizer_whitespace(self):
        raw = payload({"description": "all"}, annotation("ラーメン\n", box(1, 1, 2, 2)))
        (region,) = extract_regions(raw)

        assert region.text == "ラーメン\n"
        assert region.key == "ラーメン"


class TestNormalizeCorners:

    def test_reorders_shuffled_rectangle(self):
        shuffled = (Point(50, 30), Point(10, 10), Point(10, 30), Point(50, 10))
        assert normalize_corners(shuffled) == (
            Point(10, 10), Point(50, 10), Point(50, 30), Point(10, 30)
        )

    def test_counter_clockwise_input(self):
        ccw = (Point(10, 10), Point(10, 30), Point(50, 30), Point(50, 10))
        assert normalize_corners(ccw) == (
            Point(10, 10), Point(50, 10), Point(50, 30), Point(10, 30)
        )

    def test_ordered_input_is_unchanged(self):
        ordered = (Point(10, 10), Point(50, 10), Point(50, 30), Point(10, 30))
        assert normalize_corners(ordered) == ordered

    def test_extract_with_normalization(self):
        raw = payload(
            {"description": "all"},
            annotation("x", [{"x": 50, "y": 30}, {"x": 10, "y": 30}, {"x": 10, "y": 10}, {"x": 50, "y": 10}]),
        )
        (region,) = extract_regions(raw, normalize=True)

        assert region.top_left == Point(10, 10)
        assert region.corners[2] == Point(50, 30)


def test_parse_payload_passthrough():
    model = AnnotateResponse()
    assert parse_payload(model) is model
