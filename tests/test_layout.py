import pytest

import field_label_generator as flg
import field_label_generator.config
import field_label_generator.errors
import field_label_generator.layout
import field_label_generator.payload


mm_to_points = flg.config.mm_to_points


#============================================
def test_default_a4_grid() -> None:
	"""
	A4 with 60x30 mm labels, 8 mm margins and 2 mm gaps.
	"""
	layout = flg.layout.resolve_layout({})
	assert layout.preset.name == "A4"
	assert layout.layout_mode == "sheet"
	geometry = flg.layout.compute_sheet_geometry(layout)
	assert geometry.columns == 3
	assert geometry.rows == 8
	assert geometry.labels_per_page == 24


#============================================
def test_nine_rows_fit_without_vertical_gap() -> None:
	request = {"margins_mm": {"top": 6, "right": 6, "bottom": 6, "left": 6}, "gaps_mm": {"x": 2, "y": 0}}
	geometry = flg.layout.compute_sheet_geometry(flg.layout.resolve_layout(request))
	assert (geometry.columns, geometry.rows) == (3, 9)


#============================================
def test_exact_fit_keeps_last_column() -> None:
	request = {
		"label_width_mm": 70,
		"label_height_mm": 29.7,
		"margins_mm": {"top": 0, "right": 0, "bottom": 0, "left": 0},
		"gaps_mm": {"x": 0, "y": 0},
	}
	geometry = flg.layout.compute_sheet_geometry(flg.layout.resolve_layout(request))
	assert (geometry.columns, geometry.rows) == (3, 10)


#============================================
def test_camel_case_layout_keys() -> None:
	request = flg.payload.canonicalize_request({"paperPreset": "Letter", "marginsMm": {"top": 10}, "labelWidthMm": "50"})
	layout = flg.layout.resolve_layout(request)
	assert layout.preset.name == "Letter"
	assert layout.margins_mm.top == 10
	assert layout.margins_mm.left == 8
	assert layout.label_width_mm == 50


#============================================
def test_unknown_preset_uses_a4() -> None:
	assert flg.layout.resolve_layout({"paper_preset": "B5"}).preset.name == "A4"


#============================================
@pytest.mark.parametrize(
	"request_body, message",
	[
		({"label_width_mm": 300}, "too large"),
		({"label_width_mm": 0}, "greater than 0"),
		({"margins_mm": {"top": -1}}, "negative"),
		({"gaps_mm": {"x": -2}}, "negative"),
	],
)
def test_sheet_geometry_errors(request_body: dict, message: str) -> None:
	layout = flg.layout.resolve_layout(request_body)
	with pytest.raises(flg.errors.GeometryError, match=message):
		flg.layout.compute_sheet_geometry(layout)


#============================================
def test_label_preset_forces_single() -> None:
	layout = flg.layout.resolve_layout({"paper_preset": "Label3x5", "layout_mode": "sheet"})
	assert layout.layout_mode == "single"


#============================================
def test_single_geometry_with_bleed() -> None:
	layout = flg.layout.resolve_layout({"paper_preset": "Label3x5", "include_bleed": True})
	geometry = flg.layout.compute_single_geometry(layout)
	assert geometry.bleed_mm == 3.0
	assert geometry.page_width == pytest.approx(mm_to_points(76.2 + 6.0))
	assert geometry.page_height == pytest.approx(mm_to_points(127.0 + 6.0))
	plain = flg.layout.compute_single_geometry(flg.layout.resolve_layout({"paper_preset": "Label3x5"}))
	assert plain.bleed_mm == 0.0
	assert plain.page_width == pytest.approx(216.0)


#============================================
def test_single_geometry_errors() -> None:
	too_large = flg.layout.resolve_layout({"paper_preset": "Label3x5", "safe_margin_mm": 40})
	with pytest.raises(flg.errors.GeometryError, match="too large"):
		flg.layout.compute_single_geometry(too_large)
	negative = flg.layout.resolve_layout({"paper_preset": "Label3x5", "safe_margin_mm": -1})
	with pytest.raises(flg.errors.GeometryError, match="negative"):
		flg.layout.compute_single_geometry(negative)


#============================================
def test_sheet_mode_is_plant_only() -> None:
	layout = flg.layout.resolve_layout({})
	flg.layout.check_layout_for_label_type(layout, "plant")
	with pytest.raises(flg.errors.GeometryError, match="only supported for plant labels"):
		flg.layout.check_layout_for_label_type(layout, "plot")
	single = flg.layout.resolve_layout({"layout_mode": "single"})
	flg.layout.check_layout_for_label_type(single, "plot")
	with pytest.raises(flg.errors.GeometryError, match="invalid"):
		flg.layout.check_layout_for_label_type(flg.layout.resolve_layout({"layout_mode": "poster"}), "plant")


#============================================
def test_cell_origin_row_major() -> None:
	geometry = flg.layout.compute_sheet_geometry(flg.layout.resolve_layout({}))
	page, x, y = flg.layout.compute_cell_origin(geometry, 0)
	assert page == 0
	assert x == pytest.approx(mm_to_points(8))
	assert y == pytest.approx(mm_to_points(297 - 8 - 30))

	page, x, y = flg.layout.compute_cell_origin(geometry, 2)
	assert x == pytest.approx(mm_to_points(8 + 2 * 62))
	assert y == pytest.approx(mm_to_points(297 - 8 - 30))

	page, x, y = flg.layout.compute_cell_origin(geometry, 3)
	assert x == pytest.approx(mm_to_points(8))
	assert y == pytest.approx(mm_to_points(297 - 8 - 30 - 32))

	page, x, y = flg.layout.compute_cell_origin(geometry, 24)
	assert page == 1
	assert x == pytest.approx(mm_to_points(8))


#============================================
def test_count_sheet_pages() -> None:
	geometry = flg.layout.compute_sheet_geometry(flg.layout.resolve_layout({}))
	assert flg.layout.count_sheet_pages(geometry, 0) == 0
	assert flg.layout.count_sheet_pages(geometry, 24) == 1
	assert flg.layout.count_sheet_pages(geometry, 25) == 2


#============================================
def test_qr_payload_modes() -> None:
	qr = flg.layout.resolve_qr({})
	assert flg.layout.build_qr_payload("ACME-CORN-P01", qr) == "ACME-CORN-P01"
	url_qr = flg.layout.resolve_qr({"qr_mode": "URL", "qr_base_url": "https://example.org/"})
	assert flg.layout.build_qr_payload("ACME-CORN-P01", url_qr) == "https://example.org/farm/ACME-CORN-P01"
	default_url = flg.layout.resolve_qr({"qr_mode": "url"})
	assert flg.layout.build_qr_payload("X", default_url) == "https://fgn.app/farm/X"
