import datetime
import pathlib

import fitz
import PIL.Image

import field_label_generator as flg
import field_label_generator.layout
import field_label_generator.payload
import field_label_generator.service


DPI = 300
INK_THRESHOLD = 240
EDGE_RATIO_LIMIT = 0.01


#============================================
def _render_pdf_page(path: pathlib.Path, page_index: int = 0) -> PIL.Image.Image:
	"""
	Render one page of a PDF to an image.

	Args:
		path: PDF path.
		page_index: Zero-based page number.

	Returns:
		PIL image.
	"""
	document = fitz.open(path)
	page = document[page_index]
	scale = DPI / 72.0
	matrix = fitz.Matrix(scale, scale)
	pixmap = page.get_pixmap(matrix=matrix, alpha=False)
	image = PIL.Image.frombytes("RGB", [pixmap.width, pixmap.height], pixmap.samples)
	document.close()
	return image


#============================================
def _count_ink_ratio(gray: PIL.Image.Image, threshold: int) -> float:
	"""
	Compute the ink ratio for a grayscale region.

	Args:
		gray: Grayscale image region.
		threshold: Pixel intensity threshold.

	Returns:
		Ink ratio.
	"""
	pixels = list(gray.getdata())
	if not pixels:
		return 0.0
	ink = sum(1 for value in pixels if value < threshold)
	return ink / len(pixels)


#============================================
def test_sheet_cells_keep_clear_edges(s3_payload: dict, tmp_path: pathlib.Path) -> None:
	"""
	Smoke test a sheet page: every label has ink and no cell edge is touched.
	"""
	s3_payload.update({"includeQr": True, "plotsCount": 4})
	output_pdf = tmp_path / "smoke.pdf"
	result = flg.service.export_pdf(s3_payload, output_pdf, generated=datetime.date(2026, 3, 1))
	assert result.records == 24

	request = flg.payload.canonicalize_request(s3_payload)
	geometry = flg.layout.compute_sheet_geometry(flg.layout.resolve_layout(request))
	image = _render_pdf_page(output_pdf)
	gray = image.convert("L")
	scale = DPI / 72.0
	strip = 2

	violations = []
	for index in range(result.records):
		_page, cell_x, cell_y = flg.layout.compute_cell_origin(geometry, index)
		x0 = int(round(cell_x * scale))
		x1 = int(round((cell_x + geometry.label_width) * scale))
		y0 = int(round((geometry.page_height - (cell_y + geometry.label_height)) * scale))
		y1 = int(round((geometry.page_height - cell_y) * scale))
		body = gray.crop((x0, y0, x1, y1))
		if _count_ink_ratio(body, INK_THRESHOLD) == 0.0:
			violations.append(f"label {index} is blank")
		for edge_name, edge in (
			("left", gray.crop((x0, y0, x0 + strip, y1))),
			("right", gray.crop((x1 - strip, y0, x1, y1))),
			("top", gray.crop((x0, y0, x1, y0 + strip))),
			("bottom", gray.crop((x0, y1 - strip, x1, y1))),
		):
			ratio = _count_ink_ratio(edge, INK_THRESHOLD)
			if ratio > EDGE_RATIO_LIMIT:
				violations.append(f"label {index} edge {edge_name} ratio {ratio:.3f}")

	if violations:
		message = "Problems detected in rendered sheet:\n"
		message += "\n".join(violations[:10])
		raise AssertionError(message)


#============================================
def test_back_page_has_centered_code(s3_payload: dict, tmp_path: pathlib.Path) -> None:
	"""
	The back of a single label carries a QR code in the middle of the page.
	"""
	s3_payload.update({"labelType": "plot", "paperPreset": "Label3x5", "exportPlot": 1})
	output_pdf = tmp_path / "single.pdf"
	flg.service.export_pdf(s3_payload, output_pdf, generated=datetime.date(2026, 3, 1))

	gray = _render_pdf_page(output_pdf, 1).convert("L")
	width, height = gray.size
	center = gray.crop((width // 3, height // 3, 2 * width // 3, 2 * height // 3))
	ratio = _count_ink_ratio(center, INK_THRESHOLD)
	assert 0.2 < ratio < 0.8
