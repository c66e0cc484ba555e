"""
Drawing of label pages onto a ReportLab canvas.
"""

# Standard Library
import datetime
import json
import pathlib
import typing

# PIP3 modules
import PIL.Image
import qrcode
import qrcode.constants
import qrcode.image.pil
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas

# local repo modules
import field_label_generator as flg
import field_label_generator.config
import field_label_generator.identifiers
import field_label_generator.labels
import field_label_generator.layout


PlotLabel = flg.labels.PlotLabel
RowLabel = flg.labels.RowLabel
PlantLabel = flg.labels.PlantLabel
QrConfig = flg.config.QrConfig
SheetGeometry = flg.config.SheetGeometry
SingleGeometry = flg.config.SingleGeometry
ExportResult = flg.config.ExportResult
mm_to_points = flg.config.mm_to_points
pad_number = flg.identifiers.pad_number

LABEL_TYPE_PLOT = flg.config.LABEL_TYPE_PLOT
LABEL_TYPE_ROW = flg.config.LABEL_TYPE_ROW
LABEL_TYPE_PLANT = flg.config.LABEL_TYPE_PLANT
LAYOUT_SHEET = flg.config.LAYOUT_SHEET
LAYOUT_SINGLE = flg.config.LAYOUT_SINGLE
DEFAULT_FONT_REGULAR = flg.config.DEFAULT_FONT_REGULAR
DEFAULT_FONT_BOLD = flg.config.DEFAULT_FONT_BOLD
DIVIDER_COLOR = flg.config.DIVIDER_COLOR
DIVIDER_WIDTH = flg.config.DIVIDER_WIDTH
MUTED_TEXT_COLOR = flg.config.MUTED_TEXT_COLOR
SINGLE_PAD_MM = flg.config.SINGLE_PAD_MM
LINE_STEP_MM = flg.config.LINE_STEP_MM
QR_QUIET_ZONE_MM = flg.config.QR_QUIET_ZONE_MM
QR_MIN_MM = flg.config.QR_MIN_MM
QR_IDEAL_MM = flg.config.QR_IDEAL_MM
QR_HEIGHT_SHARE = flg.config.QR_HEIGHT_SHARE
QR_BOX_SIZE = flg.config.QR_BOX_SIZE
SHEET_PADDING_MM = flg.config.SHEET_PADDING_MM
SHEET_QR_WIDTH_SHARE = flg.config.SHEET_QR_WIDTH_SHARE
SHEET_MIN_TEXT_WIDTH = flg.config.SHEET_MIN_TEXT_WIDTH
PROGRESS_BAR_WIDTH = flg.config.PROGRESS_BAR_WIDTH
PROGRESS_UPDATE_EVERY = flg.config.PROGRESS_UPDATE_EVERY
PLANT_ID_FONT_SIZE = flg.config.PLANT_ID_FONT_SIZE
PLANT_ID_MIN_FONT_SIZE = flg.config.PLANT_ID_MIN_FONT_SIZE
PLOT_ID_FONT_SIZE = flg.config.PLOT_ID_FONT_SIZE
PLOT_ID_MIN_FONT_SIZE = flg.config.PLOT_ID_MIN_FONT_SIZE
ROW_ID_FONT_SIZE = flg.config.ROW_ID_FONT_SIZE
ROW_ID_MIN_FONT_SIZE = flg.config.ROW_ID_MIN_FONT_SIZE

QR_ERROR_LEVELS = {
	"L": qrcode.constants.ERROR_CORRECT_L,
	"M": qrcode.constants.ERROR_CORRECT_M,
	"Q": qrcode.constants.ERROR_CORRECT_Q,
	"H": qrcode.constants.ERROR_CORRECT_H,
}

LabelRecord = PlotLabel | RowLabel | PlantLabel


#============================================
def print_progress(prefix: str, current: int, total: int | None) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count, or None when unknown.
	"""
	if not total:
		print(f"{prefix} {current}", end="\r")
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * min(percent, 100) / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def build_qr_image(payload: str, error_level: str = flg.config.QR_ERROR_CORRECTION) -> reportlab.lib.utils.ImageReader:
	"""
	Encode a string as a QR code image.

	Args:
		payload: UTF-8 text to encode.
		error_level: Error correction level L, M, Q or H.

	Returns:
		ImageReader ready for drawImage.
	"""
	qr = qrcode.QRCode(
		error_correction=QR_ERROR_LEVELS[error_level],
		box_size=QR_BOX_SIZE,
		border=0,
	)
	qr.add_data(payload)
	qr.make(fit=True)
	wrapper = qr.make_image(
		image_factory=qrcode.image.pil.PilImage,
		fill_color="black",
		back_color="white",
	)
	image: PIL.Image.Image = wrapper.convert("RGB")
	return reportlab.lib.utils.ImageReader(image)


#============================================
def baseline_from_top(page_height: float, top: float, font_name: str, font_size: float) -> float:
	"""
	Convert a top-down text position into a PDF baseline.

	Args:
		page_height: Page height in points.
		top: Distance from the top edge to the top of the text.
		font_name: ReportLab font name.
		font_size: Font size in points.

	Returns:
		Baseline y with the origin at bottom-left.
	"""
	ascent = reportlab.pdfbase.pdfmetrics.getAscent(font_name) * font_size / 1000.0
	return page_height - top - ascent


#============================================
def fit_font_size(
	pdf: reportlab.pdfgen.canvas.Canvas,
	text: str,
	font_name: str,
	start_size: float,
	min_size: float,
	width: float,
) -> float:
	"""
	Shrink a font one point at a time until the text fits or min_size is hit.
	"""
	size = start_size
	while pdf.stringWidth(text, font_name, size) > width and size > min_size:
		size -= 1
	return size


#============================================
def truncate_to_width(
	pdf: reportlab.pdfgen.canvas.Canvas,
	text: str,
	font_name: str,
	font_size: float,
	width: float,
) -> str:
	if pdf.stringWidth(text, font_name, font_size) <= width:
		return text
	while text and pdf.stringWidth(text + "...", font_name, font_size) > width:
		text = text[:-1]
	return text + "..."


#============================================
def draw_divider(pdf: reportlab.pdfgen.canvas.Canvas, x1: float, x2: float, y: float) -> None:
	"""
	Draw a thin grey horizontal rule.

	Args:
		pdf: ReportLab canvas.
		x1: Start x.
		x2: End x.
		y: PDF y (origin bottom-left).
	"""
	pdf.saveState()
	pdf.setStrokeColorRGB(*DIVIDER_COLOR)
	pdf.setLineWidth(DIVIDER_WIDTH)
	pdf.line(x1, y, x2, y)
	pdf.restoreState()


#============================================
def draw_text(
	pdf: reportlab.pdfgen.canvas.Canvas,
	page_height: float,
	text: str,
	x: float,
	top: float,
	width: float,
	font_name: str,
	font_size: float,
	color: tuple[float, float, float] = (0.0, 0.0, 0.0),
	align: str = "LEFT",
) -> None:
	"""
	Draw one line of text positioned by its top edge.
	"""
	pdf.setFont(font_name, font_size)
	pdf.setFillColorRGB(*color)
	baseline = baseline_from_top(page_height, top, font_name, font_size)
	if align.upper() == "CENTER":
		pdf.drawCentredString(x + width / 2.0, baseline, text)
		return
	pdf.drawString(x, baseline, text)


#============================================
def draw_field(
	pdf: reportlab.pdfgen.canvas.Canvas,
	page_height: float,
	label: str,
	value: str,
	x: float,
	top: float,
) -> None:
	"""
	Draw "Label: value" with a regular caption and a bold value.
	"""
	caption = f"{label}: "
	draw_text(pdf, page_height, caption, x, top, 0.0, DEFAULT_FONT_REGULAR, 9)
	caption_width = pdf.stringWidth(caption, DEFAULT_FONT_REGULAR, 9)
	draw_text(pdf, page_height, value, x + caption_width, top - 0.5, 0.0, DEFAULT_FONT_BOLD, 10)


#============================================
def compute_content_box(geometry: SingleGeometry) -> tuple[float, float, float, float]:
	"""
	Compute the printable box inside bleed and safe margin.

	Returns:
		Tuple of (left, right, top_start, bottom_pad) in points, top-down.
	"""
	bleed = mm_to_points(geometry.bleed_mm)
	safe = mm_to_points(geometry.safe_margin_mm)
	left = bleed + safe
	right = geometry.page_width - bleed - safe
	pad = max(mm_to_points(SINGLE_PAD_MM), safe)
	top_start = bleed + pad
	bottom_pad = bleed + pad
	return (left, right, top_start, bottom_pad)


#============================================
def draw_top_section(
	pdf: reportlab.pdfgen.canvas.Canvas,
	record: LabelRecord,
	geometry: SingleGeometry,
	left: float,
	right: float,
	top: float,
) -> float:
	"""
	Draw the site and crop lines shared by every front label.

	Returns:
		Next free top-down y position.
	"""
	page_height = geometry.page_height
	draw_field(pdf, page_height, "Site", record.site_name, left, top)
	top += mm_to_points(LINE_STEP_MM)
	draw_divider(pdf, left, right, page_height - top)
	top += mm_to_points(3)
	draw_field(pdf, page_height, "Crop", record.crop_type, left, top)
	top += mm_to_points(LINE_STEP_MM)
	draw_divider(pdf, left, right, page_height - top)
	top += mm_to_points(4)
	return top


#============================================
def draw_main_id(
	pdf: reportlab.pdfgen.canvas.Canvas,
	geometry: SingleGeometry,
	text: str,
	left: float,
	width: float,
	top: float,
	start_size: float,
	min_size: float,
) -> None:
	size = fit_font_size(pdf, text, DEFAULT_FONT_BOLD, start_size, min_size, width)
	draw_text(pdf, geometry.page_height, text, left, top, width, DEFAULT_FONT_BOLD, size, align="CENTER")


#============================================
def draw_footer(
	pdf: reportlab.pdfgen.canvas.Canvas,
	geometry: SingleGeometry,
	text: str,
	font_size: float,
	lift: float,
	divider_gap_mm: float,
	font_name: str = DEFAULT_FONT_REGULAR,
	color: tuple[float, float, float] = MUTED_TEXT_COLOR,
	align: str = "LEFT",
) -> None:
	"""
	Draw a divider and a line of text anchored to the bottom pad.

	Args:
		pdf: ReportLab canvas.
		geometry: Single page geometry.
		text: Footer text.
		font_size: Font size in points.
		lift: Distance from the bottom pad up to the top of the text.
		divider_gap_mm: Space between the divider and the text.
		font_name: ReportLab font name.
		color: RGB fill color.
		align: LEFT or CENTER.
	"""
	left, right, _top_start, bottom_pad = compute_content_box(geometry)
	page_height = geometry.page_height
	text_top = page_height - bottom_pad - lift
	draw_divider(pdf, left, right, page_height - (text_top - mm_to_points(divider_gap_mm)))
	draw_text(pdf, page_height, text, left, text_top, right - left, font_name, font_size, color, align)


#============================================
def draw_front_plant_label(
	pdf: reportlab.pdfgen.canvas.Canvas,
	record: PlantLabel,
	geometry: SingleGeometry,
	generated: datetime.date,
) -> None:
	"""
	Draw the front of a single plant label.

	Args:
		pdf: ReportLab canvas.
		record: Plant record.
		geometry: Single page geometry.
		generated: Date printed in the footer.
	"""
	left, right, top, _bottom_pad = compute_content_box(geometry)
	page_height = geometry.page_height
	top = draw_top_section(pdf, record, geometry, left, right, top)

	fields = [("Plot", pad_number(record.plot_no, 2))]
	if record.row_no is not None:
		fields.append(("Row", pad_number(record.row_no, 2)))
	fields.append(("Plant", pad_number(record.plant_no, 3)))
	for label, value in fields:
		draw_field(pdf, page_height, label, value, left, top)
		top += mm_to_points(LINE_STEP_MM)
	draw_divider(pdf, left, right, page_height - top)

	id_top = page_height / 2.0 - mm_to_points(6)
	draw_main_id(pdf, geometry, record.plant_id_short, left, right - left, id_top, PLANT_ID_FONT_SIZE, PLANT_ID_MIN_FONT_SIZE)
	draw_divider(pdf, left, right, page_height - (id_top + mm_to_points(10)))

	draw_footer(pdf, geometry, f"Date: {generated.strftime('%b %Y')}", 8, 8, 3)


#============================================
def draw_front_plot_label(
	pdf: reportlab.pdfgen.canvas.Canvas,
	record: PlotLabel,
	geometry: SingleGeometry,
	generated: datetime.date,
) -> None:
	left, right, top, _bottom_pad = compute_content_box(geometry)
	draw_top_section(pdf, record, geometry, left, right, top)
	id_top = geometry.page_height / 2.0 - mm_to_points(10)
	draw_main_id(pdf, geometry, record.plot_id_short, left, right - left, id_top, PLOT_ID_FONT_SIZE, PLOT_ID_MIN_FONT_SIZE)
	draw_footer(pdf, geometry, f"Rows: {record.row_count}", 10, mm_to_points(4), 3)


#============================================
def draw_front_row_label(
	pdf: reportlab.pdfgen.canvas.Canvas,
	record: RowLabel,
	geometry: SingleGeometry,
	generated: datetime.date,
) -> None:
	left, right, top, _bottom_pad = compute_content_box(geometry)
	page_height = geometry.page_height
	top = draw_top_section(pdf, record, geometry, left, right, top)
	draw_text(pdf, page_height, f"Plot: {pad_number(record.plot_no, 2)}", left, top, 0.0, DEFAULT_FONT_REGULAR, 9)
	top += mm_to_points(4)
	draw_divider(pdf, left, right, page_height - top)

	id_top = page_height / 2.0 - mm_to_points(10)
	draw_main_id(pdf, geometry, f"R{pad_number(record.row_no, 2)}", left, right - left, id_top, ROW_ID_FONT_SIZE, ROW_ID_MIN_FONT_SIZE)
	draw_footer(pdf, geometry, f"Plants: {record.plant_count}", 10, mm_to_points(4), 3)


FRONT_DRAWERS: dict[str, typing.Callable] = {
	LABEL_TYPE_PLOT: draw_front_plot_label,
	LABEL_TYPE_ROW: draw_front_row_label,
	LABEL_TYPE_PLANT: draw_front_plant_label,
}


#============================================
def compute_back_qr_size(geometry: SingleGeometry) -> float:
	"""
	Size the back-page QR code: ideal 45 mm, shrinking to fit the content box.

	Returns:
		QR side length in points; 0 or less when nothing fits.
	"""
	bleed = mm_to_points(geometry.bleed_mm)
	safe = mm_to_points(geometry.safe_margin_mm)
	content_width = geometry.page_width - 2.0 * (bleed + safe)
	content_height = geometry.page_height - 2.0 * (bleed + safe)
	quiet = mm_to_points(QR_QUIET_ZONE_MM)
	width_limit = content_width - quiet * 2.0
	height_limit = content_height * QR_HEIGHT_SHARE - quiet * 2.0
	size = min(mm_to_points(QR_IDEAL_MM), width_limit, height_limit)
	if size < mm_to_points(QR_MIN_MM):
		size = min(mm_to_points(QR_MIN_MM), width_limit, height_limit)
	return size


#============================================
def draw_back_label(
	pdf: reportlab.pdfgen.canvas.Canvas,
	full_id: str,
	qr_payload: str,
	geometry: SingleGeometry,
) -> None:
	"""
	Draw the back of a label: QR code, the full id and a scan hint.

	Args:
		pdf: ReportLab canvas.
		full_id: Full identifier printed under the code.
		qr_payload: String encoded in the QR code.
		geometry: Single page geometry.
	"""
	qr_size = compute_back_qr_size(geometry)
	if qr_size <= 0:
		return
	left, right, _top_start, _bottom_pad = compute_content_box(geometry)
	page_width = geometry.page_width
	page_height = geometry.page_height
	qr_x = (page_width - qr_size) / 2.0
	qr_top = page_height / 2.0 - qr_size / 2.0 - mm_to_points(6)
	pdf.drawImage(
		build_qr_image(qr_payload),
		qr_x,
		page_height - qr_top - qr_size,
		width=qr_size,
		height=qr_size,
		mask=None,
		preserveAspectRatio=False,
		anchor="sw",
	)
	text_top = qr_top + qr_size + mm_to_points(4)
	id_size = fit_font_size(pdf, full_id, DEFAULT_FONT_REGULAR, 8, 5, right - left)
	draw_text(pdf, page_height, full_id, left, text_top, right - left, DEFAULT_FONT_REGULAR, id_size, align="CENTER")
	draw_footer(
		pdf,
		geometry,
		"Scan for Info",
		9,
		9,
		4,
		font_name=DEFAULT_FONT_BOLD,
		color=(0.0, 0.0, 0.0),
		align="CENTER",
	)


#============================================
def draw_sheet_cell(
	pdf: reportlab.pdfgen.canvas.Canvas,
	record: PlantLabel,
	geometry: SheetGeometry,
	cell_x: float,
	cell_y: float,
	qr: QrConfig | None,
	generated: datetime.date,
) -> None:
	"""
	Draw one plant label inside a sheet cell.

	Args:
		pdf: ReportLab canvas.
		record: Plant record.
		geometry: Sheet geometry.
		cell_x: Cell left edge.
		cell_y: Cell bottom edge.
		qr: QR config, or None to skip the inline code.
		generated: Date printed on the label.
	"""
	padding = mm_to_points(SHEET_PADDING_MM)
	width = geometry.label_width
	height = geometry.label_height
	qr_size = max(0.0, min(height - padding * 2.0, width * SHEET_QR_WIDTH_SHARE))
	draw_qr = qr is not None and qr_size > 0
	text_width = width - padding * 2.0
	if draw_qr:
		text_width -= qr_size + padding
	text_width = max(SHEET_MIN_TEXT_WIDTH, text_width)

	# top-down offsets inside the cell
	cell_top = geometry.page_height - (cell_y + height)
	text_x = cell_x + padding
	text_top = cell_top + padding
	page_height = geometry.page_height

	for offset, value in ((0.0, record.site_name), (10.0, record.crop_type)):
		line = truncate_to_width(pdf, value, DEFAULT_FONT_REGULAR, 8, text_width)
		draw_text(pdf, page_height, line, text_x, text_top + offset, text_width, DEFAULT_FONT_REGULAR, 8)

	id_size = max(12.0, min(20.0, height * 0.22))
	id_size = fit_font_size(pdf, record.plant_id_short, DEFAULT_FONT_BOLD, id_size, 6, text_width)
	draw_text(pdf, page_height, record.plant_id_short, text_x, text_top + 22, text_width, DEFAULT_FONT_BOLD, id_size)

	footer = f"Generated {generated.isoformat()}"
	draw_text(pdf, page_height, footer, text_x, cell_top + height - padding - 8, text_width, DEFAULT_FONT_REGULAR, 7)

	if draw_qr:
		payload = flg.layout.build_qr_payload(record.plant_id_full, qr)
		pdf.drawImage(
			build_qr_image(payload),
			cell_x + width - padding - qr_size,
			cell_y + (height - qr_size) / 2.0,
			width=qr_size,
			height=qr_size,
			mask=None,
			preserveAspectRatio=False,
			anchor="sw",
		)


#============================================
def render_single_pdf(
	sink,
	sections: list[tuple[str, typing.Iterable[LabelRecord]]],
	geometry: SingleGeometry,
	qr: QrConfig,
	label_type: str,
	generated: datetime.date | None = None,
	total: int | None = None,
	verbose: bool = False,
) -> ExportResult:
	"""
	Render one front page and one back page per record.

	Args:
		sink: Output path or binary file-like object.
		sections: (label_type, records) pairs rendered in order.
		geometry: Single page geometry.
		qr: QR config for the back page.
		label_type: Requested label type, recorded in the result.
		generated: Date printed on fronts; today when None.
		total: Expected record count for progress output.
		verbose: Print progress.

	Returns:
		ExportResult.
	"""
	if generated is None:
		generated = datetime.date.today()
	if isinstance(sink, pathlib.PurePath):
		sink = str(sink)
	pdf = reportlab.pdfgen.canvas.Canvas(sink, pagesize=(geometry.page_width, geometry.page_height))
	counts_by_type: dict[str, int] = {}
	index = 0
	for section_type, records in sections:
		front_drawer = FRONT_DRAWERS[section_type]
		counts_by_type[section_type] = 0
		for record in records:
			if index > 0:
				pdf.showPage()
			front_drawer(pdf, record, geometry, generated)
			pdf.showPage()
			draw_back_label(pdf, record.full_id, flg.layout.build_qr_payload(record.full_id, qr), geometry)
			index += 1
			counts_by_type[section_type] += 1
			if verbose and index % PROGRESS_UPDATE_EVERY == 0:
				print_progress("Labels", index, total)
	pdf.save()
	if verbose:
		print_progress("Labels", index, total)
		print()
	return ExportResult(
		label_type=label_type,
		layout_mode=LAYOUT_SINGLE,
		records=index,
		pages=index * 2,
		labels_per_page=1,
		counts_by_type=counts_by_type,
	)


#============================================
def render_sheet_pdf(
	sink,
	records: typing.Iterable[PlantLabel],
	geometry: SheetGeometry,
	qr: QrConfig | None,
	generated: datetime.date | None = None,
	total: int | None = None,
	verbose: bool = False,
) -> ExportResult:
	"""
	Render plant labels onto a grid, row by row, starting a page when full.

	Args:
		sink: Output path or binary file-like object.
		records: Plant records.
		geometry: Sheet geometry.
		qr: QR config for inline codes, or None for text only.
		generated: Date printed on labels; today when None.
		total: Expected record count for progress output.
		verbose: Print progress.

	Returns:
		ExportResult.
	"""
	if generated is None:
		generated = datetime.date.today()
	if isinstance(sink, pathlib.PurePath):
		sink = str(sink)
	pdf = reportlab.pdfgen.canvas.Canvas(sink, pagesize=(geometry.page_width, geometry.page_height))
	index = 0
	for record in records:
		_page_index, cell_x, cell_y = flg.layout.compute_cell_origin(geometry, index)
		if index > 0 and index % geometry.labels_per_page == 0:
			pdf.showPage()
		draw_sheet_cell(pdf, record, geometry, cell_x, cell_y, qr, generated)
		index += 1
		if verbose and index % PROGRESS_UPDATE_EVERY == 0:
			print_progress("Labels", index, total)
	pdf.save()
	if verbose:
		print_progress("Labels", index, total)
		print()
	return ExportResult(
		label_type=LABEL_TYPE_PLANT,
		layout_mode=LAYOUT_SHEET,
		records=index,
		pages=flg.layout.count_sheet_pages(geometry, index),
		labels_per_page=geometry.labels_per_page,
		counts_by_type={LABEL_TYPE_PLANT: index},
	)


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	values,
	layout,
	qr: QrConfig | None,
	result: ExportResult,
	geometry: SheetGeometry | SingleGeometry,
	sampling_plan_id: str | None = None,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		values: Validated payload values.
		layout: Resolved layout config.
		qr: QR config, or None when codes were skipped.
		result: Export result.
		geometry: Geometry the pages were drawn with.
		sampling_plan_id: Stored plan the plant subset came from.
	"""
	data = {
		"site_name": values.site_name,
		"crop_type": values.crop_type,
		"batch_name": values.batch_name,
		"structure_code": values.structure_code,
		"mode": values.mode,
		"label_type": result.label_type,
		"records": result.records,
		"counts_by_type": result.counts_by_type,
		"pages": result.pages,
		"labels_per_page": result.labels_per_page,
		"sampling_plan_id": sampling_plan_id,
		"layout": {
			"paper_preset": layout.preset.name,
			"layout_mode": result.layout_mode,
			"page_width": geometry.page_width,
			"page_height": geometry.page_height,
			"label_width_mm": layout.label_width_mm,
			"label_height_mm": layout.label_height_mm,
			"margins_mm": {
				"top": layout.margins_mm.top,
				"right": layout.margins_mm.right,
				"bottom": layout.margins_mm.bottom,
				"left": layout.margins_mm.left,
			},
			"gaps_mm": {"x": layout.gaps_mm.x, "y": layout.gaps_mm.y},
			"safe_margin_mm": layout.safe_margin_mm,
			"include_bleed": layout.include_bleed,
		},
		"qr": None if qr is None else {"mode": qr.mode, "base_url": qr.base_url},
		"fonts": {
			"regular": DEFAULT_FONT_REGULAR,
			"bold": DEFAULT_FONT_BOLD,
		},
	}
	if isinstance(geometry, SheetGeometry):
		data["layout"]["columns"] = geometry.columns
		data["layout"]["rows"] = geometry.rows
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
