"""
Print geometry: layout resolution, sheet grids and single-label pages.
"""

# Standard Library
import math

# local repo modules
import field_label_generator as flg
import field_label_generator.config
import field_label_generator.errors
import field_label_generator.payload


LayoutConfig = flg.config.LayoutConfig
LayoutDefaults = flg.config.LayoutDefaults
QrConfig = flg.config.QrConfig
Margins = flg.config.Margins
Gaps = flg.config.Gaps
SheetGeometry = flg.config.SheetGeometry
SingleGeometry = flg.config.SingleGeometry
GeometryError = flg.errors.GeometryError
mm_to_points = flg.config.mm_to_points
number_or_default = flg.payload.number_or_default

DEFAULT_LAYOUT = flg.config.DEFAULT_LAYOUT
PAPER_PRESETS = flg.config.PAPER_PRESETS
SINGLE_ONLY_PRESETS = flg.config.SINGLE_ONLY_PRESETS
LAYOUT_SHEET = flg.config.LAYOUT_SHEET
LAYOUT_SINGLE = flg.config.LAYOUT_SINGLE
LABEL_TYPE_PLANT = flg.config.LABEL_TYPE_PLANT
QR_MODE_URL = flg.config.QR_MODE_URL
BLEED_MM = flg.config.BLEED_MM

# keeps exact fits from losing a column to float rounding
FIT_EPSILON = 1e-9


#============================================
def resolve_layout(request: dict, defaults: LayoutDefaults = DEFAULT_LAYOUT) -> LayoutConfig:
	"""
	Build a layout config from a canonical request and a defaults table.

	Args:
		request: Canonical request dict.
		defaults: Immutable defaults table.

	Returns:
		LayoutConfig.
	"""
	preset_name = request.get("paper_preset")
	preset = PAPER_PRESETS.get(preset_name) or PAPER_PRESETS[defaults.paper_preset]
	layout_mode = str(request.get("layout_mode") or defaults.layout_mode).strip().lower()
	if preset.name in SINGLE_ONLY_PRESETS:
		layout_mode = LAYOUT_SINGLE

	raw_margins = request.get("margins_mm")
	if not isinstance(raw_margins, dict):
		raw_margins = {}
	margins = Margins(
		top=number_or_default(raw_margins.get("top"), defaults.margins_mm.top),
		right=number_or_default(raw_margins.get("right"), defaults.margins_mm.right),
		bottom=number_or_default(raw_margins.get("bottom"), defaults.margins_mm.bottom),
		left=number_or_default(raw_margins.get("left"), defaults.margins_mm.left),
	)
	raw_gaps = request.get("gaps_mm")
	if not isinstance(raw_gaps, dict):
		raw_gaps = {}
	gaps = Gaps(
		x=number_or_default(raw_gaps.get("x"), defaults.gaps_mm.x),
		y=number_or_default(raw_gaps.get("y"), defaults.gaps_mm.y),
	)
	return LayoutConfig(
		preset=preset,
		layout_mode=layout_mode,
		label_width_mm=number_or_default(request.get("label_width_mm"), defaults.label_width_mm),
		label_height_mm=number_or_default(request.get("label_height_mm"), defaults.label_height_mm),
		margins_mm=margins,
		gaps_mm=gaps,
		safe_margin_mm=number_or_default(request.get("safe_margin_mm"), defaults.safe_margin_mm),
		include_bleed=bool(request.get("include_bleed", defaults.include_bleed)),
	)


#============================================
def resolve_qr(request: dict, defaults: LayoutDefaults = DEFAULT_LAYOUT) -> QrConfig:
	"""
	Build the QR payload config from a canonical request.
	"""
	mode = str(request.get("qr_mode") or defaults.qr_mode).strip().lower()
	base_url = str(request.get("qr_base_url") or defaults.qr_base_url).strip().rstrip("/")
	return QrConfig(mode=mode, base_url=base_url)


#============================================
def build_qr_payload(full_id: str, qr: QrConfig) -> str:
	"""
	Build the string a QR code encodes.

	Args:
		full_id: Full label identifier.
		qr: QR config.

	Returns:
		Either the bare identifier or "{base_url}/farm/{full_id}".
	"""
	if qr.mode == QR_MODE_URL:
		return f"{qr.base_url}/farm/{full_id}"
	return full_id


#============================================
def check_layout_for_label_type(layout: LayoutConfig, label_type: str) -> None:
	"""
	Reject sheet layout for anything but plant labels.
	"""
	if layout.layout_mode not in (LAYOUT_SHEET, LAYOUT_SINGLE):
		raise GeometryError(f"Layout mode is invalid: {layout.layout_mode}.")
	if layout.layout_mode == LAYOUT_SHEET and label_type != LABEL_TYPE_PLANT:
		raise GeometryError("Sheet mode is only supported for plant labels.")


#============================================
def compute_grid_counts(
	usable_width: float,
	usable_height: float,
	cell_width: float,
	cell_height: float,
	gap_x: float,
	gap_y: float,
) -> tuple[int, int]:
	"""
	Count how many cells fit across and down a usable area.

	Args:
		usable_width: Page width minus left and right margins.
		usable_height: Page height minus top and bottom margins.
		cell_width: Label width.
		cell_height: Label height.
		gap_x: Horizontal gap between cells.
		gap_y: Vertical gap between cells.

	Returns:
		Tuple of (columns, rows).
	"""
	columns = math.floor((usable_width + gap_x) / (cell_width + gap_x) + FIT_EPSILON)
	rows = math.floor((usable_height + gap_y) / (cell_height + gap_y) + FIT_EPSILON)
	return (columns, rows)


#============================================
def compute_sheet_geometry(layout: LayoutConfig) -> SheetGeometry:
	"""
	Compute the grid for multi-label sheets.

	Args:
		layout: Layout config.

	Returns:
		SheetGeometry in points.
	"""
	if layout.label_width_mm <= 0 or layout.label_height_mm <= 0:
		raise GeometryError("Label width and height must be greater than 0.")
	margins = layout.margins_mm
	if min(margins.top, margins.right, margins.bottom, margins.left) < 0:
		raise GeometryError("Margins cannot be negative.")
	if min(layout.gaps_mm.x, layout.gaps_mm.y) < 0:
		raise GeometryError("Gaps cannot be negative.")

	usable_width = layout.preset.width_mm - margins.left - margins.right
	usable_height = layout.preset.height_mm - margins.top - margins.bottom
	columns, rows = compute_grid_counts(
		usable_width,
		usable_height,
		layout.label_width_mm,
		layout.label_height_mm,
		layout.gaps_mm.x,
		layout.gaps_mm.y,
	)
	if columns < 1 or rows < 1:
		raise GeometryError("Label size or margins are too large for the selected paper size.")
	return SheetGeometry(
		page_width=mm_to_points(layout.preset.width_mm),
		page_height=mm_to_points(layout.preset.height_mm),
		label_width=mm_to_points(layout.label_width_mm),
		label_height=mm_to_points(layout.label_height_mm),
		margin_left=mm_to_points(margins.left),
		margin_top=mm_to_points(margins.top),
		gap_x=mm_to_points(layout.gaps_mm.x),
		gap_y=mm_to_points(layout.gaps_mm.y),
		columns=columns,
		rows=rows,
	)


#============================================
def compute_single_geometry(layout: LayoutConfig) -> SingleGeometry:
	"""
	Compute the page for one-label-per-page output.

	The label is the paper preset itself; bleed grows the page on every side.

	Args:
		layout: Layout config.

	Returns:
		SingleGeometry in points.
	"""
	if layout.safe_margin_mm < 0:
		raise GeometryError("Safe margin cannot be negative.")
	preset = layout.preset
	if layout.safe_margin_mm * 2 >= preset.width_mm or layout.safe_margin_mm * 2 >= preset.height_mm:
		raise GeometryError("Safe margin is too large for the label size.")
	bleed_mm = BLEED_MM if layout.include_bleed else 0.0
	return SingleGeometry(
		page_width=mm_to_points(preset.width_mm + bleed_mm * 2),
		page_height=mm_to_points(preset.height_mm + bleed_mm * 2),
		bleed_mm=bleed_mm,
		safe_margin_mm=layout.safe_margin_mm,
	)


#============================================
def compute_cell_origin(geometry: SheetGeometry, index: int) -> tuple[int, float, float]:
	"""
	Locate a label slot on the sheet.

	Labels fill each page row by row, left to right.

	Args:
		geometry: Sheet geometry.
		index: Zero-based label index across the whole export.

	Returns:
		Tuple of (page_index, cell_x, cell_y) with the PDF origin at bottom-left.
	"""
	labels_per_page = geometry.labels_per_page
	page_index = index // labels_per_page
	slot = index % labels_per_page
	row = slot // geometry.columns
	col = slot % geometry.columns
	cell_x = geometry.margin_left + col * (geometry.label_width + geometry.gap_x)
	cell_y = geometry.page_height - geometry.margin_top - geometry.label_height - row * (
		geometry.label_height + geometry.gap_y
	)
	return (page_index, cell_x, cell_y)


#============================================
def count_sheet_pages(geometry: SheetGeometry, labels: int) -> int:
	if labels <= 0:
		return 0
	return (labels + geometry.labels_per_page - 1) // geometry.labels_per_page
