"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses
import types


POINTS_PER_INCH = 72.0
MM_PER_INCH = 25.4

STRUCTURE_PLOT_PLANT = "S1"
STRUCTURE_PLOT_ROW = "S2"
STRUCTURE_PLOT_ROW_PLANT = "S3"
STRUCTURE_PLOT_ONLY = "S4"
DEFAULT_STRUCTURE_CODE = STRUCTURE_PLOT_ROW_PLANT

MODE_STANDARD = "Standard"
MODE_RESEARCH = "Research"
MODE_FULL = "Full"
MODES = (MODE_STANDARD, MODE_RESEARCH, MODE_FULL)
PLANT_TRACKING_MODES = (MODE_RESEARCH, MODE_FULL)

LABEL_TYPE_PLOT = "plot"
LABEL_TYPE_ROW = "row"
LABEL_TYPE_PLANT = "plant"
LABEL_TYPE_ALL = "all"
LABEL_TYPES = (LABEL_TYPE_PLOT, LABEL_TYPE_ROW, LABEL_TYPE_PLANT, LABEL_TYPE_ALL)

SAMPLING_PLOT_BASED = "plot_based"
SAMPLING_ROW_BASED = "row_based"

LAYOUT_SHEET = "sheet"
LAYOUT_SINGLE = "single"

QR_MODE_ID = "id"
QR_MODE_URL = "url"
DEFAULT_QR_BASE_URL = "https://fgn.app"
QR_ERROR_CORRECTION = "M"
QR_BOX_SIZE = 8

LABEL_WARNING_LIMIT = 10000
LABEL_HARD_LIMIT = 100000

BLEED_MM = 3.0
SINGLE_PAD_MM = 8.0
LINE_STEP_MM = 5.0
DIVIDER_COLOR = (0.69, 0.69, 0.69)
DIVIDER_WIDTH = 0.5
MUTED_TEXT_COLOR = (0.2, 0.2, 0.2)
QR_QUIET_ZONE_MM = 4.0
QR_MIN_MM = 38.0
QR_IDEAL_MM = 45.0
QR_HEIGHT_SHARE = 0.6
SHEET_PADDING_MM = 2.5
SHEET_QR_WIDTH_SHARE = 0.38
SHEET_MIN_TEXT_WIDTH = 10.0

DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
PLANT_ID_FONT_SIZE = 20
PLANT_ID_MIN_FONT_SIZE = 14
PLOT_ID_FONT_SIZE = 44
PLOT_ID_MIN_FONT_SIZE = 32
ROW_ID_FONT_SIZE = 34
ROW_ID_MIN_FONT_SIZE = 24
PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 10

CSV_PLANT_HEADER = ("site", "crop", "plot_no", "row_no", "plant_no", "short_id", "full_id")
CSV_ROW_HEADER = ("site", "crop", "plot_no", "row_no", "plant_count", "row_id")
CSV_PLOT_HEADER = ("site", "crop", "plot_no", "row_count", "plot_id")


@dataclasses.dataclass(frozen=True)
class Structure:
	code: str
	has_rows: bool
	has_plants: bool


STRUCTURES = types.MappingProxyType({
	STRUCTURE_PLOT_PLANT: Structure(STRUCTURE_PLOT_PLANT, has_rows=False, has_plants=True),
	STRUCTURE_PLOT_ROW: Structure(STRUCTURE_PLOT_ROW, has_rows=True, has_plants=False),
	STRUCTURE_PLOT_ROW_PLANT: Structure(STRUCTURE_PLOT_ROW_PLANT, has_rows=True, has_plants=True),
	STRUCTURE_PLOT_ONLY: Structure(STRUCTURE_PLOT_ONLY, has_rows=False, has_plants=False),
})


@dataclasses.dataclass(frozen=True)
class PaperPreset:
	name: str
	width_mm: float
	height_mm: float


PAPER_PRESETS = types.MappingProxyType({
	"A4": PaperPreset("A4", 210.0, 297.0),
	"Letter": PaperPreset("Letter", 215.9, 279.4),
	"Label3x5": PaperPreset("Label3x5", 76.2, 127.0),
})
DEFAULT_PAPER_PRESET = "A4"
SINGLE_ONLY_PRESETS = frozenset({"Label3x5"})


@dataclasses.dataclass(frozen=True)
class Margins:
	top: float
	right: float
	bottom: float
	left: float


@dataclasses.dataclass(frozen=True)
class Gaps:
	x: float
	y: float


@dataclasses.dataclass(frozen=True)
class LayoutDefaults:
	paper_preset: str
	label_width_mm: float
	label_height_mm: float
	margins_mm: Margins
	gaps_mm: Gaps
	safe_margin_mm: float
	layout_mode: str
	include_bleed: bool
	qr_mode: str
	qr_base_url: str


DEFAULT_LAYOUT = LayoutDefaults(
	paper_preset=DEFAULT_PAPER_PRESET,
	label_width_mm=60.0,
	label_height_mm=30.0,
	margins_mm=Margins(top=8.0, right=8.0, bottom=8.0, left=8.0),
	gaps_mm=Gaps(x=2.0, y=2.0),
	safe_margin_mm=6.0,
	layout_mode=LAYOUT_SHEET,
	include_bleed=False,
	qr_mode=QR_MODE_ID,
	qr_base_url=DEFAULT_QR_BASE_URL,
)


@dataclasses.dataclass(frozen=True)
class LayoutConfig:
	preset: PaperPreset
	layout_mode: str
	label_width_mm: float
	label_height_mm: float
	margins_mm: Margins
	gaps_mm: Gaps
	safe_margin_mm: float
	include_bleed: bool


@dataclasses.dataclass(frozen=True)
class QrConfig:
	mode: str
	base_url: str


@dataclasses.dataclass(frozen=True)
class SheetGeometry:
	page_width: float
	page_height: float
	label_width: float
	label_height: float
	margin_left: float
	margin_top: float
	gap_x: float
	gap_y: float
	columns: int
	rows: int

	@property
	def labels_per_page(self) -> int:
		return self.columns * self.rows


@dataclasses.dataclass(frozen=True)
class SingleGeometry:
	page_width: float
	page_height: float
	bleed_mm: float
	safe_margin_mm: float


@dataclasses.dataclass
class ExportResult:
	label_type: str
	layout_mode: str
	records: int
	pages: int
	labels_per_page: int
	counts_by_type: dict[str, int]


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimeters to points.

	Args:
		value: Millimeter value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_INCH / MM_PER_INCH


#============================================
def get_structure(code: str | None) -> Structure:
	"""
	Look up a tracking structure, falling back to S3 for unknown codes.

	Args:
		code: Structure code such as "S1".

	Returns:
		Structure entry.
	"""
	if code is not None:
		structure = STRUCTURES.get(str(code).strip().upper())
		if structure is not None:
			return structure
	return STRUCTURES[DEFAULT_STRUCTURE_CODE]


#============================================
def has_plant_tracking(structure_code: str, mode: str) -> bool:
	"""
	Check whether plant-level labels are enabled.

	Args:
		structure_code: Structure code.
		mode: Tracking mode.

	Returns:
		True when the structure tracks plants and the mode is Research or Full.
	"""
	structure = get_structure(structure_code)
	if not structure.has_plants:
		return False
	return mode in PLANT_TRACKING_MODES
