"""
Request payload canonicalization, plot tree expansion and validation.
"""

# Standard Library
import dataclasses
import math

# local repo modules
import field_label_generator as flg
import field_label_generator.config
import field_label_generator.identifiers


Structure = flg.config.Structure
get_structure = flg.config.get_structure
has_plant_tracking = flg.config.has_plant_tracking

DEFAULT_STRUCTURE_CODE = flg.config.DEFAULT_STRUCTURE_CODE
MODES = flg.config.MODES
MODE_STANDARD = flg.config.MODE_STANDARD
PLANT_TRACKING_MODES = flg.config.PLANT_TRACKING_MODES
LABEL_WARNING_LIMIT = flg.config.LABEL_WARNING_LIMIT
LABEL_HARD_LIMIT = flg.config.LABEL_HARD_LIMIT

# canonical key -> accepted spellings, first non-null wins
REQUEST_ALIASES = {
	"site_name": ("site_name", "siteName"),
	"crop_type": ("crop_type", "cropType"),
	"batch_name": ("batch_name", "batchName"),
	"start_date": ("start_date", "startDate"),
	"structure_code": ("structure_code", "structureCode"),
	"mode": ("mode",),
	"plots": ("plots",),
	"plots_count": ("plots_count", "plotsCount"),
	"rows_per_plot": ("rows_per_plot", "rowsPerPlot"),
	"plants_per_row": ("plants_per_row", "plantsPerRow"),
	"plants_per_plot": ("plants_per_plot", "plantsPerPlot", "plantCountPerPlot"),
	"label_type": ("label_type", "labelType"),
	"export_plot": ("export_plot", "exportPlot"),
	"tracked_plants": ("tracked_plants", "trackedPlants"),
	"sampling_plan_id": ("sampling_plan_id", "samplingPlanId"),
	"sampling_plan": ("sampling_plan", "samplingPlan", "sampling"),
	"paper_preset": ("paper_preset", "paperPreset"),
	"layout_mode": ("layout_mode", "layoutMode"),
	"label_width_mm": ("label_width_mm", "labelWidthMm"),
	"label_height_mm": ("label_height_mm", "labelHeightMm"),
	"margins_mm": ("margins_mm", "marginsMm"),
	"gaps_mm": ("gaps_mm", "gapsMm"),
	"safe_margin_mm": ("safe_margin_mm", "safeMarginMm"),
	"include_bleed": ("include_bleed", "includeBleed"),
	"include_qr": ("include_qr", "includeQr"),
	"qr_mode": ("qr_mode", "qrMode"),
	"qr_base_url": ("qr_base_url", "qrBaseUrl"),
}
PLOT_ALIASES = {
	"plot_no": ("plot_no", "plotNo", "plot"),
	"plant_count": ("plant_count", "plantCount", "plants"),
	"rows": ("rows",),
}
ROW_ALIASES = {
	"row_no": ("row_no", "rowNo", "row"),
	"plant_count": ("plant_count", "plantCount", "plants"),
}
COORDINATE_ALIASES = {
	"plot_no": ("plot_no", "plotNo", "plot"),
	"row_no": ("row_no", "rowNo", "row"),
	"plant_no": ("plant_no", "plantNo", "plant"),
}
SAMPLING_ALIASES = {
	"sampling_type": ("sampling_type", "samplingType"),
	"seed": ("seed",),
	"samples_per_plot": ("samples_per_plot", "samplesPerPlot"),
	"samples_per_row": ("samples_per_row", "samplesPerRow"),
	"plots": ("plots",),
	"rows": ("rows",),
}


@dataclasses.dataclass(frozen=True)
class Row:
	row_no: int
	plant_count: int | None


@dataclasses.dataclass(frozen=True)
class Plot:
	plot_no: int
	rows: tuple[Row, ...] = ()
	plant_count: int | None = None


@dataclasses.dataclass(frozen=True)
class PlantCoordinate:
	plot_no: int | None
	row_no: int | None
	plant_no: int | None


@dataclasses.dataclass
class PayloadValues:
	site_name: str
	crop_type: str
	batch_name: str
	start_date: str
	structure_code: str
	mode: str
	plots: list[Plot]
	total_plots: int
	total_rows: int
	total_plants: int
	total_labels: int
	labels: dict[str, int]
	# plots and rows as given; sampling draws in this order
	input_plots: list[Plot] = dataclasses.field(default_factory=list)

	@property
	def structure(self) -> Structure:
		return get_structure(self.structure_code)


@dataclasses.dataclass
class ValidationResult:
	ok: bool
	errors: list[str]
	warnings: list[str]
	values: PayloadValues


#============================================
def canonicalize_keys(mapping: dict | None, aliases: dict[str, tuple[str, ...]]) -> dict:
	"""
	Map aliased keys onto canonical names.

	Args:
		mapping: Raw input mapping.
		aliases: Canonical key to accepted spellings.

	Returns:
		New dict holding only canonical keys that had a value.
	"""
	result: dict = {}
	if not isinstance(mapping, dict):
		return result
	for canonical, spellings in aliases.items():
		for spelling in spellings:
			value = mapping.get(spelling)
			if value is not None:
				result[canonical] = value
				break
	return result


#============================================
def canonicalize_request(body: dict | None) -> dict:
	"""
	Canonicalize a request body, including nested plots, rows and plant lists.

	Args:
		body: Raw request body.

	Returns:
		Canonical request dict.
	"""
	request = canonicalize_keys(body, REQUEST_ALIASES)
	plots = request.get("plots")
	if isinstance(plots, list):
		canonical_plots = []
		for plot in plots:
			canonical_plot = canonicalize_keys(plot, PLOT_ALIASES)
			rows = canonical_plot.get("rows")
			if isinstance(rows, list):
				canonical_plot["rows"] = [canonicalize_keys(row, ROW_ALIASES) for row in rows]
			canonical_plots.append(canonical_plot)
		request["plots"] = canonical_plots
	elif plots is not None and "plots_count" not in request:
		# compact form may send the plot count under "plots"
		request["plots_count"] = plots
		del request["plots"]
	tracked = request.get("tracked_plants")
	if isinstance(tracked, list):
		request["tracked_plants"] = [canonicalize_coordinate(item) for item in tracked]
	if "sampling_plan" in request:
		request["sampling_plan"] = canonicalize_keys(request["sampling_plan"], SAMPLING_ALIASES)
	return request


#============================================
def canonicalize_coordinate(item) -> PlantCoordinate:
	"""
	Convert a raw tracked-plant entry into a PlantCoordinate.

	Args:
		item: Dict with aliased plot/row/plant keys, or a PlantCoordinate.

	Returns:
		PlantCoordinate with invalid numbers set to None.
	"""
	if isinstance(item, PlantCoordinate):
		return item
	values = canonicalize_keys(item, COORDINATE_ALIASES)
	return PlantCoordinate(
		plot_no=parse_positive_int(values.get("plot_no")),
		row_no=parse_positive_int(values.get("row_no")),
		plant_no=parse_positive_int(values.get("plant_no")),
	)


#============================================
def parse_positive_int(value) -> int | None:
	"""
	Parse a positive integer, returning None for anything else.

	Args:
		value: Raw value (int, float or string).

	Returns:
		Positive int or None.
	"""
	if value is None or isinstance(value, bool):
		return None
	if isinstance(value, int):
		number = value
	else:
		try:
			parsed = float(str(value).strip())
		except ValueError:
			return None
		if not math.isfinite(parsed) or not parsed.is_integer():
			return None
		number = int(parsed)
	if number <= 0:
		return None
	return number


#============================================
def number_or_default(value, fallback: float) -> float:
	"""
	Parse a finite number or return the fallback.

	Args:
		value: Raw value.
		fallback: Value used when parsing fails.

	Returns:
		Float value.
	"""
	if value is None or isinstance(value, bool):
		return fallback
	try:
		parsed = float(str(value).strip())
	except ValueError:
		return fallback
	if not math.isfinite(parsed):
		return fallback
	return parsed


#============================================
def resolve_mode(value) -> str:
	"""
	Match a mode name case-insensitively; unknown names are returned as given.
	"""
	text = str(value or MODE_STANDARD).strip()
	for mode in MODES:
		if mode.lower() == text.lower():
			return mode
	return text


#============================================
def parse_plots(request: dict, structure: Structure) -> list[Plot]:
	"""
	Build the explicit plot tree from a canonical request.

	Args:
		request: Canonical request dict.
		structure: Resolved tracking structure.

	Returns:
		List of Plot entries in input order. Empty when nothing usable was given.
	"""
	raw_plots = request.get("plots")
	if isinstance(raw_plots, list) and raw_plots:
		plots: list[Plot] = []
		for plot_index, raw_plot in enumerate(raw_plots):
			plot_no = parse_positive_int(raw_plot.get("plot_no")) or plot_index + 1
			if structure.has_plants and not structure.has_rows:
				plant_count = parse_positive_int(raw_plot.get("plant_count"))
				plots.append(Plot(plot_no=plot_no, plant_count=plant_count))
				continue
			if not structure.has_rows:
				plots.append(Plot(plot_no=plot_no))
				continue
			raw_rows = raw_plot.get("rows")
			if not isinstance(raw_rows, list):
				raw_rows = []
			rows = []
			for row_index, raw_row in enumerate(raw_rows):
				row_no = parse_positive_int(raw_row.get("row_no")) or row_index + 1
				plant_count = parse_positive_int(raw_row.get("plant_count"))
				rows.append(Row(row_no=row_no, plant_count=plant_count))
			plots.append(Plot(plot_no=plot_no, rows=tuple(rows)))
		return plots

	plot_count = parse_positive_int(request.get("plots_count"))
	if not plot_count:
		return []
	rows_per_plot = parse_positive_int(request.get("rows_per_plot"))
	plants_per_row = parse_positive_int(request.get("plants_per_row"))
	plants_per_plot = parse_positive_int(request.get("plants_per_plot"))

	if structure.has_plants and not structure.has_rows:
		if not plants_per_plot:
			return []
		return [Plot(plot_no=plot_no, plant_count=plants_per_plot) for plot_no in range(1, plot_count + 1)]
	if not structure.has_rows:
		return [Plot(plot_no=plot_no) for plot_no in range(1, plot_count + 1)]
	if not rows_per_plot or not plants_per_row:
		return []
	plots = []
	for plot_no in range(1, plot_count + 1):
		rows = tuple(Row(row_no=row_no, plant_count=plants_per_row) for row_no in range(1, rows_per_plot + 1))
		plots.append(Plot(plot_no=plot_no, rows=rows))
	return plots


#============================================
def validate_payload(body: dict | None) -> ValidationResult:
	"""
	Validate a label request and compute aggregate counts.

	Every rule runs; errors accumulate into one list.

	Args:
		body: Raw or canonical request body.

	Returns:
		ValidationResult.
	"""
	request = canonicalize_request(body)
	errors: list[str] = []
	warnings: list[str] = []

	site_name = str(request.get("site_name") or "").strip()
	crop_type = str(request.get("crop_type") or "").strip()
	batch_name = str(request.get("batch_name") or "").strip()
	start_date = str(request.get("start_date") or "").strip()
	mode = resolve_mode(request.get("mode"))
	structure = get_structure(request.get("structure_code") or DEFAULT_STRUCTURE_CODE)

	if not site_name:
		errors.append("Site name is required.")
	elif not flg.identifiers.normalize_code(site_name):
		errors.append("Site name must contain at least one letter or digit.")
	if not crop_type:
		errors.append("Crop type is required.")
	elif not flg.identifiers.normalize_code(crop_type):
		errors.append("Crop type must contain at least one letter or digit.")

	plots = parse_plots(request, structure)
	if not plots:
		errors.append("At least one plot is required.")
	if mode not in MODES:
		errors.append("Tracking mode is invalid.")
	if mode in PLANT_TRACKING_MODES and not structure.has_plants:
		errors.append("Selected tracking mode requires plant tracking.")

	seen_plots: set[int] = set()
	total_rows = 0
	total_plants = 0
	for plot in plots:
		if plot.plot_no in seen_plots:
			errors.append(f"Plot {plot.plot_no} is listed more than once.")
		seen_plots.add(plot.plot_no)
		if structure.has_rows:
			if not plot.rows:
				errors.append(f"Plot {plot.plot_no} must have at least 1 row.")
				continue
			total_rows += len(plot.rows)
			seen_rows: set[int] = set()
			for row in plot.rows:
				if row.row_no in seen_rows:
					errors.append(f"Plot {plot.plot_no} Row {row.row_no} is listed more than once.")
				seen_rows.add(row.row_no)
				if not row.plant_count:
					errors.append(f"Plot {plot.plot_no} Row {row.row_no} must have at least 1 plant.")
				else:
					total_plants += row.plant_count
			continue
		if structure.has_plants:
			if not plot.plant_count:
				errors.append(f"Plot {plot.plot_no} must have at least 1 plant.")
			else:
				total_plants += plot.plant_count

	total_labels = total_plants
	if total_labels > LABEL_WARNING_LIMIT:
		warnings.append("Total labels exceed 10,000. Consider exporting plot-wise.")
	if total_labels > LABEL_HARD_LIMIT:
		errors.append("Total labels exceed the safe limit of 100,000.")

	sorted_plots = []
	for plot in sorted(plots, key=lambda item: item.plot_no):
		rows = tuple(sorted(plot.rows, key=lambda item: item.row_no))
		sorted_plots.append(dataclasses.replace(plot, rows=rows))

	plant_labels = 0
	if has_plant_tracking(structure.code, mode):
		plant_labels = total_plants
	values = PayloadValues(
		site_name=site_name,
		crop_type=crop_type,
		batch_name=batch_name,
		start_date=start_date,
		structure_code=structure.code,
		mode=mode,
		plots=sorted_plots,
		total_plots=len(plots),
		total_rows=total_rows,
		total_plants=total_plants,
		total_labels=total_labels,
		labels={
			"plot": len(plots),
			"row": total_rows if structure.has_rows else 0,
			"plant": plant_labels,
		},
		input_plots=list(plots),
	)
	return ValidationResult(ok=not errors, errors=errors, warnings=warnings, values=values)
