"""
Request-level entry points: validation, CSV and PDF export, sampling plans.
"""

# Standard Library
import dataclasses
import datetime
import pathlib

# local repo modules
import field_label_generator as flg
import field_label_generator.config
import field_label_generator.csv_export
import field_label_generator.errors
import field_label_generator.labels
import field_label_generator.layout
import field_label_generator.payload
import field_label_generator.plan_store
import field_label_generator.render
import field_label_generator.sampling


PayloadError = flg.errors.PayloadError
PayloadValues = flg.payload.PayloadValues
ValidationResult = flg.payload.ValidationResult
ExportResult = flg.config.ExportResult
PlanStore = flg.plan_store.PlanStore
has_plant_tracking = flg.config.has_plant_tracking
parse_positive_int = flg.payload.parse_positive_int

DEFAULT_LAYOUT = flg.config.DEFAULT_LAYOUT
PAPER_PRESETS = flg.config.PAPER_PRESETS
LABEL_TYPES = flg.config.LABEL_TYPES
LABEL_TYPE_PLOT = flg.config.LABEL_TYPE_PLOT
LABEL_TYPE_ROW = flg.config.LABEL_TYPE_ROW
LABEL_TYPE_PLANT = flg.config.LABEL_TYPE_PLANT
LABEL_TYPE_ALL = flg.config.LABEL_TYPE_ALL
LAYOUT_SHEET = flg.config.LAYOUT_SHEET
MODE_RESEARCH = flg.config.MODE_RESEARCH


@dataclasses.dataclass
class ExportRequest:
	values: PayloadValues
	warnings: list[str]
	label_type: str
	export_plot: int | None
	tracked_plants: list | None
	sampling_plan_id: str | None


#============================================
def validate(payload: dict | None) -> ValidationResult:
	"""
	Validate a label request without raising.

	Args:
		payload: Raw request body.

	Returns:
		ValidationResult with errors, warnings and computed values.
	"""
	return flg.payload.validate_payload(payload)


#============================================
def require_valid(payload: dict | None) -> ValidationResult:
	result = validate(payload)
	if not result.ok:
		raise PayloadError(result.errors, result.warnings)
	return result


#============================================
def resolve_export_plot(value) -> int | None:
	"""
	Parse the plot filter; "all" or empty means every plot.
	"""
	if value is None:
		return None
	if isinstance(value, str) and value.strip().lower() in ("", LABEL_TYPE_ALL):
		return None
	return parse_positive_int(value)


#============================================
def resolve_tracked_plants(request: dict, store: PlanStore | None) -> tuple[list | None, str | None]:
	"""
	Find the tracked plant list from the request or from a stored plan.

	An inline tracked_plants list wins over sampling_plan_id.

	Args:
		request: Canonical request dict.
		store: Plan store, needed only when a plan id is given.

	Returns:
		Tuple of (tracked_plants or None, sampling_plan_id or None).
	"""
	tracked = request.get("tracked_plants")
	if isinstance(tracked, list) and tracked:
		return (tracked, None)
	plan_id = request.get("sampling_plan_id")
	if not plan_id:
		return (None, None)
	plan_id = str(plan_id).strip()
	if store is None:
		raise PayloadError(f"Sampling plan {plan_id} cannot be loaded without a plan store.")
	record = store.find(plan_id)
	if record is None:
		raise PayloadError(f"Sampling plan {plan_id} was not found.")
	coordinates = [flg.payload.canonicalize_coordinate(item) for item in record.get("tracked_plants") or []]
	return (coordinates, plan_id)


#============================================
def prepare_export(payload: dict | None, store: PlanStore | None = None) -> ExportRequest:
	"""
	Validate a request and apply the export gating rules.

	Args:
		payload: Raw request body.
		store: Plan store for sampling_plan_id lookups.

	Returns:
		ExportRequest.
	"""
	result = require_valid(payload)
	values = result.values
	warnings = list(result.warnings)
	request = flg.payload.canonicalize_request(payload)

	label_type = str(request.get("label_type") or LABEL_TYPE_PLANT).strip().lower()
	if label_type not in LABEL_TYPES:
		raise PayloadError(f"Label type is invalid: {label_type}.", warnings)

	export_plot = resolve_export_plot(request.get("export_plot"))
	plot_numbers = {plot.plot_no for plot in values.plots}
	if export_plot is not None and export_plot not in plot_numbers:
		raise PayloadError("Selected plot is outside the available range.", warnings)

	if label_type == LABEL_TYPE_PLANT and not has_plant_tracking(values.structure_code, values.mode):
		raise PayloadError("Plant labels are not enabled for this structure/mode.", warnings)
	if label_type == LABEL_TYPE_ROW and not values.structure.has_rows:
		raise PayloadError("Row labels are not available for this structure.", warnings)

	tracked_plants, plan_id = resolve_tracked_plants(request, store)
	if label_type == LABEL_TYPE_PLANT and values.mode == MODE_RESEARCH and not tracked_plants:
		raise PayloadError("Generate a sampling plan before exporting plant labels.", warnings)

	return ExportRequest(
		values=values,
		warnings=warnings,
		label_type=label_type,
		export_plot=export_plot,
		tracked_plants=tracked_plants,
		sampling_plan_id=plan_id,
	)


#============================================
def export_csv(payload: dict | None, store: PlanStore | None = None) -> str:
	"""
	Export one label type as CSV text.

	Args:
		payload: Raw request body.
		store: Plan store for sampling_plan_id lookups.

	Returns:
		CSV text.
	"""
	request = flg.payload.canonicalize_request(payload)
	label_type = str(request.get("label_type") or LABEL_TYPE_PLANT).strip().lower()
	if label_type == LABEL_TYPE_ALL:
		require_valid(payload)
		raise PayloadError("CSV export does not support combined labels. Export each label type separately.")
	export = prepare_export(payload, store)
	return flg.csv_export.build_csv(
		export.label_type,
		export.values,
		export.export_plot,
		export.tracked_plants,
	)


#============================================
def section_types(export: ExportRequest) -> list[str]:
	"""
	List the label types one PDF export renders, in order.

	Combined exports skip types the structure or mode does not enable. In
	Research mode the plant section needs a sampled subset.
	"""
	if export.label_type != LABEL_TYPE_ALL:
		return [export.label_type]
	values = export.values
	label_types = [LABEL_TYPE_PLOT]
	if values.structure.has_rows:
		label_types.append(LABEL_TYPE_ROW)
	if has_plant_tracking(values.structure_code, values.mode):
		if values.mode != MODE_RESEARCH or export.tracked_plants:
			label_types.append(LABEL_TYPE_PLANT)
	return label_types


#============================================
def count_section(export: ExportRequest, label_type: str) -> int:
	"""
	Expected record count for progress output.
	"""
	values = export.values
	if label_type == LABEL_TYPE_PLANT and export.tracked_plants:
		return sum(1 for _ in flg.labels.iterate_plants(values, export.export_plot, export.tracked_plants))
	if export.export_plot is None:
		return values.labels.get(label_type, 0)
	return sum(1 for _ in flg.labels.iterate_records(label_type, values, export.export_plot))


#============================================
def export_pdf(
	payload: dict | None,
	sink,
	store: PlanStore | None = None,
	generated: datetime.date | None = None,
	manifest_path: pathlib.Path | None = None,
	verbose: bool = False,
) -> ExportResult:
	"""
	Export labels as a PDF.

	Layout errors are raised before anything is written to the sink.

	Args:
		payload: Raw request body.
		sink: Output path or binary file-like object.
		store: Plan store for sampling_plan_id lookups.
		generated: Date printed on labels; today when None.
		manifest_path: Optional manifest JSON output path.
		verbose: Print progress.

	Returns:
		ExportResult.
	"""
	export = prepare_export(payload, store)
	request = flg.payload.canonicalize_request(payload)
	layout = flg.layout.resolve_layout(request, DEFAULT_LAYOUT)
	qr = flg.layout.resolve_qr(request, DEFAULT_LAYOUT)
	flg.layout.check_layout_for_label_type(layout, export.label_type)
	if layout.layout_mode == LAYOUT_SHEET:
		geometry = flg.layout.compute_sheet_geometry(layout)
	else:
		geometry = flg.layout.compute_single_geometry(layout)

	values = export.values
	label_types = section_types(export)
	total = sum(count_section(export, label_type) for label_type in label_types)
	if verbose:
		print(f"Label type: {export.label_type}")
		print(f"Layout: {layout.preset.name} {layout.layout_mode}")
		print(f"Labels to render: {total}")

	if layout.layout_mode == LAYOUT_SHEET:
		sheet_qr = qr if request.get("include_qr") else None
		records = flg.labels.iterate_plants(values, export.export_plot, export.tracked_plants)
		result = flg.render.render_sheet_pdf(sink, records, geometry, sheet_qr, generated, total, verbose)
		manifest_qr = sheet_qr
	else:
		sections = [
			(
				label_type,
				flg.labels.iterate_records(label_type, values, export.export_plot, export.tracked_plants),
			)
			for label_type in label_types
		]
		result = flg.render.render_single_pdf(
			sink,
			sections,
			geometry,
			qr,
			export.label_type,
			generated,
			total,
			verbose,
		)
		manifest_qr = qr

	if manifest_path is not None:
		flg.render.write_manifest(
			pathlib.Path(manifest_path),
			values,
			layout,
			manifest_qr,
			result,
			geometry,
			export.sampling_plan_id,
		)
	return result


#============================================
def create_sampling_plan(payload: dict | None, store: PlanStore) -> dict:
	"""
	Draw a sampling plan and persist it.

	Args:
		payload: Raw request body with a sampling_plan section.
		store: Plan store.

	Returns:
		Dict with sampling_plan_id, seed, tracked_plants and total_samples.
	"""
	result = require_valid(payload)
	values = result.values
	if values.mode != MODE_RESEARCH:
		raise PayloadError("Sampling is only available in Research mode.", result.warnings)
	request = flg.payload.canonicalize_request(payload)
	config = request.get("sampling_plan") or {}
	plan = flg.sampling.build_sampling_plan(values, config)
	record = store.save(values, plan, config)
	return {
		"sampling_plan_id": record["id"],
		"seed": plan.seed,
		"tracked_plants": record["tracked_plants"],
		"total_samples": len(plan.tracked_plants),
	}


#============================================
def list_presets() -> dict:
	"""
	Describe the paper presets and the default layout.

	Returns:
		JSON-ready dict with paper_presets and defaults.
	"""
	return {
		"paper_presets": {name: dataclasses.asdict(preset) for name, preset in PAPER_PRESETS.items()},
		"defaults": dataclasses.asdict(DEFAULT_LAYOUT),
	}
