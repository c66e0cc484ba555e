"""
CLI entry points for field label generation.
"""

# Standard Library
import argparse
import json
import pathlib
import sys
import time

# local repo modules
import field_label_generator as flg
import field_label_generator.errors
import field_label_generator.plan_store
import field_label_generator.service


LabelError = flg.errors.LabelError
PlanStore = flg.plan_store.PlanStore

DEFAULT_PLAN_STORE = "data/sampling-plans.json"


#============================================
def load_payload(path: str) -> dict:
	"""
	Read a request payload from a JSON file.

	Args:
		path: JSON file path, or "-" for stdin.

	Returns:
		Payload dict.
	"""
	if path == "-":
		payload = json.load(sys.stdin)
	else:
		with open(path, "r", encoding="utf-8") as handle:
			payload = json.load(handle)
	if not isinstance(payload, dict):
		raise flg.errors.PayloadError("Payload must be a JSON object.")
	return payload


#============================================
def apply_overrides(payload: dict, args: argparse.Namespace) -> dict:
	"""
	Layer command line options over the payload file.

	Args:
		payload: Payload dict.
		args: Parsed argparse namespace.

	Returns:
		New payload dict.
	"""
	payload = dict(payload)
	overrides = {
		"label_type": getattr(args, "label_type", None),
		"export_plot": getattr(args, "export_plot", None),
		"sampling_plan_id": getattr(args, "sampling_plan_id", None),
		"paper_preset": getattr(args, "paper_preset", None),
		"layout_mode": getattr(args, "layout_mode", None),
		"qr_mode": getattr(args, "qr_mode", None),
	}
	for key, value in overrides.items():
		if value is not None:
			payload[key] = value
	include_bleed = getattr(args, "include_bleed", None)
	if include_bleed is not None:
		payload["include_bleed"] = include_bleed
	include_qr = getattr(args, "include_qr", None)
	if include_qr is not None:
		payload["include_qr"] = include_qr
	return payload


#============================================
def print_messages(errors: list[str], warnings: list[str]) -> None:
	for line in errors:
		print(f"Error: {line}")
	for line in warnings:
		print(f"Warning: {line}")


#============================================
def add_export_options(parser: argparse.ArgumentParser) -> None:
	"""
	Add the options shared by csv and pdf.
	"""
	select_group = parser.add_argument_group("Selection")
	select_group.add_argument(
		"-t",
		"--label-type",
		dest="label_type",
		choices=("plot", "row", "plant", "all"),
		default=None,
		help="Label type to export.",
	)
	select_group.add_argument("-x", "--export-plot", dest="export_plot", default=None, help="Plot number, or all.")
	select_group.add_argument("-s", "--sampling-plan", dest="sampling_plan_id", default=None, help="Stored sampling plan id.")
	select_group.add_argument("--plans", dest="plans_path", default=DEFAULT_PLAN_STORE, help="Sampling plan store JSON path.")


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list; sys.argv when None.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Generate plot, row and plant labels for field trials.")
	subparsers = parser.add_subparsers(dest="command", required=True)

	validate_parser = subparsers.add_parser("validate", help="Validate a payload and print label counts.")
	validate_parser.add_argument("payload_path", help="Payload JSON path, or - for stdin.")

	csv_parser = subparsers.add_parser("csv", help="Export labels as CSV.")
	csv_parser.add_argument("payload_path", help="Payload JSON path, or - for stdin.")
	csv_parser.add_argument("-o", "--output", dest="output_path", default=None, help="Output CSV path; stdout when omitted.")
	add_export_options(csv_parser)

	pdf_parser = subparsers.add_parser("pdf", help="Export labels as PDF.")
	pdf_parser.add_argument("payload_path", help="Payload JSON path, or - for stdin.")
	output_group = pdf_parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", required=True, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")
	add_export_options(pdf_parser)
	layout_group = pdf_parser.add_argument_group("Layout")
	layout_group.add_argument("-p", "--paper", dest="paper_preset", choices=("A4", "Letter", "Label3x5"), default=None, help="Paper preset.")
	layout_group.add_argument("-l", "--layout", dest="layout_mode", choices=("sheet", "single"), default=None, help="Layout mode.")
	layout_group.add_argument("-q", "--qr-mode", dest="qr_mode", choices=("id", "url"), default=None, help="QR payload mode.")
	layout_group.add_argument("-b", "--bleed", dest="include_bleed", action="store_true", help="Add 3 mm bleed on single labels.")
	layout_group.add_argument("-B", "--no-bleed", dest="include_bleed", action="store_false", help="No bleed.")
	layout_group.add_argument("-r", "--qr", dest="include_qr", action="store_true", help="Draw inline QR codes on sheet labels.")
	layout_group.add_argument("-R", "--no-qr", dest="include_qr", action="store_false", help="Text-only sheet labels.")
	pdf_parser.set_defaults(include_bleed=None, include_qr=None)

	sample_parser = subparsers.add_parser("sample", help="Create and store a sampling plan.")
	sample_parser.add_argument("payload_path", help="Payload JSON path, or - for stdin.")
	sample_parser.add_argument("--plans", dest="plans_path", default=DEFAULT_PLAN_STORE, help="Sampling plan store JSON path.")

	subparsers.add_parser("presets", help="Print paper presets and layout defaults.")

	args = parser.parse_args(argv)
	return args


#============================================
def run_validate(args: argparse.Namespace) -> int:
	payload = load_payload(args.payload_path)
	result = flg.service.validate(payload)
	print_messages(result.errors, result.warnings)
	values = result.values
	print(f"Structure: {values.structure_code}")
	print(f"Mode: {values.mode}")
	print(f"Plots: {values.total_plots}")
	print(f"Rows: {values.total_rows}")
	print(f"Plants: {values.total_plants}")
	print(f"Labels: plot={values.labels['plot']} row={values.labels['row']} plant={values.labels['plant']}")
	if not result.ok:
		return 1
	print("Payload is valid.")
	return 0


#============================================
def run_csv(args: argparse.Namespace) -> int:
	payload = apply_overrides(load_payload(args.payload_path), args)
	text = flg.service.export_csv(payload, PlanStore(pathlib.Path(args.plans_path)))
	if args.output_path is None:
		sys.stdout.write(text)
		return 0
	with open(args.output_path, "w", encoding="utf-8", newline="") as handle:
		handle.write(text)
	print(f"CSV written: {args.output_path}")
	return 0


#============================================
def run_pdf(args: argparse.Namespace) -> int:
	"""
	Export a PDF and its manifest.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Exit status.
	"""
	print("Field label PDF export")
	print(f"Payload: {args.payload_path}")
	print(f"Output PDF: {args.output_path}")
	payload = apply_overrides(load_payload(args.payload_path), args)
	output_path = pathlib.Path(args.output_path)
	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	print(f"Manifest: {manifest_path}")

	start_time = time.perf_counter()
	result = flg.service.export_pdf(
		payload,
		output_path,
		store=PlanStore(pathlib.Path(args.plans_path)),
		manifest_path=pathlib.Path(manifest_path),
		verbose=True,
	)
	total_time = time.perf_counter() - start_time
	print(f"Labels rendered: {result.records}")
	for label_type, count in result.counts_by_type.items():
		print(f"  {label_type}: {count}")
	print(f"Labels per page: {result.labels_per_page}")
	print(f"Pages written: {result.pages}")
	print("Timing: total={:.2f}s".format(total_time))
	print(f"Manifest written: {manifest_path}")
	return 0


#============================================
def run_sample(args: argparse.Namespace) -> int:
	payload = load_payload(args.payload_path)
	store = PlanStore(pathlib.Path(args.plans_path))
	result = flg.service.create_sampling_plan(payload, store)
	print(f"Sampling plan: {result['sampling_plan_id']}")
	print(f"Seed: {result['seed']}")
	print(f"Samples: {result['total_samples']}")
	print(f"Plan store: {args.plans_path}")
	return 0


#============================================
def run_presets(_args: argparse.Namespace) -> int:
	print(json.dumps(flg.service.list_presets(), indent=2, sort_keys=True))
	return 0


COMMANDS = {
	"validate": run_validate,
	"csv": run_csv,
	"pdf": run_pdf,
	"sample": run_sample,
	"presets": run_presets,
}


#============================================
def main(argv: list[str] | None = None) -> int:
	"""
	Main entry point.

	Args:
		argv: Argument list; sys.argv when None.

	Returns:
		Exit status.
	"""
	args = parse_args(argv)
	try:
		return COMMANDS[args.command](args)
	except LabelError as error:
		print_messages(error.errors, error.warnings)
		return 1
