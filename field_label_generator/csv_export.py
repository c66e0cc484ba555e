"""
CSV serialization of enumerated label records.
"""

# Standard Library
import csv
import io
import typing

# local repo modules
import field_label_generator as flg
import field_label_generator.config
import field_label_generator.errors
import field_label_generator.labels
import field_label_generator.payload


PayloadValues = flg.payload.PayloadValues
PayloadError = flg.errors.PayloadError

CSV_PLANT_HEADER = flg.config.CSV_PLANT_HEADER
CSV_ROW_HEADER = flg.config.CSV_ROW_HEADER
CSV_PLOT_HEADER = flg.config.CSV_PLOT_HEADER
LABEL_TYPE_PLOT = flg.config.LABEL_TYPE_PLOT
LABEL_TYPE_ROW = flg.config.LABEL_TYPE_ROW
LABEL_TYPE_PLANT = flg.config.LABEL_TYPE_PLANT
LABEL_TYPE_ALL = flg.config.LABEL_TYPE_ALL


#============================================
def write_csv(header: tuple[str, ...], rows: typing.Iterable[tuple]) -> str:
	"""
	Write a header and rows as CSV text.

	Fields containing a comma, quote or newline are quoted and embedded
	quotes are doubled. None becomes an empty field.

	Args:
		header: Column names.
		rows: Row tuples.

	Returns:
		CSV text with "\\n" line endings.
	"""
	buffer = io.StringIO()
	writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
	writer.writerow(header)
	for row in rows:
		writer.writerow(row)
	return buffer.getvalue()


#============================================
def build_csv_plant(
	values: PayloadValues,
	export_plot: int | None = None,
	tracked_plants: list | None = None,
) -> str:
	rows = (
		(
			record.site_name,
			record.crop_type,
			record.plot_no,
			record.row_no,
			record.plant_no,
			record.plant_id_short,
			record.plant_id_full,
		)
		for record in flg.labels.iterate_plants(values, export_plot, tracked_plants)
	)
	return write_csv(CSV_PLANT_HEADER, rows)


#============================================
def build_csv_row(values: PayloadValues, export_plot: int | None = None) -> str:
	rows = (
		(
			record.site_name,
			record.crop_type,
			record.plot_no,
			record.row_no,
			record.plant_count,
			record.row_id_full,
		)
		for record in flg.labels.iterate_rows(values, export_plot)
	)
	return write_csv(CSV_ROW_HEADER, rows)


#============================================
def build_csv_plot(values: PayloadValues, export_plot: int | None = None) -> str:
	rows = (
		(
			record.site_name,
			record.crop_type,
			record.plot_no,
			record.row_count,
			record.plot_id_full,
		)
		for record in flg.labels.iterate_plots(values, export_plot)
	)
	return write_csv(CSV_PLOT_HEADER, rows)


#============================================
def build_csv(
	label_type: str,
	values: PayloadValues,
	export_plot: int | None = None,
	tracked_plants: list | None = None,
) -> str:
	"""
	Serialize one label type to CSV.

	Args:
		label_type: plot, row or plant.
		values: Validated payload values.
		export_plot: Optional plot filter.
		tracked_plants: Optional sampled plant subset.

	Returns:
		CSV text.
	"""
	if label_type == LABEL_TYPE_ALL:
		raise PayloadError("CSV export does not support combined labels. Export each label type separately.")
	if label_type == LABEL_TYPE_PLOT:
		return build_csv_plot(values, export_plot)
	if label_type == LABEL_TYPE_ROW:
		return build_csv_row(values, export_plot)
	if label_type == LABEL_TYPE_PLANT:
		return build_csv_plant(values, export_plot, tracked_plants)
	raise PayloadError(f"Label type is invalid: {label_type}.")
