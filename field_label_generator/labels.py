"""
Lazy enumeration of plot, row and plant label records.
"""

# Standard Library
import dataclasses
import typing

# local repo modules
import field_label_generator as flg
import field_label_generator.config
import field_label_generator.identifiers
import field_label_generator.payload


PayloadValues = flg.payload.PayloadValues
PlantCoordinate = flg.payload.PlantCoordinate
Plot = flg.payload.Plot
get_structure = flg.config.get_structure
canonicalize_coordinate = flg.payload.canonicalize_coordinate

STRUCTURE_PLOT_PLANT = flg.config.STRUCTURE_PLOT_PLANT


@dataclasses.dataclass(frozen=True)
class PlotLabel:
	site_name: str
	crop_type: str
	plot_no: int
	row_count: int
	plot_id_short: str
	plot_id_full: str

	@property
	def full_id(self) -> str:
		return self.plot_id_full


@dataclasses.dataclass(frozen=True)
class RowLabel:
	site_name: str
	crop_type: str
	plot_no: int
	row_no: int
	plant_count: int
	row_id_short: str
	row_id_full: str

	@property
	def full_id(self) -> str:
		return self.row_id_full


@dataclasses.dataclass(frozen=True)
class PlantLabel:
	site_name: str
	crop_type: str
	plot_no: int
	row_no: int | None
	plant_no: int
	plant_id_short: str
	plant_id_full: str

	@property
	def full_id(self) -> str:
		return self.plant_id_full


#============================================
def iter_selected_plots(plots: list[Plot], export_plot: int | None) -> typing.Iterator[Plot]:
	"""
	Walk plots in ascending plot number order, honoring a single-plot filter.

	Args:
		plots: Plot entries.
		export_plot: Plot number to keep, or None for all.

	Yields:
		Plot entries.
	"""
	for plot in sorted(plots, key=lambda item: item.plot_no):
		if export_plot is None:
			yield plot
			continue
		if plot.plot_no == export_plot:
			yield plot
		elif plot.plot_no > export_plot:
			return


#============================================
def iterate_plots(values: PayloadValues, export_plot: int | None = None) -> typing.Iterator[PlotLabel]:
	"""
	Yield one record per plot.

	Args:
		values: Validated payload values.
		export_plot: Optional plot filter.

	Yields:
		PlotLabel records.
	"""
	for plot in iter_selected_plots(values.plots, export_plot):
		yield PlotLabel(
			site_name=values.site_name,
			crop_type=values.crop_type,
			plot_no=plot.plot_no,
			row_count=len(plot.rows),
			plot_id_short=flg.identifiers.build_plot_id_short(plot.plot_no),
			plot_id_full=flg.identifiers.build_plot_id_full(values.site_name, values.crop_type, plot.plot_no),
		)


#============================================
def iterate_rows(values: PayloadValues, export_plot: int | None = None) -> typing.Iterator[RowLabel]:
	"""
	Yield one record per row. Structures without rows yield nothing.

	Args:
		values: Validated payload values.
		export_plot: Optional plot filter.

	Yields:
		RowLabel records.
	"""
	if not get_structure(values.structure_code).has_rows:
		return
	for plot in iter_selected_plots(values.plots, export_plot):
		for row in sorted(plot.rows, key=lambda item: item.row_no):
			yield RowLabel(
				site_name=values.site_name,
				crop_type=values.crop_type,
				plot_no=plot.plot_no,
				row_no=row.row_no,
				plant_count=row.plant_count or 0,
				row_id_short=flg.identifiers.build_row_id_short(plot.plot_no, row.row_no),
				row_id_full=flg.identifiers.build_row_id_full(
					values.site_name,
					values.crop_type,
					plot.plot_no,
					row.row_no,
				),
			)


#============================================
def build_plant_label(values: PayloadValues, plot_no: int, row_no: int | None, plant_no: int) -> PlantLabel:
	"""
	Build a plant record with short and full identifiers.
	"""
	if values.structure_code == STRUCTURE_PLOT_PLANT:
		row_no = None
	return PlantLabel(
		site_name=values.site_name,
		crop_type=values.crop_type,
		plot_no=plot_no,
		row_no=row_no,
		plant_no=plant_no,
		plant_id_short=flg.identifiers.build_plant_id_short(values.structure_code, plot_no, row_no, plant_no),
		plant_id_full=flg.identifiers.build_plant_id_full(
			values.site_name,
			values.crop_type,
			values.structure_code,
			plot_no,
			row_no,
			plant_no,
		),
	)


#============================================
def coordinate_sort_key(coordinate: PlantCoordinate) -> tuple[int, int, int]:
	return (coordinate.plot_no or 0, coordinate.row_no or 0, coordinate.plant_no or 0)


#============================================
def iterate_plants(
	values: PayloadValues,
	export_plot: int | None = None,
	tracked_plants: list | None = None,
) -> typing.Iterator[PlantLabel]:
	"""
	Yield plant records from the full structure or from a sampled subset.

	A non-empty tracked_plants list replaces the structure walk. Entries
	without a plot or plant number are skipped, and so are entries without a
	row number when the structure has rows.

	Args:
		values: Validated payload values.
		export_plot: Optional plot filter.
		tracked_plants: Optional PlantCoordinate list (raw dicts are accepted).

	Yields:
		PlantLabel records ordered by plot, row, plant.
	"""
	if tracked_plants:
		coordinates = [canonicalize_coordinate(item) for item in tracked_plants]
		for coordinate in sorted(coordinates, key=coordinate_sort_key):
			if not coordinate.plot_no or not coordinate.plant_no:
				continue
			if values.structure_code != STRUCTURE_PLOT_PLANT and not coordinate.row_no:
				continue
			if export_plot is not None and coordinate.plot_no != export_plot:
				continue
			yield build_plant_label(values, coordinate.plot_no, coordinate.row_no, coordinate.plant_no)
		return

	for plot in iter_selected_plots(values.plots, export_plot):
		if values.structure_code == STRUCTURE_PLOT_PLANT:
			for plant_no in range(1, (plot.plant_count or 0) + 1):
				yield build_plant_label(values, plot.plot_no, None, plant_no)
			continue
		for row in sorted(plot.rows, key=lambda item: item.row_no):
			for plant_no in range(1, (row.plant_count or 0) + 1):
				yield build_plant_label(values, plot.plot_no, row.row_no, plant_no)


#============================================
def iterate_records(
	label_type: str,
	values: PayloadValues,
	export_plot: int | None = None,
	tracked_plants: list | None = None,
) -> typing.Iterator[PlotLabel | RowLabel | PlantLabel]:
	"""
	Dispatch to the enumerator for one label type.
	"""
	if label_type == flg.config.LABEL_TYPE_PLOT:
		return iterate_plots(values, export_plot)
	if label_type == flg.config.LABEL_TYPE_ROW:
		return iterate_rows(values, export_plot)
	if label_type == flg.config.LABEL_TYPE_PLANT:
		return iterate_plants(values, export_plot, tracked_plants)
	raise ValueError(f"Unknown label type: {label_type}")
