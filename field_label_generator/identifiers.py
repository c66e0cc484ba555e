"""
Plot, row and plant identifier construction.
"""

# Standard Library
import re

# local repo modules
import field_label_generator as flg
import field_label_generator.config


STRUCTURE_PLOT_PLANT = flg.config.STRUCTURE_PLOT_PLANT

NON_CODE_PATTERN = re.compile(r"[^A-Z0-9]+")


#============================================
def pad_number(value: int, width: int) -> str:
	"""
	Zero-pad a number to a minimum width.

	Args:
		value: Number to pad.
		width: Minimum digit count.

	Returns:
		Padded string. Wider numbers are kept intact.
	"""
	return str(value).rjust(width, "0")


#============================================
def normalize_code(text: str) -> str:
	"""
	Normalize a free-text site or crop name into an identifier segment.

	Args:
		text: Free-text name like "My Farm!!".

	Returns:
		Uppercase code like "MY-FARM".
	"""
	value = str(text or "").strip().upper()
	value = NON_CODE_PATTERN.sub("-", value)
	return value.strip("-")


#============================================
def build_plot_id_short(plot_no: int) -> str:
	return f"P{pad_number(plot_no, 2)}"


#============================================
def build_row_id_short(plot_no: int, row_no: int) -> str:
	return f"{build_plot_id_short(plot_no)}-R{pad_number(row_no, 2)}"


#============================================
def build_plant_id_short(
	structure_code: str,
	plot_no: int,
	row_no: int | None,
	plant_no: int,
) -> str:
	"""
	Build the short plant identifier.

	S1 structures have no rows, so the row segment is dropped.

	Args:
		structure_code: Structure code.
		plot_no: Plot number.
		row_no: Row number, ignored for S1.
		plant_no: Plant number.

	Returns:
		Identifier like "P01-R02-T003" or "P01-T003".
	"""
	plant_segment = f"T{pad_number(plant_no, 3)}"
	if structure_code == STRUCTURE_PLOT_PLANT:
		return f"{build_plot_id_short(plot_no)}-{plant_segment}"
	return f"{build_row_id_short(plot_no, row_no)}-{plant_segment}"


#============================================
def build_full_id(site_name: str, crop_type: str, short_id: str) -> str:
	"""
	Prefix a short identifier with normalized site and crop codes.

	Args:
		site_name: Free-text site name.
		crop_type: Free-text crop name.
		short_id: Short identifier.

	Returns:
		Fully qualified identifier.
	"""
	site_code = normalize_code(site_name)
	crop_code = normalize_code(crop_type)
	if not site_code or not crop_code:
		raise ValueError(
			f"Site and crop must contain letters or digits (site={site_name!r}, crop={crop_type!r})"
		)
	return f"{site_code}-{crop_code}-{short_id}"


#============================================
def build_plot_id_full(site_name: str, crop_type: str, plot_no: int) -> str:
	return build_full_id(site_name, crop_type, build_plot_id_short(plot_no))


#============================================
def build_row_id_full(site_name: str, crop_type: str, plot_no: int, row_no: int) -> str:
	return build_full_id(site_name, crop_type, build_row_id_short(plot_no, row_no))


#============================================
def build_plant_id_full(
	site_name: str,
	crop_type: str,
	structure_code: str,
	plot_no: int,
	row_no: int | None,
	plant_no: int,
) -> str:
	short_id = build_plant_id_short(structure_code, plot_no, row_no, plant_no)
	return build_full_id(site_name, crop_type, short_id)
