"""
Seeded sampling of plants for research tracking.

The RNG is Mulberry32 seeded with a 32-bit FNV-1a hash of the seed string.
Both are reproduced bit-for-bit so that a stored seed regenerates the same
plant subset on any platform.
"""

# Standard Library
import dataclasses
import re
import time
import typing

# local repo modules
import field_label_generator as flg
import field_label_generator.config
import field_label_generator.errors
import field_label_generator.payload


PayloadValues = flg.payload.PayloadValues
PlantCoordinate = flg.payload.PlantCoordinate
SamplingError = flg.errors.SamplingError
parse_positive_int = flg.payload.parse_positive_int
get_structure = flg.config.get_structure

SAMPLING_PLOT_BASED = flg.config.SAMPLING_PLOT_BASED
SAMPLING_ROW_BASED = flg.config.SAMPLING_ROW_BASED
STRUCTURE_PLOT_PLANT = flg.config.STRUCTURE_PLOT_PLANT

UINT32_MASK = 0xFFFFFFFF
FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
MULBERRY_INCREMENT = 0x6D2B79F5
TWO_POW_32 = 4294967296.0
WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclasses.dataclass(frozen=True)
class SamplingPlan:
	seed: str
	sampling_type: str
	tracked_plants: tuple[PlantCoordinate, ...]


#============================================
def hash_seed(text: str) -> int:
	"""
	Hash a seed string with 32-bit FNV-1a over UTF-16 code units.

	Args:
		text: Seed string.

	Returns:
		Unsigned 32-bit state.
	"""
	value = FNV_OFFSET_BASIS
	data = str(text).encode("utf-16-le", "surrogatepass")
	for index in range(0, len(data), 2):
		code_unit = data[index] | (data[index + 1] << 8)
		value ^= code_unit
		value = (value * FNV_PRIME) & UINT32_MASK
	return value


#============================================
def default_seed() -> str:
	"""
	Current time in milliseconds, as a string.
	"""
	return str(int(time.time() * 1000))


#============================================
def create_rng(seed: str | None) -> typing.Callable[[], float]:
	"""
	Create a Mulberry32 generator.

	Args:
		seed: Seed string; the current timestamp is used when empty.

	Returns:
		Callable returning floats in [0, 1).
	"""
	state = hash_seed(seed or default_seed())

	def rng() -> float:
		nonlocal state
		state = (state + MULBERRY_INCREMENT) & UINT32_MASK
		t = state
		t = ((t ^ (t >> 15)) * (t | 1)) & UINT32_MASK
		t ^= (t + (((t ^ (t >> 7)) * (t | 61)) & UINT32_MASK)) & UINT32_MASK
		return ((t ^ (t >> 14)) & UINT32_MASK) / TWO_POW_32

	return rng


#============================================
def sample_unique(population_size: int, count: int, rng: typing.Callable[[], float]) -> list[int]:
	"""
	Pick count distinct values from 1..population_size.

	Args:
		population_size: Population size.
		count: Number of values to pick.
		rng: Generator returning floats in [0, 1).

	Returns:
		Picked values in shuffle order.
	"""
	if count > population_size:
		raise SamplingError("Sample size exceeds population.")
	values = list(range(1, population_size + 1))
	for index in range(len(values) - 1, 0, -1):
		swap = int(rng() * (index + 1))
		values[index], values[swap] = values[swap], values[index]
	return values[:count]


#============================================
def parse_range_list(text, max_value: int | None = None) -> list[int]:
	"""
	Parse a list like "1-3, 7, 9-10" into sorted unique integers.

	Args:
		text: Range string; empty means no filter.
		max_value: Optional upper bound; larger values are dropped.

	Returns:
		Sorted list of integers, empty when nothing was selected.
	"""
	if not text:
		return []
	cleaned = WHITESPACE_PATTERN.sub("", str(text))
	values: set[int] = set()
	for segment in cleaned.split(","):
		if not segment:
			continue
		parts = segment.split("-")
		if len(parts) == 1:
			number = parse_positive_int(parts[0])
			if number and (not max_value or number <= max_value):
				values.add(number)
			continue
		start = parse_positive_int(parts[0])
		end = parse_positive_int(parts[1])
		if not start or not end:
			continue
		for number in range(min(start, end), max(start, end) + 1):
			if not max_value or number <= max_value:
				values.add(number)
	return sorted(values)


#============================================
def build_sampling_plan(values: PayloadValues, config: dict) -> SamplingPlan:
	"""
	Build a reproducible sampling plan.

	Args:
		values: Validated payload values.
		config: Sampling config with sampling_type, seed, samples_per_plot or
			samples_per_row, and optional plots/rows range strings.

	Returns:
		SamplingPlan.
	"""
	config = flg.payload.canonicalize_keys(config, flg.payload.SAMPLING_ALIASES)
	structure = get_structure(values.structure_code)
	sampling_type = config.get("sampling_type")
	seed = str(config.get("seed") or "") or default_seed()
	rng = create_rng(seed)
	tracked: list[PlantCoordinate] = []
	# draw order follows the request, not the sorted label order
	plots = values.input_plots or values.plots

	if not structure.has_plants:
		raise SamplingError("Sampling requires plant tracking.")

	if sampling_type == SAMPLING_PLOT_BASED:
		samples_per_plot = parse_positive_int(config.get("samples_per_plot"))
		if not samples_per_plot:
			raise SamplingError("Samples per plot is required.")
		selected_plots = parse_range_list(config.get("plots"))
		for plot in plots:
			if selected_plots and plot.plot_no not in selected_plots:
				continue
			if structure.code == STRUCTURE_PLOT_PLANT:
				plant_count = plot.plant_count or 0
				if samples_per_plot > plant_count:
					raise SamplingError(f"Plot {plot.plot_no} has fewer plants than requested samples.")
				for plant_no in sample_unique(plant_count, samples_per_plot, rng):
					tracked.append(PlantCoordinate(plot.plot_no, None, plant_no))
				continue
			pool: list[PlantCoordinate] = []
			for row in plot.rows:
				for plant_no in range(1, (row.plant_count or 0) + 1):
					pool.append(PlantCoordinate(plot.plot_no, row.row_no, plant_no))
			if samples_per_plot > len(pool):
				raise SamplingError(f"Plot {plot.plot_no} has fewer plants than requested samples.")
			for pick in sample_unique(len(pool), samples_per_plot, rng):
				tracked.append(pool[pick - 1])
	elif sampling_type == SAMPLING_ROW_BASED:
		if not structure.has_rows:
			raise SamplingError("Row-based sampling requires rows.")
		samples_per_row = parse_positive_int(config.get("samples_per_row"))
		if not samples_per_row:
			raise SamplingError("Samples per row is required.")
		selected_plots = parse_range_list(config.get("plots"))
		selected_rows = parse_range_list(config.get("rows"))
		for plot in plots:
			if selected_plots and plot.plot_no not in selected_plots:
				continue
			for row in plot.rows:
				if selected_rows and row.row_no not in selected_rows:
					continue
				plant_count = row.plant_count or 0
				if samples_per_row > plant_count:
					raise SamplingError(
						f"Plot {plot.plot_no} Row {row.row_no} has fewer plants than requested samples."
					)
				for plant_no in sample_unique(plant_count, samples_per_row, rng):
					tracked.append(PlantCoordinate(plot.plot_no, row.row_no, plant_no))
	else:
		raise SamplingError("Sampling type is invalid.")

	if not tracked:
		raise SamplingError("Sampling selected no plants. Check the plot and row filters.")
	return SamplingPlan(seed=seed, sampling_type=sampling_type, tracked_plants=tuple(tracked))
