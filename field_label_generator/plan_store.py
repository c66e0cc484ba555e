"""
JSON file persistence for sampling plans.

The store is one JSON array on disk. It is not safe for concurrent writers.
"""

# Standard Library
import dataclasses
import datetime
import json
import pathlib
import time

# local repo modules
import field_label_generator as flg
import field_label_generator.payload
import field_label_generator.sampling


PayloadValues = flg.payload.PayloadValues
PlantCoordinate = flg.payload.PlantCoordinate
SamplingPlan = flg.sampling.SamplingPlan


#============================================
def coordinate_to_dict(coordinate: PlantCoordinate) -> dict:
	return {
		"plot_no": coordinate.plot_no,
		"row_no": coordinate.row_no,
		"plant_no": coordinate.plant_no,
	}


#============================================
def build_plan_record(plan_id: str, values: PayloadValues, plan: SamplingPlan, config: dict) -> dict:
	"""
	Build the stored form of a sampling plan.

	Args:
		plan_id: Plan identifier.
		values: Validated payload values the plan was drawn from.
		plan: Sampling plan.
		config: Sampling config as given by the caller.

	Returns:
		JSON-ready dict.
	"""
	return {
		"id": plan_id,
		"created_at": datetime.datetime.now(datetime.timezone.utc).isoformat(),
		"site_name": values.site_name,
		"crop_type": values.crop_type,
		"batch_name": values.batch_name,
		"start_date": values.start_date,
		"structure_code": values.structure_code,
		"mode": values.mode,
		"sampling_type": plan.sampling_type,
		"seed": plan.seed,
		"config": dict(config),
		"tracked_plants": [coordinate_to_dict(item) for item in plan.tracked_plants],
	}


@dataclasses.dataclass
class PlanStore:
	path: pathlib.Path

	#============================================
	def load(self) -> list[dict]:
		"""
		Read every stored plan record, oldest first.

		Returns:
			List of plan dicts; empty when the file does not exist yet.
		"""
		path = pathlib.Path(self.path)
		if not path.exists():
			return []
		with path.open("r", encoding="utf-8") as handle:
			data = json.load(handle)
		if not isinstance(data, list):
			return []
		return data

	#============================================
	def find(self, plan_id: str) -> dict | None:
		for record in self.load():
			if record.get("id") == plan_id:
				return record
		return None

	#============================================
	def next_id(self, existing: list[dict]) -> str:
		"""
		Make a "plan_<milliseconds>" id that is not already taken.
		"""
		taken = {record.get("id") for record in existing}
		stamp = int(time.time() * 1000)
		plan_id = f"plan_{stamp}"
		while plan_id in taken:
			stamp += 1
			plan_id = f"plan_{stamp}"
		return plan_id

	#============================================
	def save(self, values: PayloadValues, plan: SamplingPlan, config: dict) -> dict:
		"""
		Append a plan and rewrite the store file.

		Args:
			values: Validated payload values.
			plan: Sampling plan.
			config: Sampling config as given by the caller.

		Returns:
			The stored plan record.
		"""
		records = self.load()
		record = build_plan_record(self.next_id(records), values, plan, config)
		records.append(record)
		path = pathlib.Path(self.path)
		path.parent.mkdir(parents=True, exist_ok=True)
		with path.open("w", encoding="utf-8") as handle:
			json.dump(records, handle, indent=2, sort_keys=True)
		return record
