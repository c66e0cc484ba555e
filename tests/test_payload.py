import pytest

import field_label_generator as flg
import field_label_generator.payload


#============================================
def test_compact_s3_totals(s3_payload: dict) -> None:
	result = flg.payload.validate_payload(s3_payload)
	assert result.ok
	assert result.errors == []
	values = result.values
	assert values.site_name == "Acme Farm"
	assert values.structure_code == "S3"
	assert values.total_plots == 2
	assert values.total_rows == 4
	assert values.total_plants == 12
	assert values.total_labels == 12
	assert values.labels == {"plot": 2, "row": 4, "plant": 12}


#============================================
def test_explicit_tree_is_sorted() -> None:
	payload = {
		"site_name": "Acme",
		"crop_type": "Corn",
		"structure_code": "S3",
		"mode": "Full",
		"plots": [
			{"plotNo": 2, "rows": [{"rowNo": 2, "plantCount": 1}, {"rowNo": 1, "plantCount": 2}]},
			{"plot": 1, "rows": [{"row": 1, "plants": 4}]},
		],
	}
	result = flg.payload.validate_payload(payload)
	assert result.ok
	plots = result.values.plots
	assert [plot.plot_no for plot in plots] == [1, 2]
	assert [row.row_no for row in plots[1].rows] == [1, 2]
	assert result.values.total_plants == 7


#============================================
def test_missing_numbers_default_to_position() -> None:
	payload = {
		"site_name": "Acme",
		"crop_type": "Corn",
		"structure_code": "S3",
		"plots": [{"rows": [{"plant_count": 2}, {"plant_count": 3}]}],
	}
	values = flg.payload.validate_payload(payload).values
	assert values.plots[0].plot_no == 1
	assert [row.row_no for row in values.plots[0].rows] == [1, 2]


#============================================
def test_errors_accumulate() -> None:
	result = flg.payload.validate_payload({"structureCode": "S3"})
	assert not result.ok
	assert "Site name is required." in result.errors
	assert "Crop type is required." in result.errors
	assert "At least one plot is required." in result.errors


#============================================
def test_site_without_letters_is_rejected(s3_payload: dict) -> None:
	s3_payload["siteName"] = "!!!"
	result = flg.payload.validate_payload(s3_payload)
	assert not result.ok
	assert "Site name must contain at least one letter or digit." in result.errors


#============================================
def test_mode_requires_plant_tracking() -> None:
	payload = {
		"site_name": "Acme",
		"crop_type": "Corn",
		"structure_code": "S2",
		"mode": "Research",
		"plots_count": 1,
		"rows_per_plot": 2,
		"plants_per_row": 3,
	}
	result = flg.payload.validate_payload(payload)
	assert "Selected tracking mode requires plant tracking." in result.errors


#============================================
def test_invalid_mode(s3_payload: dict) -> None:
	s3_payload["mode"] = "Casual"
	result = flg.payload.validate_payload(s3_payload)
	assert "Tracking mode is invalid." in result.errors


#============================================
def test_mode_is_case_insensitive(s3_payload: dict) -> None:
	s3_payload["mode"] = "research"
	result = flg.payload.validate_payload(s3_payload)
	assert result.ok
	assert result.values.mode == "Research"


#============================================
def test_unknown_structure_falls_back_to_s3(s3_payload: dict) -> None:
	s3_payload["structureCode"] = "S9"
	result = flg.payload.validate_payload(s3_payload)
	assert result.ok
	assert result.values.structure_code == "S3"


#============================================
def test_row_without_plants() -> None:
	payload = {
		"site_name": "Acme",
		"crop_type": "Corn",
		"structure_code": "S3",
		"plots": [{"plot_no": 1, "rows": [{"row_no": 1, "plant_count": 2}, {"row_no": 2, "plant_count": 0}]}],
	}
	result = flg.payload.validate_payload(payload)
	assert "Plot 1 Row 2 must have at least 1 plant." in result.errors


#============================================
def test_plot_without_rows() -> None:
	payload = {
		"site_name": "Acme",
		"crop_type": "Corn",
		"structure_code": "S3",
		"plots": [{"plot_no": 4, "rows": []}],
	}
	result = flg.payload.validate_payload(payload)
	assert "Plot 4 must have at least 1 row." in result.errors


#============================================
def test_plot_plant_structure_needs_plants() -> None:
	payload = {
		"site_name": "Acme",
		"crop_type": "Corn",
		"structure_code": "S1",
		"plots": [{"plot_no": 1, "plant_count": 3}, {"plot_no": 2}],
	}
	result = flg.payload.validate_payload(payload)
	assert "Plot 2 must have at least 1 plant." in result.errors


#============================================
def test_duplicate_numbers_are_rejected() -> None:
	payload = {
		"site_name": "Acme",
		"crop_type": "Corn",
		"structure_code": "S3",
		"plots": [
			{"plot_no": 1, "rows": [{"row_no": 1, "plant_count": 2}, {"row_no": 1, "plant_count": 2}]},
			{"plot_no": 1, "rows": [{"row_no": 1, "plant_count": 2}]},
		],
	}
	result = flg.payload.validate_payload(payload)
	assert "Plot 1 is listed more than once." in result.errors
	assert "Plot 1 Row 1 is listed more than once." in result.errors


#============================================
def test_label_limits() -> None:
	payload = {
		"site_name": "Acme",
		"crop_type": "Corn",
		"structure_code": "S3",
		"mode": "Full",
		"plots_count": 1,
		"rows_per_plot": 101,
		"plants_per_row": 100,
	}
	result = flg.payload.validate_payload(payload)
	assert result.ok
	assert result.warnings == ["Total labels exceed 10,000. Consider exporting plot-wise."]

	payload["rows_per_plot"] = 1001
	result = flg.payload.validate_payload(payload)
	assert not result.ok
	assert "Total labels exceed the safe limit of 100,000." in result.errors


#============================================
def test_plant_count_is_zero_without_tracking(s3_payload: dict) -> None:
	s3_payload["mode"] = "Standard"
	values = flg.payload.validate_payload(s3_payload).values
	assert values.total_plants == 12
	assert values.labels == {"plot": 2, "row": 4, "plant": 0}


#============================================
def test_integer_plots_for_plot_only_structure() -> None:
	payload = {"site_name": "Acme", "crop_type": "Corn", "structure_code": "S4", "plots": 3}
	result = flg.payload.validate_payload(payload)
	assert result.ok
	assert result.values.labels == {"plot": 3, "row": 0, "plant": 0}


#============================================
@pytest.mark.parametrize(
	"value, expected",
	[
		(5, 5),
		("5", 5),
		(" 7 ", 7),
		(5.0, 5),
		("2.5", None),
		(0, None),
		(-1, None),
		(True, None),
		("abc", None),
		(None, None),
	],
)
def test_parse_positive_int(value, expected) -> None:
	assert flg.payload.parse_positive_int(value) == expected


#============================================
def test_canonicalize_request_is_idempotent() -> None:
	body = {
		"siteName": "Acme",
		"cropType": "Corn",
		"plots": [{"plotNo": 1, "rows": [{"rowNo": 1, "plantCount": 2}]}],
		"trackedPlants": [{"plot": 1, "row": 1, "plant": 2}],
		"samplingPlan": {"samplingType": "plot_based", "samplesPerPlot": 1},
	}
	once = flg.payload.canonicalize_request(body)
	twice = flg.payload.canonicalize_request(once)
	assert once == twice
	assert once["tracked_plants"] == [flg.payload.PlantCoordinate(1, 1, 2)]
	assert once["sampling_plan"] == {"sampling_type": "plot_based", "samples_per_plot": 1}
