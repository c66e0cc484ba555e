import csv
import io

import pytest

import field_label_generator as flg
import field_label_generator.csv_export
import field_label_generator.errors
import field_label_generator.labels
import field_label_generator.payload


#============================================
def _values(payload: dict) -> flg.payload.PayloadValues:
	result = flg.payload.validate_payload(payload)
	assert result.ok, result.errors
	return result.values


#============================================
def test_plant_csv(s3_payload: dict) -> None:
	values = _values(s3_payload)
	text = flg.csv_export.build_csv("plant", values)
	lines = text.split("\n")
	assert lines[0] == "site,crop,plot_no,row_no,plant_no,short_id,full_id"
	assert lines[1] == "Acme Farm,Marigold,1,1,1,P01-R01-T001,ACME-FARM-MARIGOLD-P01-R01-T001"
	assert text.endswith("\n")
	rows = list(csv.reader(io.StringIO(text)))
	assert len(rows) - 1 == len(list(flg.labels.iterate_plants(values)))


#============================================
def test_row_and_plot_csv(s3_payload: dict) -> None:
	values = _values(s3_payload)
	row_lines = flg.csv_export.build_csv("row", values).splitlines()
	assert row_lines[0] == "site,crop,plot_no,row_no,plant_count,row_id"
	assert row_lines[1] == "Acme Farm,Marigold,1,1,3,ACME-FARM-MARIGOLD-P01-R01"
	assert len(row_lines) == 5
	plot_lines = flg.csv_export.build_csv("plot", values).splitlines()
	assert plot_lines[0] == "site,crop,plot_no,row_count,plot_id"
	assert plot_lines[2] == "Acme Farm,Marigold,2,2,ACME-FARM-MARIGOLD-P02"


#============================================
def test_missing_row_is_empty_field(s1_payload: dict) -> None:
	lines = flg.csv_export.build_csv("plant", _values(s1_payload)).splitlines()
	assert lines[1] == "Acme Farm,Marigold,1,,1,P01-T001,ACME-FARM-MARIGOLD-P01-T001"


#============================================
def test_fields_are_quoted(s3_payload: dict) -> None:
	s3_payload["siteName"] = 'Acme, "North"'
	lines = flg.csv_export.build_csv("plot", _values(s3_payload)).splitlines()
	assert lines[1] == '"Acme, ""North""",Marigold,1,2,ACME-NORTH-MARIGOLD-P01'


#============================================
def test_tracked_subset(s3_payload: dict) -> None:
	tracked = [{"plot": 2, "row": 2, "plant": 3}]
	lines = flg.csv_export.build_csv("plant", _values(s3_payload), tracked_plants=tracked).splitlines()
	assert lines[1:] == ["Acme Farm,Marigold,2,2,3,P02-R02-T003,ACME-FARM-MARIGOLD-P02-R02-T003"]


#============================================
def test_combined_type_is_rejected(s3_payload: dict) -> None:
	with pytest.raises(flg.errors.PayloadError, match="does not support combined labels"):
		flg.csv_export.build_csv("all", _values(s3_payload))
