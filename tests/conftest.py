"""
Pytest configuration for local imports and shared payloads.
"""

# Standard Library
import os
import sys

# PIP3 modules
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()


#============================================
@pytest.fixture
def s3_payload() -> dict:
	"""
	Two plots, two rows each, three plants per row, Full mode.
	"""
	return {
		"siteName": "Acme Farm",
		"cropType": "Marigold",
		"batchName": "Spring Trial",
		"startDate": "2026-03-01",
		"structureCode": "S3",
		"mode": "Full",
		"plotsCount": 2,
		"rowsPerPlot": 2,
		"plantsPerRow": 3,
	}


#============================================
@pytest.fixture
def s1_payload() -> dict:
	"""
	Plot and plant structure without rows.
	"""
	return {
		"site_name": "Acme Farm",
		"crop_type": "Marigold",
		"structure_code": "S1",
		"mode": "Full",
		"plots": [
			{"plot_no": 1, "plant_count": 2},
			{"plot_no": 2, "plant_count": 4},
		],
	}
