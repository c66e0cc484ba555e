"""
Exception types raised by the label engine.
"""


class LabelError(ValueError):
	"""
	Base error carrying user-facing error and warning lines.
	"""

	def __init__(self, errors: list[str] | str, warnings: list[str] | None = None):
		if isinstance(errors, str):
			errors = [errors]
		self.errors = list(errors)
		self.warnings = list(warnings or [])
		super().__init__("; ".join(self.errors))


class PayloadError(LabelError):
	"""
	Blocking validation or request gating failure.
	"""


class SamplingError(LabelError):
	"""
	Sampling plan could not be built.
	"""


class GeometryError(LabelError):
	"""
	Layout does not fit the selected paper.
	"""
