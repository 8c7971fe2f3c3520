from __future__ import annotations


class FloorPlanError(Exception):
    """Base class for errors reported to the operator."""


class CalibrationError(FloorPlanError):
    pass


class DuplicateBoothId(FloorPlanError):
    def __init__(self, booth_id: str):
        super().__init__(f'Booth "{booth_id}" already exists')
        self.booth_id = booth_id


class PersistenceError(FloorPlanError):
    """Load, save or upload failed. The in-memory layout is left as is."""
