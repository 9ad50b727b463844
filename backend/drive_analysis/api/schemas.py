"""
API schemas (Pydantic models) for request/response validation.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from drive_analysis.models.drive import StopType
from drive_analysis.models.raw import RawDrive


# ============================================================================
# Raw Drive Schemas
# ============================================================================

class RawDriveResponse(BaseModel):
    """One raw drive record."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    started_at: float
    ended_at: float
    starting_location: str
    ending_location: str
    starting_battery: float
    ending_battery: float
    odometer_distance: float
    average_speed: Optional[float] = None
    max_speed: Optional[float] = None
    autopilot_distance: Optional[float] = None
    starting_odometer: Optional[float] = None
    ending_odometer: Optional[float] = None


class DriveInput(BaseModel):
    """One raw drive record as supplied by the telemetry source."""
    id: int
    started_at: float = Field(description="Epoch seconds")
    ended_at: float = Field(description="Epoch seconds")
    starting_location: str = "Unknown"
    ending_location: str = "Unknown"
    starting_battery: float = Field(ge=0, le=100)
    ending_battery: float = Field(ge=0, le=100)
    odometer_distance: float = Field(ge=0, description="Miles")
    average_speed: Optional[float] = Field(default=None, ge=0)
    max_speed: Optional[float] = Field(default=None, ge=0)
    autopilot_distance: Optional[float] = Field(default=None, ge=0)
    starting_odometer: Optional[float] = None
    ending_odometer: Optional[float] = None

    @model_validator(mode="after")
    def _check_ordering(self) -> "DriveInput":
        if self.ended_at < self.started_at:
            raise ValueError("ended_at must not be before started_at")
        if self.autopilot_distance is not None and self.autopilot_distance > self.odometer_distance:
            raise ValueError("autopilot_distance cannot exceed odometer_distance")
        return self

    def to_raw(self) -> RawDrive:
        return RawDrive(**self.model_dump())


class DrivesRequest(BaseModel):
    """Batch of raw drives to merge or analyze."""
    drives: list[DriveInput]
    pack_capacity_kwh: Optional[float] = Field(default=None, gt=0)


# ============================================================================
# Merged Drive / Analysis Schemas
# ============================================================================

class DriveStopResponse(BaseModel):
    """Gap between two drives inside a merged drive."""
    model_config = ConfigDict(from_attributes=True)

    location: str
    duration_minutes: float
    stop_type: StopType
    started_at: float
    ended_at: float


class MergedDriveResponse(BaseModel):
    """One logical journey."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    original_drive_ids: list[int]
    started_at: float
    ended_at: float
    starting_location: str
    ending_location: str
    starting_battery: float
    ending_battery: float
    total_distance: float
    total_duration_minutes: float
    driving_duration_minutes: float
    stops: list[DriveStopResponse]
    autopilot_distance: float
    autopilot_percentage: float
    energy_consumed: float
    average_speed: float
    max_speed: float


class BatteryConsumptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    percentage_used: float
    estimated_kwh_used: float
    efficiency_miles_per_kwh: Optional[float] = None
    net_charging: bool


class FSDAnalysisResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_autopilot_miles: float
    fsd_percentage: float
    autopilot_available: bool
    note: Optional[str] = None
    telemetry_reported: bool


class DriveAnalysisResponse(BaseModel):
    """Merged drive with battery, autonomous-driving and summary analysis."""
    model_config = ConfigDict(from_attributes=True)

    merged_drive: MergedDriveResponse
    battery_consumption: BatteryConsumptionResponse
    fsd_analysis: FSDAnalysisResponse
    summary: str


# ============================================================================
# History Schemas
# ============================================================================

class DailyMileageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str
    miles: float
    drives: int


class PeriodMileageResponse(BaseModel):
    """Mileage totals for a period."""
    model_config = ConfigDict(from_attributes=True)

    start: Optional[float] = None
    end: Optional[float] = None
    total_miles_driven: float
    total_drives: int
    total_drive_time_hours: float
    average_miles_per_drive: float
    daily_breakdown: list[DailyMileageResponse]


class LocationMatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    drive_id: int
    started_at: float
    matched_end: str
    location: str
    odometer: Optional[float] = None


class LocationSearchResponse(BaseModel):
    """Drives that started or ended at a searched location."""
    location_searched: str
    matching_drives: int
    drives: list[LocationMatchResponse]


# ============================================================================
# Folder Management Schemas
# ============================================================================

class SetFolderRequest(BaseModel):
    """Request to set the data folder."""
    path: str


class DriveFileResponse(BaseModel):
    """Summary of one drive export file."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    source_file: str
    drive_count: int
    first_started_at: Optional[float] = None
    last_ended_at: Optional[float] = None


class FolderInfoResponse(BaseModel):
    """Information about the current data folder."""
    path: Optional[str]
    file_count: int
    drive_count: int


# ============================================================================
# Error Schemas
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str
    code: Optional[str] = None
