"""
API routes for drives.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from drive_analysis.api.schemas import (
    DriveAnalysisResponse,
    DriveFileResponse,
    DrivesRequest,
    ErrorResponse,
    FolderInfoResponse,
    LocationMatchResponse,
    LocationSearchResponse,
    MergedDriveResponse,
    PeriodMileageResponse,
    RawDriveResponse,
    SetFolderRequest,
)
from drive_analysis.services.analyzers import PACK_CAPACITY_KWH
from drive_analysis.services.drive_analyzer import analyze_latest_drive
from drive_analysis.services.merger import merge_drives
from drive_analysis.services.mileage import find_drives_at_location, summarize_period
from drive_analysis.services.repository import get_repository


router = APIRouter(prefix="/drives", tags=["drives"])


def _to_epoch(value: Optional[datetime]) -> Optional[float]:
    """Convert a query datetime to epoch seconds (naive = UTC)."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def _time_window(start: Optional[datetime], end: Optional[datetime]) -> tuple[Optional[float], Optional[float]]:
    start_s, end_s = _to_epoch(start), _to_epoch(end)
    if start_s is not None and end_s is not None and start_s > end_s:
        raise HTTPException(status_code=400, detail="Invalid time range")
    return start_s, end_s


@router.post("/merge", response_model=list[MergedDriveResponse])
async def merge_posted_drives(request: DrivesRequest):
    """
    Merge a batch of raw drives into logical journeys.
    """
    merged = merge_drives(d.to_raw() for d in request.drives)
    return [MergedDriveResponse.model_validate(m) for m in merged]


@router.post("/analyze/latest", response_model=Optional[DriveAnalysisResponse])
async def analyze_posted_latest(request: DrivesRequest):
    """
    Analyze the most recent journey in a batch of raw drives.

    Returns null when the batch is empty.
    """
    analysis = analyze_latest_drive(
        [d.to_raw() for d in request.drives],
        pack_capacity_kwh=request.pack_capacity_kwh or PACK_CAPACITY_KWH,
    )
    if analysis is None:
        return None
    return DriveAnalysisResponse.model_validate(analysis)


@router.get("", response_model=list[RawDriveResponse])
async def list_drives(
    start: Optional[datetime] = Query(None, description="Only drives starting at or after this time"),
    end: Optional[datetime] = Query(None, description="Only drives starting at or before this time"),
):
    """
    List raw drives from the data folder, oldest first.
    """
    start_s, end_s = _time_window(start, end)
    drives = get_repository().get_drives(start_s, end_s)
    return [RawDriveResponse.model_validate(d) for d in drives]


@router.get("/merged", response_model=list[MergedDriveResponse])
async def list_merged_drives(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
):
    """
    Merge the drives in the data folder into journeys, oldest first.
    """
    start_s, end_s = _time_window(start, end)
    merged = merge_drives(get_repository().get_drives(start_s, end_s))
    return [MergedDriveResponse.model_validate(m) for m in merged]


@router.get(
    "/latest",
    response_model=DriveAnalysisResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_latest_drive(
    pack_capacity_kwh: float = Query(PACK_CAPACITY_KWH, gt=0, description="Battery pack capacity in kWh"),
):
    """
    Analyze the most recent journey in the data folder.
    """
    analysis = analyze_latest_drive(get_repository().get_drives(), pack_capacity_kwh=pack_capacity_kwh)
    if analysis is None:
        raise HTTPException(status_code=404, detail="No drives found")
    return DriveAnalysisResponse.model_validate(analysis)


@router.get("/mileage", response_model=PeriodMileageResponse)
async def get_period_mileage(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
):
    """
    Total miles driven in a period, with a daily breakdown.
    """
    start_s, end_s = _time_window(start, end)
    summary = summarize_period(get_repository().get_drives(), start_s, end_s)
    return PeriodMileageResponse.model_validate(summary)


@router.get("/locations", response_model=LocationSearchResponse)
async def search_location(
    query: str = Query(..., min_length=1, description="Location name or address fragment"),
):
    """
    Find drives that started or ended at a location, with the odometer there.
    """
    matches = find_drives_at_location(get_repository().get_drives(), query)
    return LocationSearchResponse(
        location_searched=query,
        matching_drives=len(matches),
        drives=[LocationMatchResponse.model_validate(m) for m in matches],
    )


@router.get(
    "/{drive_id}",
    response_model=RawDriveResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_drive(drive_id: int):
    """
    Get one raw drive by id.
    """
    drive = get_repository().get_drive(drive_id)
    if drive is None:
        raise HTTPException(status_code=404, detail=f"Drive not found: {drive_id}")
    return RawDriveResponse.model_validate(drive)


# ============================================================================
# Folder Management Routes
# ============================================================================

folder_router = APIRouter(prefix="/folder", tags=["folder"])


def _folder_info() -> FolderInfoResponse:
    repo = get_repository()
    return FolderInfoResponse(
        path=str(repo.data_folder) if repo.data_folder else None,
        file_count=repo.file_count,
        drive_count=len(repo.get_drives()),
    )


@folder_router.get("", response_model=FolderInfoResponse)
async def get_folder_info():
    """Get information about the current data folder."""
    return _folder_info()


@folder_router.get("/files", response_model=list[DriveFileResponse])
async def list_folder_files():
    """List the drive export files in the data folder."""
    return [DriveFileResponse.model_validate(f) for f in get_repository().list_files()]


@folder_router.post("", response_model=FolderInfoResponse)
async def set_folder(request: SetFolderRequest):
    """
    Set the data folder to scan for drive exports.

    This will clear the current cache and re-scan.
    """
    path = Path(request.path)
    if not path.exists():
        raise HTTPException(status_code=400, detail=f"Folder does not exist: {request.path}")
    if not path.is_dir():
        raise HTTPException(status_code=400, detail=f"Path is not a directory: {request.path}")

    get_repository().set_data_folder(path)
    return _folder_info()


@folder_router.post("/rescan", response_model=FolderInfoResponse)
async def rescan_folder():
    """
    Rescan the current data folder for new export files.
    """
    repo = get_repository()

    if repo.data_folder is None:
        raise HTTPException(status_code=400, detail="No data folder set")

    repo.clear_cache()
    repo.scan_folder(repo.data_folder)
    return _folder_info()
