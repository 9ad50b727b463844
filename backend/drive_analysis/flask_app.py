"""
Drive Journey Analyzer - Flask Backend

Alternative to FastAPI for environments where FastAPI isn't available.
Same drive routes, different framework.
"""

import logging
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, request
from pydantic import ValidationError

from drive_analysis.api.schemas import (
    DriveAnalysisResponse,
    DrivesRequest,
    MergedDriveResponse,
    PeriodMileageResponse,
)
from drive_analysis.services.analyzers import PACK_CAPACITY_KWH
from drive_analysis.services.drive_analyzer import analyze_latest_drive
from drive_analysis.services.merger import merge_drives
from drive_analysis.services.mileage import summarize_period
from drive_analysis.services.repository import init_repository, get_repository


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


app = Flask(__name__)


DEFAULT_DATA_FOLDER = Path("./data/drives")


def _parse_drives_request():
    """Validate the JSON body; returns (request, error_response)."""
    try:
        return DrivesRequest.model_validate(request.get_json(silent=True) or {}), None
    except ValidationError as e:
        return None, (jsonify({"detail": e.errors(include_url=False, include_context=False)}), 422)


def _epoch_arg(name: str) -> Optional[float]:
    value = request.args.get(name)
    return float(value) if value is not None else None


# ============================================================================
# Health Endpoints
# ============================================================================

@app.route("/")
def root():
    """Root endpoint - basic health check."""
    return jsonify({
        "name": "Drive Journey Analyzer",
        "version": "0.1.0",
        "status": "running",
    })


@app.route("/health")
def health_check():
    """Health check endpoint."""
    repo = get_repository()
    return jsonify({
        "status": "healthy",
        "data_folder": str(repo.data_folder) if repo.data_folder else None,
        "file_count": repo.file_count,
    })


# ============================================================================
# Drive Endpoints
# ============================================================================

@app.route("/drives/merge", methods=["POST"])
def merge_posted_drives():
    """Merge a batch of raw drives into logical journeys."""
    body, error = _parse_drives_request()
    if error:
        return error

    merged = merge_drives(d.to_raw() for d in body.drives)
    return jsonify([MergedDriveResponse.model_validate(m).model_dump(mode="json") for m in merged])


@app.route("/drives/analyze/latest", methods=["POST"])
def analyze_posted_latest():
    """Analyze the most recent journey in a batch of raw drives."""
    body, error = _parse_drives_request()
    if error:
        return error

    analysis = analyze_latest_drive(
        [d.to_raw() for d in body.drives],
        pack_capacity_kwh=body.pack_capacity_kwh or PACK_CAPACITY_KWH,
    )
    if analysis is None:
        return jsonify(None)
    return jsonify(DriveAnalysisResponse.model_validate(analysis).model_dump(mode="json"))


@app.route("/drives/latest", methods=["GET"])
def get_latest_drive():
    """Analyze the most recent journey in the data folder."""
    pack_capacity_kwh = request.args.get("pack_capacity_kwh", PACK_CAPACITY_KWH, type=float)
    if pack_capacity_kwh <= 0:
        return jsonify({"detail": "pack_capacity_kwh must be positive"}), 400

    analysis = analyze_latest_drive(get_repository().get_drives(), pack_capacity_kwh=pack_capacity_kwh)
    if analysis is None:
        return jsonify({"detail": "No drives found"}), 404
    return jsonify(DriveAnalysisResponse.model_validate(analysis).model_dump(mode="json"))


@app.route("/drives/mileage", methods=["GET"])
def get_period_mileage():
    """Total miles driven between ?start= and ?end= (epoch seconds)."""
    try:
        start, end = _epoch_arg("start"), _epoch_arg("end")
    except ValueError:
        return jsonify({"detail": "start and end must be epoch seconds"}), 400

    summary = summarize_period(get_repository().get_drives(), start, end)
    return jsonify(PeriodMileageResponse.model_validate(summary).model_dump(mode="json"))


# ============================================================================
# Folder Management Endpoints
# ============================================================================

@app.route("/folder", methods=["POST"])
def set_folder():
    """Set the data folder to scan for drive exports."""
    data = request.get_json(silent=True)
    if not data or "path" not in data:
        return jsonify({"detail": "path is required"}), 400

    path = Path(data["path"])
    if not path.exists():
        return jsonify({"detail": f"Folder does not exist: {data['path']}"}), 400
    if not path.is_dir():
        return jsonify({"detail": f"Path is not a directory: {data['path']}"}), 400

    count = get_repository().set_data_folder(path)
    return jsonify({
        "path": str(path),
        "file_count": count,
    })


# ============================================================================
# Startup
# ============================================================================

def create_app(data_folder: Optional[Path] = None) -> Flask:
    """Create and configure the Flask app."""
    if data_folder is None:
        data_folder = DEFAULT_DATA_FOLDER

    if data_folder.exists():
        init_repository(data_folder)
        logger.info(f"Initialized repository with folder: {data_folder}")
    else:
        logger.info(f"Data folder not found: {data_folder}")
        logger.info("Use POST /folder to set data folder")

    return app


if __name__ == "__main__":
    import sys

    data_folder = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_DATA_FOLDER

    create_app(data_folder)
    app.run(host="0.0.0.0", port=8000, debug=True)
