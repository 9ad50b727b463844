#!/usr/bin/env python3
"""
Launch script for the Drive Journey Analyzer backend.

Usage:
    python run_server.py [data_folder] [--port PORT] [--host HOST] [--sample]

Examples:
    python run_server.py                    # Use default ./data/drives folder
    python run_server.py /path/to/exports   # Use custom folder
    python run_server.py --sample           # Write a sample export first
"""

import argparse
import os
import sys
from pathlib import Path

# Add package to path
sys.path.insert(0, str(Path(__file__).parent))


def main():
    parser = argparse.ArgumentParser(description="Drive Journey Analyzer Server")
    parser.add_argument(
        "data_folder",
        nargs="?",
        default="./data/drives",
        help="Path to folder containing JSON/CSV drive exports (default: ./data/drives)"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8000,
        help="Port to run server on (default: 8000)"
    )
    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for all interfaces)"
    )
    parser.add_argument(
        "--sample", "-s",
        action="store_true",
        help="Write sample_drives.json into the data folder before starting"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Run in debug mode"
    )

    args = parser.parse_args()

    data_folder = Path(args.data_folder)

    if args.sample:
        from drive_analysis.utils.sample_data import generate_sample_drives
        sample = generate_sample_drives(data_folder / "sample_drives.json")
        print(f"Wrote sample export: {sample}")

    print("Drive Journey Analyzer")
    print("=" * 40)
    print(f"Data folder: {data_folder.absolute()}")
    print(f"Server: http://{args.host}:{args.port}")
    print("=" * 40)

    if not data_folder.exists():
        print(f"\nWarning: Data folder does not exist: {data_folder}")
        print("You can set it later via POST /folder")
    else:
        os.environ["DRIVE_DATA_FOLDER"] = str(data_folder)

    print("\nAPI Endpoints:")
    print("  GET  /                      - Health check")
    print("  GET  /health                - Detailed health")
    print("  GET  /folder                - Current folder info")
    print("  POST /folder                - Set data folder")
    print("  POST /drives/merge          - Merge posted drives")
    print("  POST /drives/analyze/latest - Analyze latest posted journey")
    print("  GET  /drives                - List raw drives")
    print("  GET  /drives/merged         - List merged journeys")
    print("  GET  /drives/latest         - Analyze latest journey")
    print("  GET  /drives/mileage        - Period mileage")
    print("  GET  /drives/locations      - Location search")
    print("\nStarting server...")

    import uvicorn

    uvicorn.run(
        "drive_analysis.main:app",
        host=args.host,
        port=args.port,
        reload=args.debug,
        log_level="info",
    )


if __name__ == "__main__":
    main()
