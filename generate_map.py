#!/usr/bin/env python3
"""
Rescue365 - Generate Rescuer Map
Fetches rescue reports and maps the ones a rescuer at a given position would see.

Usage: python generate_map.py LATITUDE LONGITUDE [OUTPUT.html]
"""
import os
import sys
from datetime import datetime

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from rescue365.core.config import settings
from rescue365.core.exceptions import StoreError
from rescue365.core.geo_utils import Coordinate
from rescue365.reports.models import Role
from rescue365.reports.router import visible_reports
from rescue365.reports.store import get_report_store
from rescue365.visualization.map_generator import create_report_map


def main():
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(1)

    try:
        position = Coordinate(latitude=float(sys.argv[1]), longitude=float(sys.argv[2]))
    except ValueError:
        print("ERROR: latitude and longitude must be numbers")
        sys.exit(1)

    output_path = sys.argv[3] if len(sys.argv) > 3 else "rescue_map.html"

    print("=" * 60)
    print("Rescue365 - Generating Rescuer Map")
    print("=" * 60)
    print(f"\nPosition: {position.latitude}, {position.longitude}")
    print(f"Range:    {settings.rescue_radius_miles} miles")

    store = get_report_store()

    try:
        all_reports = store.list_all()
    except StoreError as e:
        print(f"ERROR: unable to fetch rescue reports: {e}")
        sys.exit(1)

    reports = visible_reports(
        all_reports, Role.RESCUER, position, settings.rescue_radius_meters
    )

    print(f"\nTotal reports:   {len(all_reports)}")
    print(f"Visible reports: {len(reports)}")

    report_map = create_report_map(
        reports,
        center=position,
        radius_meters=settings.rescue_radius_meters,
        title=f"Rescue365 - Nearby Rescues ({datetime.now().strftime('%Y-%m-%d %H:%M')})",
    )
    report_map.save(output_path)

    print(f"\nMap saved to: {output_path}")
    print("=" * 60)


if __name__ == "__main__":
    main()
