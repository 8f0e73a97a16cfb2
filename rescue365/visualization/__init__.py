"""
Rescue365 - Visualization
Interactive report maps.
"""

from rescue365.visualization.map_generator import create_report_map, get_status_color

__all__ = ["create_report_map", "get_status_color"]
