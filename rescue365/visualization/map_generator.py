"""
Map Visualization Module for Rescue365

Generates interactive maps using Folium to display rescue reports,
colored by lifecycle status, with the rescuer's range around them.
"""

import html
import logging
from typing import Optional, List

import folium
from folium.plugins import MarkerCluster

from rescue365.core.constants import STATUS_COLORS
from rescue365.core.geo_utils import Coordinate, calculate_centroid
from rescue365.reports.models import RescueReport

logger = logging.getLogger(__name__)


def get_status_color(status: str) -> str:
    """Get marker color based on report status."""
    return STATUS_COLORS.get(status, "gray")


def create_report_map(
    reports: List[RescueReport],
    center: Optional[Coordinate] = None,
    radius_meters: Optional[float] = None,
    zoom: int = 11,
    title: str = "Rescue365 - Rescue Reports",
    cluster_markers: bool = True,
) -> folium.Map:
    """
    Create an interactive map with rescue reports.

    Args:
        reports: Reports to plot
        center: Rescuer position; the map centers on the reports if None
        radius_meters: Draw the rescuer's range around center
        zoom: Initial zoom level (1-18)
        title: Map title
        cluster_markers: Cluster markers when zoomed out

    Returns:
        Folium Map object
    """
    if center is not None:
        map_center = center.to_tuple()
    elif reports:
        map_center = calculate_centroid([r.location.to_tuple() for r in reports])
    else:
        logger.warning("No reports or center provided, creating empty map")
        return folium.Map(location=(0, 0), zoom_start=2)

    report_map = folium.Map(location=map_center, zoom_start=zoom)

    if center is not None:
        folium.Marker(
            location=center.to_tuple(),
            tooltip="You are here",
            icon=folium.Icon(color="blue", icon="user"),
        ).add_to(report_map)

        if radius_meters:
            folium.Circle(
                location=center.to_tuple(),
                radius=radius_meters,
                color="#3b7d3c",
                fill=True,
                fill_opacity=0.05,
                tooltip=f"Rescue range ({radius_meters / 1000:.1f} km)",
            ).add_to(report_map)

    if cluster_markers:
        marker_group = MarkerCluster(name="Rescue Reports")
    else:
        marker_group = folium.FeatureGroup(name="Rescue Reports")

    for report in reports:
        color = get_status_color(report.status)

        popup_html = f"""
        <div style="font-family: Arial; min-width: 200px;">
            <h4 style="margin: 0;">{html.escape(report.animal_type)}</h4>
            <hr style="margin: 5px 0;">
            <b>Status:</b> {html.escape(report.status)}<br>
            <b>Address:</b> {html.escape(report.address or "Unknown")}<br>
            <b>Location:</b> {report.location.latitude:.4f}, {report.location.longitude:.4f}<br>
            {html.escape(report.description)}
        </div>
        """

        folium.Marker(
            location=report.location.to_tuple(),
            popup=folium.Popup(popup_html, max_width=300),
            tooltip=report.animal_type,
            icon=folium.Icon(color=color, icon="paw", prefix="fa"),
        ).add_to(marker_group)

    marker_group.add_to(report_map)

    folium.LayerControl(position="topright").add_to(report_map)

    title_html = f'''
    <div style="position: fixed;
                top: 10px; left: 50px;
                background-color: rgba(240,248,245,0.9);
                padding: 10px 20px;
                border-radius: 5px;
                z-index: 9999;
                font-family: Arial;">
        <h3 style="margin: 0; color: #3b7d3c;">{html.escape(title)}</h3>
        <p style="margin: 5px 0 0 0; color: #4a4a4a; font-size: 12px;">
            {len(reports)} reports
        </p>
    </div>
    '''
    report_map.get_root().html.add_child(folium.Element(title_html))

    logger.info(f"Created map with {len(reports)} reports")
    return report_map
