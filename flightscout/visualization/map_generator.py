"""
Map Generator
Creates interactive Folium maps of scanned aircraft and ranked airports.
"""

from typing import List, Optional, Sequence

import folium

from flightscout.acquisition.client import Airport
from flightscout.config import Colors, Settings
from flightscout.models import AircraftEntry, AircraftScanResult, AirportDistanceRecord
from flightscout.utils import format_distance, validate_coordinates

MAP_TILE_URLS = {
    "CartoDB.DarkMatter": "https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}{r}.png",
    "CartoDB.Positron": "https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}{r}.png",
    "OpenStreetMap": "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
}


class MapGenerator:
    """
    Generates interactive maps using Folium.

    Supports visualization of:
    - Reference airports
    - Live aircraft, coloured by distance rank
    - Origin airports ranked by distance from a reference
    """

    def __init__(
        self,
        center_lat: float,
        center_lon: float,
        zoom: int = Settings.DEFAULT_ZOOM,
        style: str = Settings.DEFAULT_MAP_STYLE,
    ):
        """
        Initialize map generator.

        Args:
            center_lat: Center latitude (usually the first reference airport)
            center_lon: Center longitude
            zoom: Initial zoom level (default: 3)
            style: Map style/theme (default: CartoDB.Positron)
        """
        self.center_lat = center_lat
        self.center_lon = center_lon
        self.zoom = zoom
        self.style = style

        self.map = self._create_base_map()

    @classmethod
    def for_references(cls, references: Sequence[Airport], **kwargs) -> "MapGenerator":
        """Create a map centred on the first reference airport, with all references marked."""
        located = [airport for airport in references if airport.has_coordinates]
        if not located:
            raise ValueError("At least one reference airport with coordinates is required")

        generator = cls(located[0].latitude, located[0].longitude, **kwargs)
        for airport in located:
            generator.add_reference_airport(airport)
        return generator

    def _create_base_map(self) -> folium.Map:
        """Create base Folium map."""
        tiles = MAP_TILE_URLS.get(self.style, self.style)

        return folium.Map(
            location=[self.center_lat, self.center_lon],
            zoom_start=self.zoom,
            tiles=tiles,
            attr="flightscout",
        )

    def add_reference_airport(self, airport: Airport):
        """Add a reference airport marker."""
        if not airport.has_coordinates:
            return

        folium.Marker(
            [airport.latitude, airport.longitude],
            popup=f"{airport.name} ({airport.iata})",
            tooltip=airport.iata,
            icon=folium.Icon(color=Colors.REFERENCE_COLOR, icon="plane", prefix="fa"),
        ).add_to(self.map)

    def add_aircraft(self, entry: AircraftEntry, rank: int):
        """
        Add a live aircraft marker.

        Args:
            entry: Scanned aircraft
            rank: Position in the distance-sorted scan (1 = nearest)
        """
        lat, lon = entry.coordinates
        if not validate_coordinates(lat, lon):
            return

        color = Colors.ON_GROUND_COLOR if entry.on_ground else self._get_rank_color(rank)
        reference = entry.nearest_reference
        distance = (
            f"{format_distance(reference.distance_km)} from {reference.code}"
            if reference
            else "N/A"
        )

        folium.CircleMarker(
            location=[lat, lon],
            radius=Settings.MARKER_RADIUS,
            color=color,
            fill=True,
            fill_color=color,
            opacity=Settings.MARKER_OPACITY,
            fill_opacity=Settings.MARKER_FILL_OPACITY,
            popup=self._create_aircraft_popup(entry, distance),
            tooltip=f"#{rank} {entry.aircraft_code} {entry.registration}",
        ).add_to(self.map)

    def _create_aircraft_popup(self, entry: AircraftEntry, distance: str) -> str:
        route = f"{entry.origin_code or '?'} → {entry.destination_code or '?'}"
        return f"""
        <div style='font-family: Arial; min-width: 180px;'>
            <h4 style='margin: 0 0 10px 0;'>✈️ {entry.aircraft_code}</h4>
            <table style='width: 100%; border-collapse: collapse;'>
                <tr><td><b>Flight:</b></td><td>{entry.flight_code or '-'}</td></tr>
                <tr><td><b>Registration:</b></td><td>{entry.registration or '-'}</td></tr>
                <tr><td><b>Route:</b></td><td>{route}</td></tr>
                <tr><td><b>Distance:</b></td><td>{distance}</td></tr>
                <tr><td><b>On ground:</b></td><td>{'yes' if entry.on_ground else 'no'}</td></tr>
            </table>
        </div>
        """

    def add_scan_result(self, result: AircraftScanResult):
        """Add every scanned aircraft, ranked by distance."""
        for rank, entry in enumerate(result.flights, start=1):
            self.add_aircraft(entry, rank)

    def add_ranked_airport(self, record: AirportDistanceRecord, rank: int):
        """
        Add an origin airport from the distance ranking.

        Args:
            record: Distance ranking record with coordinates
            rank: Ranking position (1 = closest)
        """
        if record.coordinates is None:
            return

        color = self._get_rank_color(rank)
        folium.CircleMarker(
            location=list(record.coordinates),
            radius=Settings.MARKER_RADIUS + min(record.flight_count, 10),
            color=color,
            fill=True,
            fill_color=color,
            opacity=Settings.MARKER_OPACITY,
            fill_opacity=Settings.MARKER_FILL_OPACITY,
            popup=(
                f"#{rank} {record.code} ({record.name}, {record.country_name})<br>"
                f"{format_distance(record.distance_km)} - {record.flight_count} flights"
            ),
            tooltip=f"#{rank} {record.code}",
        ).add_to(self.map)

    def add_distance_ranking(self, records: List[AirportDistanceRecord]):
        for rank, record in enumerate(records, start=1):
            self.add_ranked_airport(record, rank)

    def _get_rank_color(self, rank: int) -> str:
        """
        Get color based on rank.

        Args:
            rank: Rank (1 = closest)

        Returns:
            Color hex code
        """
        return Colors.RANKED_COLORS[min(rank - 1, len(Colors.RANKED_COLORS) - 1)]

    def save(self, filename: str, title: Optional[str] = None):
        """
        Save map to HTML file.

        Args:
            filename: Output filename (should end in .html)
            title: Page title (default: 'flightscout Map')
        """
        self.map.save(filename)

        with open(filename, "r", encoding="utf-8") as f:
            html_content = f.read()
        insert = f"<head>\n    <title>{title or 'flightscout Map'}</title>"
        html_content = html_content.replace("<head>", insert, 1)
        with open(filename, "w", encoding="utf-8") as f:
            f.write(html_content)

        print(f"✅ Map saved to: {filename}")
