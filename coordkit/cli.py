"""Interactive terminal front end.

One menu loop: each action prompts for input, calls the gateway, geometry or
location helpers, prints a table and, for successful lookups, records the
operation in the history file. Errors from the library are reported here and
the loop continues.
"""
from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from . import __version__, coordinate_formats as fmt, geometry, location_services as loc
from .coordinate_parser import parse_pair
from .gateway import GeocodingGateway
from .geocode_task import BatchGeocodeTask
from .geocoding_base import CoordkitError, GeocodeResult
from .history_store import HistoryStore
from .points_loader import PointsLoader, read_address_lines
from .provider_registry import get_display_name, iter_providers
from .settings_store import SettingsStore

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = 'COORDKIT_LOG_LEVEL'

Point = Tuple[float, float]


class App:
    """Holds the config, history and gateway handles for one session."""

    def __init__(self, settings: SettingsStore, history: HistoryStore,
                 gateway: Optional[GeocodingGateway] = None, console: Optional[Console] = None):
        self.settings = settings
        self.history = history
        self.gateway = gateway or GeocodingGateway(settings)
        self.console = console or Console()
        self.apply_features()

    @classmethod
    def create(cls) -> 'App':
        settings = SettingsStore()
        settings.load()
        history = HistoryStore()
        history.load()
        return cls(settings, history)

    def apply_features(self) -> None:
        self.history.set_save_enabled(self.settings.get_feature('saveHistory'))
        self.console.no_color = not self.settings.get_feature('colorOutput')

    # ---- menu ----
    def menu(self) -> List[Tuple[str, Callable[[], None]]]:
        return [
            ('Address to coordinates', self.forward_geocode),
            ('Coordinates to address', self.reverse_geocode),
            ('Batch geocoding', self.batch_geocode),
            ('Distance between points', self.distance),
            ('Bearing / compass direction', self.bearing),
            ('Polygon area and perimeter', self.polygon),
            ('Center point', self.center_point),
            ('Nearby places', self.nearby_places),
            ('Timezone', self.timezone),
            ('Sunrise / sunset', self.sun_times),
            ('Elevation', self.elevation),
            ('Random coordinate', self.random_coordinate),
            ('Format converter', self.format_converter),
            ('History', self.history_menu),
            ('API configuration', self.api_menu),
            ('Application settings', self.settings_menu),
        ]

    def choose(self, title: str, labels: Sequence[str]) -> int:
        """Numbered single-select; returns the index, or -1 for back/exit."""
        self.console.print(f"\n[bold cyan]{title}[/bold cyan]")
        for i, label in enumerate(labels, start=1):
            self.console.print(f"  {i:>2}. {label}")
        self.console.print("   0. Back / Exit")
        choice = IntPrompt.ask("Select", console=self.console,
                               choices=[str(i) for i in range(len(labels) + 1)], show_choices=False)
        return choice - 1

    def run(self) -> None:
        self.console.print(f"[bold]coordkit {__version__}[/bold] - geocoding and coordinate toolkit")
        entries = self.menu()
        while True:
            index = self.choose('Main menu', [label for label, _ in entries])
            if index < 0:
                self.console.print("Goodbye!")
                return
            self.dispatch(entries[index][1])

    def dispatch(self, action: Callable[[], None]) -> None:
        try:
            action()
        except CoordkitError as e:
            self.error(str(e))
        except ValueError as e:
            self.error(f"Invalid input: {e}")
        except OSError as e:
            self.error(f"File error: {e}")

    # ---- output helpers ----
    def error(self, message: str) -> None:
        self.console.print(f"[red]Error:[/red] {escape(message)}")

    def ok(self, message: str) -> None:
        self.console.print(f"[green]{message}[/green]")

    def ask_point(self, label: str = 'Coordinates (lat, lon)') -> Point:
        return parse_pair(Prompt.ask(label, console=self.console))

    def ask_points(self, minimum: int, what: str = 'point') -> List[Point]:
        source = Prompt.ask('Input', console=self.console, choices=['manual', 'file'], default='manual')
        if source == 'file':
            path = Prompt.ask('CSV file with latitude/longitude columns', console=self.console).strip()
            report = PointsLoader().load_points(path)
            for bad in report.errors:
                self.console.print(f"[yellow]Skipped row:[/yellow] {escape(bad.parse_error)}")
            self.console.print(f"Loaded {len(report.valid)} {what}(s) from {escape(path)}")
            return report.valid
        self.console.print(f"Enter one {what} per line as 'lat, lon'; empty line to finish "
                           f"(at least {minimum}).")
        points: List[Point] = []
        while True:
            raw = Prompt.ask(f"{what.capitalize()} {len(points) + 1}", console=self.console, default='',
                             show_default=False)
            if not raw.strip():
                return points
            try:
                points.append(parse_pair(raw))
            except ValueError as e:
                self.error(str(e))

    def ask_provider(self) -> str:
        active = self.settings.active_providers()
        preferred = self.settings.preferred_provider()
        if len(active) <= 1:
            return preferred
        return Prompt.ask('Provider', console=self.console, choices=active, default=preferred)

    def result_table(self, result: GeocodeResult, title: str = 'Result') -> Table:
        table = Table(title=title, show_header=False)
        table.add_column('Field', style='bold')
        table.add_column('Value')
        table.add_row('Address', result.formatted_address)
        table.add_row('Latitude', f"{result.latitude:.6f}")
        table.add_row('Longitude', f"{result.longitude:.6f}")
        table.add_row('Provider', result.provider_label)
        for key, value in result.details.items():
            table.add_row(key, value)
        if result.bounding_box:
            table.add_row('Bounding box', ', '.join(f"{v:.5f}" for v in result.bounding_box))
        return table

    # ---- geocoding ----
    def forward_geocode(self) -> None:
        address = Prompt.ask('Address', console=self.console).strip()
        if not address:
            raise ValueError('address must not be empty')
        provider = self.ask_provider()
        results = self.gateway.geocode(address, provider)
        if not results:
            self.console.print("[yellow]No results found.[/yellow]")
            return
        for i, result in enumerate(results, start=1):
            self.console.print(self.result_table(result, title=f"Result {i}"))
        self.history.append('geocode', address, [r.to_dict() for r in results], get_display_name(provider))

    def reverse_geocode(self) -> None:
        lat, lon = self.ask_point()
        provider = self.ask_provider()
        result = self.gateway.reverse_geocode(lat, lon, provider)
        if result is None:
            self.console.print("[yellow]No address found for these coordinates.[/yellow]")
            return
        self.console.print(self.result_table(result))
        self.history.append('reverse', f"{lat}, {lon}", result.to_dict(), get_display_name(provider))

    def _read_batch_input(self) -> List[str]:
        source = Prompt.ask('Input', console=self.console, choices=['manual', 'file'], default='manual')
        if source == 'manual':
            self.console.print("Enter one address per line; empty line to finish.")
            addresses = []
            while True:
                line = Prompt.ask(f"Address {len(addresses) + 1}", console=self.console, default='',
                                  show_default=False)
                if not line.strip():
                    return addresses
                addresses.append(line.strip())
        path = Prompt.ask('File path (.csv or .txt)', console=self.console).strip()
        if path.lower().endswith('.csv'):
            return PointsLoader().load_addresses(path)
        return read_address_lines(path)

    def batch_geocode(self) -> None:
        addresses = self._read_batch_input()
        if not addresses:
            self.console.print("[yellow]No addresses given.[/yellow]")
            return
        provider = self.ask_provider()

        def lookup(address: str) -> List[GeocodeResult]:
            return self.gateway.geocode(address, provider, limit=1)

        if self.settings.get_feature('showProgress'):
            with Progress(TextColumn("{task.description}"), BarColumn(), MofNCompleteColumn(),
                          console=self.console) as progress:
                bar = progress.add_task('Geocoding', total=len(addresses))
                task = BatchGeocodeTask(addresses, lookup,
                                        progress_callback=lambda done, total: progress.update(bar, completed=done))
                items = task.run()
        else:
            task = BatchGeocodeTask(addresses, lookup)
            items = task.run()

        table = Table(title='Batch results')
        table.add_column('Address')
        table.add_column('Latitude', justify='right')
        table.add_column('Longitude', justify='right')
        table.add_column('Status')
        for item in items:
            if item.found:
                table.add_row(item.address, f"{item.result.latitude:.6f}", f"{item.result.longitude:.6f}",
                              '[green]found[/green]')
            elif item.success:
                table.add_row(item.address, '-', '-', '[yellow]not found[/yellow]')
            else:
                table.add_row(item.address, '-', '-', f"[red]{escape(item.error)}[/red]")
        self.console.print(table)
        self.console.print(f"Found {task.added}, failed {task.failed}, processed {task.processed}.")
        snapshot = [{'address': i.address, 'success': i.success, 'error': i.error,
                     'result': i.result.to_dict() if i.result else None} for i in items]
        self.history.append('batch', f"{len(items)} addresses", snapshot, get_display_name(provider))

        if Confirm.ask('Save results to JSON?', console=self.console, default=False):
            path = Path(Prompt.ask('Output file', console=self.console, default='batch_results.json'))
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(snapshot, f, indent=2, ensure_ascii=False)
            self.ok(f"Saved to {path}")

    # ---- geometry ----
    def distance(self) -> None:
        p1 = self.ask_point('First point (lat, lon)')
        p2 = self.ask_point('Second point (lat, lon)')
        meters = geometry.distance(p1, p2)
        table = Table(show_header=False)
        table.add_row('Kilometers', f"{meters / 1000:.3f}")
        table.add_row('Meters', f"{meters:.1f}")
        table.add_row('Miles', f"{meters / 1609.344:.3f}")
        table.add_row('Nautical miles', f"{meters / 1852:.3f}")
        self.console.print(table)

    def bearing(self) -> None:
        p1 = self.ask_point('From (lat, lon)')
        p2 = self.ask_point('To (lat, lon)')
        value = geometry.bearing(p1, p2)
        self.console.print(f"Bearing: {value:.2f}° ({geometry.compass_direction(p1, p2)})")

    def polygon(self) -> None:
        vertices = self.ask_points(3, 'vertex')
        area = geometry.polygon_area(vertices)
        perimeter = geometry.polygon_perimeter(vertices)
        table = Table(show_header=False)
        table.add_row('Area (m²)', f"{area:,.1f}")
        table.add_row('Area (km²)', f"{area / 1e6:,.4f}")
        table.add_row('Area (ha)', f"{area / 1e4:,.2f}")
        table.add_row('Perimeter (km)', f"{perimeter / 1000:,.3f}")
        self.console.print(table)

    def center_point(self) -> None:
        points = self.ask_points(2)
        lat, lon = geometry.center(points)
        b_lat, b_lon = geometry.center_of_bounds(points)
        table = Table(show_header=True)
        table.add_column('Method')
        table.add_column('Latitude', justify='right')
        table.add_column('Longitude', justify='right')
        table.add_row('Geographic center', f"{lat:.6f}", f"{lon:.6f}")
        table.add_row('Center of bounds', f"{b_lat:.6f}", f"{b_lon:.6f}")
        self.console.print(table)

    def random_coordinate(self) -> None:
        region = Prompt.ask('Region', console=self.console, choices=list(geometry.REGIONS), default='global')
        lat, lon = geometry.random_coordinate(region)
        self.console.print(f"{lat:.6f}, {lon:.6f}")
        for name, url in fmt.map_links(lat, lon).items():
            self.console.print(f"  {name}: {url}")

    def format_converter(self) -> None:
        lat, lon = self.ask_point()
        table = Table(title='Formats', show_header=False)
        table.add_column('Format', style='bold')
        table.add_column('Value')
        table.add_row('Decimal', f"{lat:.6f}, {lon:.6f}")
        table.add_row('DMS', f"{fmt.to_dms(lat, 'lat')}, {fmt.to_dms(lon, 'lon')}")
        table.add_row('DM', f"{fmt.to_dm(lat, 'lat')}, {fmt.to_dm(lon, 'lon')}")
        try:
            table.add_row('UTM', str(fmt.to_utm(lat, lon)))
        except ValueError:
            table.add_row('UTM', 'n/a (polar region)')
        legacy = fmt.to_simplified_utm(lat, lon)
        table.add_row('Grid (approximate)', f"{legacy['zone']} {legacy['easting']}E {legacy['northing']}N")
        table.add_row('Geohash', fmt.to_geohash(lat, lon))
        table.add_row('Plus code', fmt.to_plus_code(lat, lon))
        for name, url in fmt.map_links(lat, lon).items():
            table.add_row(name, url)
        self.console.print(table)

    # ---- location services ----
    def nearby_places(self) -> None:
        lat, lon = self.ask_point()
        radius = IntPrompt.ask('Radius (m)', console=self.console, default=1000)
        places = loc.nearby_places(lat, lon, radius_m=radius)
        if not places:
            self.console.print("[yellow]Nothing found nearby.[/yellow]")
            return
        table = Table(title=f"Within {radius} m")
        table.add_column('Name')
        table.add_column('Type')
        table.add_column('Distance (m)', justify='right')
        for p in places:
            table.add_row(p.name, p.kind, f"{p.distance_m:.0f}")
        self.console.print(table)

    def timezone(self) -> None:
        lat, lon = self.ask_point()
        try:
            info = loc.timezone_info(lat, lon)
        except CoordkitError as e:
            logger.info("timezone lookup failed, estimating from longitude: %s", e)
            offset = loc.estimate_utc_offset(lon)
            self.console.print(f"[yellow]Timezone service unavailable ({e}).[/yellow]")
            self.console.print(f"Estimated offset: UTC{offset:+d}")
            return
        table = Table(show_header=False)
        table.add_row('Zone', info.zone_name)
        table.add_row('Country', info.country_code)
        table.add_row('Local time', info.local_time.strftime('%Y-%m-%d %H:%M:%S'))
        table.add_row('Offset', info.utc_offset_label)
        table.add_row('DST', 'yes' if info.dst else 'no')
        self.console.print(table)

    def sun_times(self) -> None:
        lat, lon = self.ask_point()
        times = loc.sun_times(lat, lon)
        table = Table(title=f"Sun times {times.day.isoformat()} (UTC)")
        table.add_column('Event')
        table.add_column('Time', justify='right')
        for key, label in loc.SUN_EVENTS:
            table.add_row(label, times.events[key].strftime('%H:%M:%S'))
        hours, minutes = divmod(times.day_length_minutes, 60)
        table.add_row('Day length', f"{hours}h {minutes}m")
        self.console.print(table)

    def elevation(self) -> None:
        lat, lon = self.ask_point()
        meters = loc.elevation(lat, lon)
        if meters is None:
            self.console.print("[yellow]No elevation data for this point.[/yellow]")
            return
        self.console.print(f"Elevation: {meters:.0f} m ({meters * 3.28084:.0f} ft), "
                           f"{loc.describe_elevation(meters)}")

    # ---- history ----
    def history_menu(self) -> None:
        index = self.choose('History', ['View recent', 'Clear', 'Export'])
        if index == 0:
            limit = IntPrompt.ask('How many', console=self.console, default=10)
            entries = self.history.recent(limit)
            if not entries:
                self.console.print("History is empty.")
                return
            table = Table(title='History')
            table.add_column('Time')
            table.add_column('Type')
            table.add_column('Input')
            table.add_column('Provider')
            for e in entries:
                table.add_row(e.timestamp, e.type, e.input, e.provider)
            self.console.print(table)
        elif index == 1:
            if Confirm.ask('Clear all history?', console=self.console, default=False):
                self.history.clear()
                self.ok('History cleared.')
        elif index == 2:
            path = self.history.export_all(Path(HistoryStore.default_export_name()))
            self.ok(f"Exported to {path}")

    # ---- API configuration ----
    def api_menu(self) -> None:
        index = self.choose('API configuration', [
            'Set API key', 'View configuration', 'Set default provider',
            'Activate / deactivate provider', 'Test connections',
        ])
        if index == 0:
            self.set_api_key()
        elif index == 1:
            self.view_configuration()
        elif index == 2:
            provider = Prompt.ask('Default provider', console=self.console,
                                  choices=self.settings.active_providers() or ['osm'],
                                  default=self.settings.preferred_provider())
            self.settings.set_default_provider(provider)
            self.ok(f"Default provider: {get_display_name(provider)}")
        elif index == 3:
            self.toggle_provider()
        elif index == 4:
            self.test_connections()

    def set_api_key(self) -> None:
        keyed = [p.provider_id for p in iter_providers() if p.requires_credential]
        provider = Prompt.ask('Provider', console=self.console, choices=keyed)
        secret = Prompt.ask('API key (empty to remove)', console=self.console, password=True, default='',
                            show_default=False)
        self.settings.set_credential(provider, secret)
        if secret.strip():
            self.settings.set_provider_active(provider, True)
            self.ok(f"{get_display_name(provider)} key saved and provider activated.")
        else:
            self.ok(f"{get_display_name(provider)} key removed.")

    def view_configuration(self) -> None:
        data = self.settings.export_all()
        table = Table(title='Providers')
        table.add_column('Id')
        table.add_column('Name')
        table.add_column('Active')
        table.add_column('Key')
        for pid, entry in data['providers'].items():
            key = entry.get('credential') if entry['requiresKey'] else 'not needed'
            table.add_row(pid, entry['name'], 'yes' if entry['active'] else 'no', key or '[red]missing[/red]')
        self.console.print(table)
        self.console.print(f"Default provider: {get_display_name(data['defaultProvider'])}")
        for name, value in data['features'].items():
            self.console.print(f"  {name}: {'on' if value else 'off'}")

    def toggle_provider(self) -> None:
        ids = [p.provider_id for p in iter_providers()]
        provider = Prompt.ask('Provider', console=self.console, choices=ids)
        active = provider in self.settings.active_providers()
        self.settings.set_provider_active(provider, not active)
        self.ok(f"{get_display_name(provider)} {'deactivated' if active else 'activated'}.")
        if not self.settings.active_providers():
            self.console.print("[yellow]No provider is active; lookups will use OpenStreetMap.[/yellow]")

    def test_connections(self) -> None:
        table = Table(title='Connection test')
        table.add_column('Provider')
        table.add_column('Status')
        for pid in self.settings.active_providers():
            try:
                results = self.gateway.geocode('London', pid, limit=1)
                status = '[green]OK[/green]' if results else '[yellow]no results[/yellow]'
            except CoordkitError as e:
                status = f"[red]{escape(str(e))}[/red]"
            table.add_row(get_display_name(pid), status)
        self.console.print(table)

    # ---- application settings ----
    def settings_menu(self) -> None:
        names = list(self.settings.config.features)
        labels = [f"{n}: {'on' if self.settings.get_feature(n) else 'off'}" for n in names]
        index = self.choose('Application settings (toggle)', labels)
        if index < 0:
            return
        name = names[index]
        self.settings.set_feature(name, not self.settings.get_feature(name))
        self.apply_features()
        self.ok(f"{name} is now {'on' if self.settings.get_feature(name) else 'off'}.")


def setup_logging() -> None:
    level = getattr(logging, os.environ.get(LOG_LEVEL_ENV, 'WARNING').upper(), None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')


def main() -> int:
    setup_logging()
    app = App.create()
    try:
        app.run()
    except (KeyboardInterrupt, EOFError):
        app.console.print("\nGoodbye!")
    return 0
