# -*- coding: utf-8 -*-
"""Point / address loaders for batch input.
Reads a CSV through CsvInspector and turns rows into coordinates or address
strings. Rows that fail to parse are kept with a parse error instead of
aborting the whole file.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .coordinate_parser import parse_lat, parse_lon
from .csv_inspector import CsvInspector
from . import field_detector


@dataclass
class LoadedPoint:
    row: Dict[str, str]
    lat: Optional[float] = None
    lon: Optional[float] = None
    parse_error: str = ''

    @property
    def ok(self) -> bool:
        return self.lat is not None and self.lon is not None


@dataclass
class LoadReport:
    points: List[LoadedPoint] = field(default_factory=list)

    @property
    def valid(self) -> List[Tuple[float, float]]:
        return [(p.lat, p.lon) for p in self.points if p.ok]

    @property
    def errors(self) -> List[LoadedPoint]:
        return [p for p in self.points if not p.ok]


class PointsLoader:
    def __init__(self, inspector: Optional[CsvInspector] = None):
        self.inspector = inspector or CsvInspector()

    def load_points(self, csv_path: str, lat_field: Optional[str] = None,
                    lon_field: Optional[str] = None) -> LoadReport:
        meta = self.inspector.inspect(csv_path)
        header = meta['header']
        if lat_field is None or lon_field is None:
            found = field_detector.detect(header)
            lat_field = lat_field or found['chosen_lat']
            lon_field = lon_field or found['chosen_lon']
        if lat_field not in header or lon_field not in header:
            raise ValueError('Latitude/Longitude field not found in header')

        report = LoadReport()
        for row in self.inspector.iter_records(csv_path, meta):
            try:
                lat = parse_lat(row[lat_field])
                lon = parse_lon(row[lon_field])
            except ValueError as e:
                report.points.append(LoadedPoint(row, parse_error=str(e)))
                continue
            report.points.append(LoadedPoint(row, lat, lon))
        return report

    def load_addresses(self, csv_path: str, address_field: Optional[str] = None) -> List[str]:
        meta = self.inspector.inspect(csv_path)
        header = meta['header']
        if address_field is None:
            address_field = field_detector.detect(header)['chosen_address']
        if address_field is None and len(header) == 1:
            # single column file without a recognizable header name
            address_field = header[0]
        if address_field not in header:
            raise ValueError('Address field not found in header')
        addresses = []
        for row in self.inspector.iter_records(csv_path, meta):
            value = (row.get(address_field) or '').strip()
            if value:
                addresses.append(value)
        return addresses


def read_address_lines(path: str) -> List[str]:
    """Plain text input: one address per non-empty line."""
    inspector = CsvInspector()
    enc = inspector.detect_encoding(path)
    with open(path, 'r', encoding=enc, errors='replace') as f:
        return [line.strip() for line in f if line.strip()]
