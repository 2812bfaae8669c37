# -*- coding: utf-8 -*-
"""Field detection
Candidates for latitude, longitude and address columns, scored against
keyword lists; the best scoring column of each kind is preselected.
"""
from __future__ import annotations
import re
from typing import Dict, List

LAT_KEYWORDS = ["lat", "latitude", "y"]
LON_KEYWORDS = ["lon", "lng", "long", "longitude", "x"]
ADDR_KEYWORDS = ["address", "addr", "location", "place", "street"]

# X/Y style pairs, used only when nothing better was found
PAIR_X_NAMES = {"x", "lon", "lng"}
PAIR_Y_NAMES = {"y", "lat"}

NORMALIZE_RE = re.compile(r"[\s_\-]+")


def normalize(name: str) -> str:
    n = name.strip().lower()
    n = NORMALIZE_RE.sub("", n)
    return n


def _score(name: str, keywords: List[str]) -> int:
    norm = normalize(name)
    # exact
    for kw in keywords:
        if norm == kw:
            return 100
    # single letters only count as exact matches
    long_kws = [kw for kw in keywords if len(kw) > 1]
    for kw in long_kws:
        if norm.startswith(kw) or norm.endswith(kw):
            return 70
    for kw in long_kws:
        if kw in norm:
            return 60
    return 0


def detect(header: List[str]) -> Dict[str, object]:
    lat_candidates = []  # (field, score)
    lon_candidates = []
    addr_candidates = []

    for f in header:
        s_lat = _score(f, LAT_KEYWORDS)
        s_lon = _score(f, LON_KEYWORDS)
        s_addr = _score(f, ADDR_KEYWORDS)
        if s_lat:
            lat_candidates.append((f, s_lat))
        if s_lon:
            lon_candidates.append((f, s_lon))
        if s_addr:
            addr_candidates.append((f, s_addr))

    norm_set = {normalize(f): f for f in header}
    if not lat_candidates or not lon_candidates:
        if any(k in norm_set for k in PAIR_X_NAMES) and any(k in norm_set for k in PAIR_Y_NAMES):
            for k in PAIR_Y_NAMES:
                if k in norm_set and all(normalize(c[0]) != k for c in lat_candidates):
                    lat_candidates.append((norm_set[k], 50))
            for k in PAIR_X_NAMES:
                if k in norm_set and all(normalize(c[0]) != k for c in lon_candidates):
                    lon_candidates.append((norm_set[k], 50))

    # stable sort keeps header order among equal scores
    lat_candidates.sort(key=lambda x: x[1], reverse=True)
    lon_candidates.sort(key=lambda x: x[1], reverse=True)
    addr_candidates.sort(key=lambda x: x[1], reverse=True)

    return {
        "lat_candidates": [f for f, _ in lat_candidates],
        "lon_candidates": [f for f, _ in lon_candidates],
        "address_candidates": [f for f, _ in addr_candidates],
        "chosen_lat": lat_candidates[0][0] if lat_candidates else None,
        "chosen_lon": lon_candidates[0][0] if lon_candidates else None,
        "chosen_address": addr_candidates[0][0] if addr_candidates else None,
    }
