# -*- coding: utf-8 -*-
"""CSV basic inspection
- encoding guess (BOM -> chardet -> fallback)
- delimiter guess (csv.Sniffer)
- header extraction and row iteration
"""
from __future__ import annotations
import codecs
import csv
from typing import Dict, Iterator, List

import chardet

BOM_TABLE = [
    (codecs.BOM_UTF8, 'utf-8-sig'),
    (codecs.BOM_UTF16_LE, 'utf-16-le'),
    (codecs.BOM_UTF16_BE, 'utf-16-be'),
]


class CsvBasicMeta(dict):
    """Simple dict subclass for clarity."""
    pass


class CsvInspector:
    SAMPLE_SIZE = 65536

    def detect_encoding(self, path: str) -> str:
        with open(path, 'rb') as f:
            raw = f.read(self.SAMPLE_SIZE)
        for bom, name in BOM_TABLE:
            if raw.startswith(bom):
                return name
        # valid UTF-8 is taken as is; chardet only for the rest
        try:
            raw.decode('utf-8')
            return 'utf-8'
        except UnicodeDecodeError:
            pass
        res = chardet.detect(raw)
        enc = res.get('encoding') or ''
        conf = res.get('confidence') or 0
        if enc and conf >= 0.5:
            return enc
        return 'latin-1'

    def sniff(self, text: str) -> str:
        try:
            dialect = csv.Sniffer().sniff(text, delimiters=',;\t|')
            return dialect.delimiter
        except csv.Error:
            return ','

    def inspect(self, path: str) -> CsvBasicMeta:
        enc = self.detect_encoding(path)
        with open(path, 'r', encoding=enc, errors='replace') as f:
            sample = f.read(self.SAMPLE_SIZE)
        delimiter = self.sniff(sample)
        with open(path, 'r', encoding=enc, errors='replace', newline='') as f:
            reader = csv.reader(f, delimiter=delimiter)
            header: List[str] = next(reader, [])
        return CsvBasicMeta(encoding=enc, delimiter=delimiter, header=header[:50])

    def iter_records(self, path: str, meta: CsvBasicMeta) -> Iterator[Dict[str, str]]:
        """Yield rows as header -> value dicts; short rows are padded."""
        header = meta['header']
        with open(path, 'r', encoding=meta['encoding'], errors='replace', newline='') as f:
            reader = csv.reader(f, delimiter=meta['delimiter'])
            next(reader, None)
            for row in reader:
                if not row or not any(cell.strip() for cell in row):
                    continue
                if len(row) < len(header):
                    row = row + [''] * (len(header) - len(row))
                yield dict(zip(header, row))
