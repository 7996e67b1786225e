# stockmeta/services/csv_export.py
from __future__ import annotations

import csv
import io
from typing import Iterable

from stockmeta.ml.categories import coerce_category
from stockmeta.schemas.metadata import CsvRow
from stockmeta.services.normalizer import NormalizationPolicy, normalize_keywords, normalize_title

ADOBE_CSV_HEADER = ("Filename", "Title", "Keywords", "Category", "Releases")


def render_adobe_csv(rows: Iterable[CsvRow], policy: NormalizationPolicy = NormalizationPolicy()) -> str:
    """Adobe Stock 上傳用 CSV；每列重新套用正規化（前端可能手動改過）"""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(ADOBE_CSV_HEADER)
    for row in rows:
        keywords = normalize_keywords(row.keywords, policy.keywords_max)
        writer.writerow([
            row.filename.strip(),
            normalize_title(row.title, policy),
            ", ".join(keywords),
            coerce_category(row.category, policy.category_fallback),
            row.releases.strip(),
        ])
    return buf.getvalue()
