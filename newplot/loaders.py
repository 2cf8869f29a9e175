"""Load tabular files into DataFrames for the builder."""

from __future__ import annotations

import io
import json
import logging
import os
from typing import Optional

import pandas as pd

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".csv", ".tsv", ".txt", ".parquet", ".xls", ".xlsx", ".json")


def _read_delimited(bio: io.BytesIO, tab_first: bool) -> pd.DataFrame:
    # Multiple separators and encodings to be robust to Windows exports
    seps = ["\t", ",", ";", "|"] if tab_first else [",", ";", "\t", "|"]
    encs = ["utf-8", "utf-8-sig", "cp1252", "latin1", "utf-16"]
    first_ok = None
    last_err = None
    for sep in seps:
        for enc in encs:
            bio.seek(0)
            try:
                df = pd.read_csv(bio, sep=sep, encoding=enc)
            except ValueError as e:
                last_err = e
                continue
            if df.shape[1] > 1:
                logger.debug("Parsed delimited file with sep=%r encoding=%s", sep, enc)
                return df
            if first_ok is None:
                first_ok = df
            break
    if first_ok is not None:
        return first_ok
    raise RuntimeError(f"CSV/TSV parse failed. Last error: {last_err}")


def read_table(name: str, data: bytes, sheet: Optional[str] = None) -> pd.DataFrame:
    """Parse ``data`` according to the suffix of ``name``."""
    lname = name.lower()
    bio = io.BytesIO(data)

    if lname.endswith((".csv", ".tsv", ".txt")):
        return _read_delimited(bio, tab_first=lname.endswith(".tsv"))

    if lname.endswith(".parquet"):
        return pd.read_parquet(bio)

    if lname.endswith((".xls", ".xlsx")):
        return pd.read_excel(bio, sheet_name=sheet) if sheet else pd.read_excel(bio)

    if lname.endswith(".json"):
        try:
            obj = json.loads(data)
        except ValueError:
            # more than one document: JSON lines
            return pd.read_json(bio, lines=True)
        if isinstance(obj, dict) and not any(isinstance(v, (list, dict)) for v in obj.values()):
            obj = [obj]
        if isinstance(obj, list):
            return pd.json_normalize(obj)
        return pd.DataFrame(obj)

    raise ValueError("Unsupported file type. Use CSV, TSV, Excel, Parquet, or JSON.")


def read_table_path(path: str, sheet: Optional[str] = None) -> pd.DataFrame:
    with open(path, "rb") as fh:
        data = fh.read()
    df = read_table(os.path.basename(path), data, sheet=sheet)
    logger.info("Loaded %d rows x %d columns from %s", len(df), df.shape[1], path)
    return df
