"""
loader.py — Read and normalize MasterBubbleLookup reference files.

Supports .xlsx (first sheet), .csv/.tsv and .numbers (Apple) files.
Uses config/whip_rules.yaml for the header-to-field column mappings.

Two loading modes:
- load_lookup_table(): Reads a file from disk
- load_lookup_upload(): Reads a Streamlit UploadedFile (anything with .name / .getvalue())

A reference file that cannot be read or lacks the required columns raises
LookupTableError; nothing is half-loaded.
"""

from __future__ import annotations

import io
import tempfile
import warnings
from pathlib import Path

import pandas as pd
import yaml

from powerwhip.lookup import PRICE_FIELDS, TEXT_FIELDS, LookupRow, LookupTable


class LookupTableError(Exception):
    """The reference table could not be loaded."""


# ── Config ─────────────────────────────────────────────────

RULES_PATH = Path(__file__).resolve().parent.parent / "config" / "whip_rules.yaml"


def load_rules() -> dict:
    with open(RULES_PATH) as f:
        return yaml.safe_load(f)


# ── File reading ───────────────────────────────────────────

def _read_numbers(filepath: Path) -> pd.DataFrame:
    from numbers_parser import Document
    doc = Document(str(filepath))
    sheet = doc.sheets[0]
    table = sheet.tables[0]
    headers = []
    for c in range(table.num_cols):
        val = table.cell(0, c).value
        headers.append(str(val).strip() if val is not None else f"col_{c}")
    rows = []
    for r in range(1, table.num_rows):
        row = [table.cell(r, c).value for c in range(table.num_cols)]
        rows.append(row)
    return pd.DataFrame(rows, columns=headers)


def _check_extension(name: str, rules: dict) -> str:
    ext = Path(name).suffix.lower()
    if ext not in rules.get("supported_extensions", []):
        raise LookupTableError(f"Unsupported reference file format: {name}")
    return ext


def _read_file(filepath: Path, rules: dict) -> pd.DataFrame:
    ext = _check_extension(filepath.name, rules)
    try:
        if ext == ".numbers":
            return _read_numbers(filepath)
        elif ext == ".xlsx":
            return pd.read_excel(filepath, sheet_name=0, engine="openpyxl")
        else:
            sep = "\t" if ext == ".tsv" else ","
            return pd.read_csv(filepath, sep=sep)
    except Exception as e:
        raise LookupTableError(f"Could not read {filepath.name}: {e}") from e


def _read_uploaded_file(uploaded_file, rules: dict) -> pd.DataFrame:
    name = uploaded_file.name
    ext = _check_extension(name, rules)
    try:
        if ext == ".numbers":
            # numbers-parser requires a file path, so write to temp file
            with tempfile.NamedTemporaryFile(suffix=".numbers", delete=False) as tmp:
                tmp.write(uploaded_file.getvalue())
                tmp.flush()
                return _read_numbers(Path(tmp.name))
        elif ext == ".xlsx":
            return pd.read_excel(io.BytesIO(uploaded_file.getvalue()), sheet_name=0, engine="openpyxl")
        else:
            sep = "\t" if ext == ".tsv" else ","
            return pd.read_csv(io.BytesIO(uploaded_file.getvalue()), sep=sep)
    except Exception as e:
        raise LookupTableError(f"Could not read uploaded file {name}: {e}") from e


# ── Column normalization ───────────────────────────────────

def _map_columns(df: pd.DataFrame, mapping: dict[str, dict]) -> dict[str, str]:
    """
    Map field names to actual column names using a two-pass strategy:
    1. Exact match (case-insensitive, stripped) for every field
    2. Contains match (case-insensitive substring) for fields still unmapped
    A column is claimed by at most one field.
    Returns {field_name: actual_column_name}.
    """
    df_cols_lower = {str(c).strip().lower(): c for c in df.columns}
    result = {}

    for field_name, candidates in mapping.items():
        for cand in candidates.get("exact", []):
            col = df_cols_lower.get(cand.strip().lower())
            if col is not None and col not in result.values():
                result[field_name] = col
                break

    for field_name, candidates in mapping.items():
        if field_name in result:
            continue
        found = False
        for cand in candidates.get("contains", []):
            cand_lower = cand.strip().lower()
            for col_lower, col_orig in df_cols_lower.items():
                if cand_lower in col_lower and col_orig not in result.values():
                    result[field_name] = col_orig
                    found = True
                    break
            if found:
                break

    return result


def _cell_text(value) -> str:
    """Cell as text; whole-number floats lose their '.0' so 20.0 reads as '20'."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _safe_float(series: pd.Series) -> pd.Series:
    """Coerce a series to float, replacing invalid values with NaN."""
    return pd.to_numeric(series, errors="coerce")


def _safe_str(series: pd.Series) -> pd.Series:
    return series.map(_cell_text)


def _normalize_lookup(df: pd.DataFrame, col_map: dict[str, str]) -> pd.DataFrame:
    out = pd.DataFrame(index=df.index)
    for field in TEXT_FIELDS:
        if field in col_map:
            out[field] = _safe_str(df[col_map[field]])
        else:
            out[field] = ""
    for field in PRICE_FIELDS:
        if field in col_map:
            out[field] = _safe_float(df[col_map[field]])
        else:
            out[field] = float("nan")
    return out


def _to_row(record: dict) -> LookupRow:
    values = {f: record[f] for f in TEXT_FIELDS}
    for f in PRICE_FIELDS:
        values[f] = None if pd.isna(record[f]) else float(record[f])
    return LookupRow(**values)


def _build_table(fname: str, df: pd.DataFrame, rules: dict) -> LookupTable:
    if df is None or df.empty:
        raise LookupTableError(f"Reference file is empty: {fname}")

    lookup_cfg = rules["lookup"]
    col_map = _map_columns(df, lookup_cfg["column_mappings"])

    missing = [f for f in lookup_cfg.get("required_fields", []) if f not in col_map]
    if missing:
        raise LookupTableError(
            f"{fname}: missing required columns {missing}. "
            f"Found: {[str(c) for c in df.columns]}"
        )

    normalized = _normalize_lookup(df, col_map)

    # Drop rows without a receptacle
    orig_len = len(normalized)
    normalized = normalized[normalized["receptacle"].str.len() > 0]
    skipped_rows = orig_len - len(normalized)

    notes = []
    if skipped_rows:
        msg = f"{fname}: skipped {skipped_rows} row(s) with no receptacle"
        warnings.warn(msg)
        notes.append(msg)

    unmapped = [str(c) for c in df.columns if c not in col_map.values()]
    if unmapped:
        notes.append(f"{fname}: ignored columns {unmapped}")

    rows = tuple(_to_row(rec) for rec in normalized.to_dict("records"))
    return LookupTable(
        rows=rows,
        source_file=fname,
        columns_mapped=tuple(col_map.keys()),
        skipped_rows=skipped_rows,
        warnings=tuple(notes),
    )


# ── Public API ─────────────────────────────────────────────

def load_lookup_table(path: str | Path, rules: dict | None = None) -> LookupTable:
    """Read a reference file from disk into a LookupTable."""
    if rules is None:
        rules = load_rules()

    filepath = Path(path).expanduser()
    if not filepath.is_file():
        raise LookupTableError(f"Reference file not found: {filepath}")

    df = _read_file(filepath, rules)
    return _build_table(filepath.name, df, rules)


def load_lookup_upload(uploaded_file, rules: dict | None = None) -> LookupTable:
    """Same as load_lookup_table() but reads a Streamlit UploadedFile."""
    if rules is None:
        rules = load_rules()

    if uploaded_file is None:
        raise LookupTableError("No reference file uploaded")

    df = _read_uploaded_file(uploaded_file, rules)
    return _build_table(uploaded_file.name, df, rules)
