"""Loading of bank CSV exports and rules files."""

from .csv_export import read_raw_records
from .utils import load_raw_records_from_csv, load_rules

__all__ = ["load_raw_records_from_csv", "load_rules", "read_raw_records"]
