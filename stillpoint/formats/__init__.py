"""Model file reading and steady state output."""

from stillpoint.formats.csv_sink import CsvSink
from stillpoint.formats.model_file import parse_model, read_model

__all__ = ["CsvSink", "parse_model", "read_model"]
