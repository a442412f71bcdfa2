"""Spreadsheet / CSV decoding into raw rows."""

from .reader import SUPPORTED_SUFFIXES, RawRow, TabularDecodeError, read_tabular_file

__all__ = ["SUPPORTED_SUFFIXES", "RawRow", "TabularDecodeError", "read_tabular_file"]
