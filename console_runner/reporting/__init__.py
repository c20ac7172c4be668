"""Reporting module - console report, summaries and output files."""

from .case_writer import TestCaseOutputWriter
from .json_reporter import JsonReporter
from .output_manager import OutputManager
from .result_reporter import ResultReporter
from .summary import ReportSummary
from .xml_writer import XmlResultWriter

__all__ = [
    "TestCaseOutputWriter",
    "JsonReporter",
    "OutputManager",
    "ResultReporter",
    "ReportSummary",
    "XmlResultWriter",
]
