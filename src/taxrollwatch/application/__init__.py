"""
Application layer package.

Contains service classes that orchestrate business workflows.
Services coordinate between domain models and infrastructure.
"""

from taxrollwatch.application.ingestion_service import (
    IngestionService,
    IngestResult,
    compare_files,
)
from taxrollwatch.application.report_builder import ReportBuilder, build_report

__all__ = [
    "IngestionService",
    "IngestResult",
    "compare_files",
    "ReportBuilder",
    "build_report",
]
