"""
Report generation module.

Provides the ReportGenerator that runs each package intelligence operation.
"""

from pkgintel.reports.generator import ReportGenerator

__all__ = ["ReportGenerator"]
