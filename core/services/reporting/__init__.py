"""
Core Report Service

Provides layout building, PDF delivery and artifact generation for the
registered document types.
"""

from .service import ReportService, GeneratedArtifact

__all__ = ['ReportService', 'GeneratedArtifact']
