"""
Service layer for frumle.
"""

from .analysis_service import AnalysisRequest, AnalysisService

__all__ = [
    "AnalysisRequest",
    "AnalysisService",
]
