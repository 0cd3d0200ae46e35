"""Core package for the document insight bot.

Turns the text of an offer letter, enrollment confirmation or visa letter
into a structured analysis. The pipeline is a LangGraph state machine and
always returns a complete result, degrading instead of raising.
"""

from .analysis.schemas import AnalysisOutcome, AnalysisResult, DegradationTier, ProcessingMetrics
from .pipeline import DocumentAnalysisPipeline, PipelineConfig, analyze_document

__all__ = [
    "AnalysisOutcome",
    "AnalysisResult",
    "DegradationTier",
    "DocumentAnalysisPipeline",
    "PipelineConfig",
    "ProcessingMetrics",
    "analyze_document",
]
