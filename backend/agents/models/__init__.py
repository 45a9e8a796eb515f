"""
Agent Data Models

Flow contracts and the combined analysis report.
"""

from .consultation import (
    MarketEntryInput, MarketEntryOutput,
    StrategicRecommendationsInput, StrategicRecommendationsOutput,
    AnalysisReport,
)

__all__ = [
    'MarketEntryInput', 'MarketEntryOutput',
    'StrategicRecommendationsInput', 'StrategicRecommendationsOutput',
    'AnalysisReport',
]
