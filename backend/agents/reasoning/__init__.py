"""
LLM Reasoning Layer

Flow registry, prompts and the OpenAI-backed flow runner.
"""

from .flows import FlowBackend, FlowDefinition, MARKET_ENTRY_FLOW, STRATEGIC_RECOMMENDATIONS_FLOW, get_flow
from .llm_client import ConsultationLLMClient, LLMConfig

__all__ = [
    'FlowBackend',
    'FlowDefinition',
    'MARKET_ENTRY_FLOW',
    'STRATEGIC_RECOMMENDATIONS_FLOW',
    'get_flow',
    'ConsultationLLMClient',
    'LLMConfig',
]
