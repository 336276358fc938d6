"""
Chat Orchestrator - tool-calling chat over the Gemini API

This package provides:
- A bounded tool-calling orchestration loop
- Tools for weather, exchange rates, translation, summarization,
  web search, URL fetching, arithmetic and the clock
- A FastAPI server exposing POST /api/chat
- Interactive CLI for testing
"""

from .orchestrator import ChatOrchestrator, run_chat
from .models import ChatResult, HistoryMessage

__all__ = [
    "ChatOrchestrator",
    "ChatResult",
    "HistoryMessage",
    "run_chat",
]

__version__ = "0.1.0"
