"""
DuckDuckGo Web Search Tool

Provides web search via the DuckDuckGo Instant Answer API (free, no key).
"""

import logging

import requests

from ..errors import ToolExecutionError
from ..models import ToolsConfig
from .registry import CapabilityDescriptor, ToolDefinition, object_schema

logger = logging.getLogger(__name__)

SEARCH_URL = "https://api.duckduckgo.com/"
MAX_RESULTS = 10


def search(query: str, num_results: int = 5, timeout: int = 15) -> dict:
    """
    Search the web using DuckDuckGo Instant Answers.

    Args:
        query: The search query
        num_results: Maximum number of related topics to return (capped at 10)
        timeout: Request timeout in seconds

    Returns:
        Dictionary with the abstract (if any) and related topics
    """
    if not query or not query.strip():
        raise ToolExecutionError(
            'Search query is empty. Expected JSON: {"query": "your search terms"}'
        )

    try:
        response = requests.get(
            SEARCH_URL,
            params={"q": query, "format": "json", "no_html": 1},
            timeout=timeout,
        )
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.RequestException as e:
        logger.error(f"Search failed: {e}")
        raise ToolExecutionError(f"search service unavailable: {e}") from e
    except ValueError as e:
        raise ToolExecutionError(f"unexpected search response: {e}") from e

    limit = max(0, min(num_results, MAX_RESULTS))
    results = []
    for topic in (data.get("RelatedTopics") or [])[:limit]:
        if topic.get("Text"):
            results.append({"text": topic["Text"], "url": topic.get("FirstURL", "")})

    abstract = None
    if data.get("Abstract"):
        abstract = {
            "heading": data.get("Heading", ""),
            "text": data["Abstract"],
            "url": data.get("AbstractURL", ""),
        }

    return {"query": query, "abstract": abstract, "results": results}


def format_results_for_llm(search_results: dict) -> str:
    """
    Format search results into a string suitable for LLM consumption.
    """
    sections = []
    abstract = search_results.get("abstract")
    if abstract:
        sections.append(f"{abstract['heading']}\n{abstract['text']}\nSource: {abstract['url']}")
    for result in search_results.get("results", []):
        sections.append(f"- {result['text']}\n  {result['url']}")

    if not sections:
        return f"No results found for '{search_results['query']}'."
    return "\n\n".join(sections)


def create_tool(tools_config: ToolsConfig) -> ToolDefinition:
    def handle(params: dict) -> dict:
        try:
            num_results = int(params.get("num_results") or 5)
        except (TypeError, ValueError):
            num_results = 5
        return search(
            str(params.get("query", "")),
            num_results=num_results,
            timeout=tools_config.http_timeout,
        )

    return ToolDefinition(
        descriptor=CapabilityDescriptor(
            name="web_search",
            description="Search the web for information.",
            parameters=object_schema(
                {
                    "query": {"type": "string", "description": "Search query"},
                    "num_results": {
                        "type": "number",
                        "description": "Number of results (default 5)",
                    },
                },
                required=["query"],
            ),
        ),
        handler=handle,
        formatter=format_results_for_llm,
    )
