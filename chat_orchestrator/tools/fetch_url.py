"""
URL Fetch Tool

Downloads a page and returns its text: JSON is pretty-printed, HTML is
reduced to visible text, and the result is truncated to ``max_length``.
"""

import json
import logging
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from ..errors import ToolExecutionError
from ..models import ToolsConfig
from .registry import CapabilityDescriptor, ToolDefinition, object_schema

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 5000


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return soup.get_text(separator=" ", strip=True)


def fetch_url(
    url: str,
    max_length: int = DEFAULT_MAX_LENGTH,
    timeout: int = 15,
    user_agent: str = "chat-orchestrator/0.1",
) -> dict:
    """
    Fetch ``url`` and return its text content.

    Raises:
        ToolExecutionError: invalid URL, non-success status, or a failed request.
    """
    parsed = urlparse(url or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ToolExecutionError(f"invalid URL: {url!r} (only http and https are supported)")

    try:
        response = requests.get(url, headers={"User-Agent": user_agent}, timeout=timeout)
    except requests.exceptions.RequestException as e:
        logger.error(f"Fetch failed for {url}: {e}")
        raise ToolExecutionError(f"fetch failed: {e}") from e

    if not response.ok:
        raise ToolExecutionError(f"HTTP {response.status_code}: {response.reason}")

    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            text = json.dumps(response.json(), indent=2, ensure_ascii=False)
        except ValueError:
            text = response.text
    else:
        text = response.text
        if "text/html" in content_type:
            text = html_to_text(text)

    if max_length < 1:
        max_length = DEFAULT_MAX_LENGTH
    truncated = len(text) > max_length
    if truncated:
        text = text[:max_length]

    return {"url": url, "content": text, "truncated": truncated}


def format_result_for_llm(result: dict) -> str:
    if result["truncated"]:
        return result["content"] + "\n... (truncated)"
    return result["content"]


def create_tool(tools_config: ToolsConfig) -> ToolDefinition:
    def handle(params: dict) -> dict:
        try:
            max_length = int(params.get("max_length") or tools_config.fetch_max_length)
        except (TypeError, ValueError):
            max_length = tools_config.fetch_max_length
        if max_length < 1:
            max_length = tools_config.fetch_max_length
        return fetch_url(
            str(params.get("url", "")),
            max_length=max_length,
            timeout=tools_config.http_timeout,
            user_agent=tools_config.user_agent,
        )

    return ToolDefinition(
        descriptor=CapabilityDescriptor(
            name="fetch_url",
            description="Fetch the content of a web page at a URL.",
            parameters=object_schema(
                {
                    "url": {"type": "string", "description": "URL to fetch"},
                    "max_length": {
                        "type": "number",
                        "description": "Maximum characters to return (default 5000)",
                    },
                },
                required=["url"],
            ),
        ),
        handler=handle,
        formatter=format_result_for_llm,
    )
