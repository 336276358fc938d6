"""
Language Tools

Translation and summarization, both answered by a second, tool-less call to
the completion service.
"""

from typing import Callable, Optional

from ..errors import ToolExecutionError
from .registry import CapabilityDescriptor, ToolDefinition, object_schema

# Takes a prompt, returns the model's text; raises ToolExecutionError on failure.
TextGenerator = Callable[[str], str]

SUMMARY_STYLES = {
    "brief": "Summarize the following text in 2-3 sentences.",
    "detailed": "Summarize the following text in detail, covering every key point.",
    "bullet_points": "Summarize the following text as bullet points.",
}


def build_translation_prompt(
    text: str, target_language: str, source_language: Optional[str] = None
) -> str:
    source = f" from {source_language}" if source_language else ""
    return (
        f"Translate the following text{source} into {target_language}. "
        f"Return only the translated text:\n\n{text}"
    )


def build_summary_prompt(
    text: str, style: str = "brief", language: Optional[str] = None
) -> str:
    if style not in SUMMARY_STYLES:
        raise ToolExecutionError(
            f"unknown summary style: {style} (expected one of {', '.join(SUMMARY_STYLES)})"
        )
    instruction = SUMMARY_STYLES[style]
    if language:
        instruction += f" Answer in {language}."
    return f"{instruction}\n\n{text}"


def _format_text(result: dict) -> str:
    return result["text"]


def create_translate_tool(generate: TextGenerator) -> ToolDefinition:
    def handle(params: dict) -> dict:
        text = params.get("text")
        target = params.get("target_language")
        if not text or not target:
            raise ToolExecutionError("text and target_language are required")
        prompt = build_translation_prompt(text, target, params.get("source_language"))
        return {"text": generate(prompt)}

    return ToolDefinition(
        descriptor=CapabilityDescriptor(
            name="translate",
            description="Translate text into another language.",
            parameters=object_schema(
                {
                    "text": {"type": "string", "description": "Text to translate"},
                    "target_language": {
                        "type": "string",
                        "description": "Target language (e.g. Korean, English, Japanese)",
                    },
                    "source_language": {
                        "type": "string",
                        "description": "Source language (auto-detected when omitted)",
                    },
                },
                required=["text", "target_language"],
            ),
        ),
        handler=handle,
        formatter=_format_text,
    )


def create_summarize_tool(generate: TextGenerator) -> ToolDefinition:
    def handle(params: dict) -> dict:
        text = params.get("text")
        if not text:
            raise ToolExecutionError("text is required")
        prompt = build_summary_prompt(
            text, params.get("style") or "brief", params.get("language")
        )
        return {"text": generate(prompt)}

    return ToolDefinition(
        descriptor=CapabilityDescriptor(
            name="summarize",
            description=(
                "Summarize a long text. Styles: brief, detailed or bullet_points."
            ),
            parameters=object_schema(
                {
                    "text": {"type": "string", "description": "Text to summarize"},
                    "style": {
                        "type": "string",
                        "enum": list(SUMMARY_STYLES),
                        "description": "Summary style",
                    },
                    "language": {"type": "string", "description": "Output language"},
                },
                required=["text"],
            ),
        ),
        handler=handle,
        formatter=_format_text,
    )
