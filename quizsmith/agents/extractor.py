"""Response Text Extractor - Pulls the text payload out of a model response."""

from collections.abc import Mapping
from typing import Any


def _non_blank(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _text_from_content(content: list[Any]) -> str:
    for block in content:
        if isinstance(block, str):
            if block.strip():
                return block
            continue
        # output_text parts and untyped text parts are taken alike
        text = _field(block, "text")
        if _non_blank(text):
            return text
    return ""


def extract_output_text(response: Any) -> str:
    """
    Extract the generated text from a response envelope of unknown shape.

    Handles Responses-API style payloads (``output_text`` or a list of
    ``message`` items with ``content`` parts), chat message objects whose
    ``content`` is a string or a list of content blocks, and plain strings.

    Args:
        response: Response envelope returned by the generation client

    Returns:
        The first non-blank text found, or an empty string
    """
    if response is None:
        return ""
    if isinstance(response, str):
        return response if response.strip() else ""

    output_text = _field(response, "output_text")
    if _non_blank(output_text):
        return output_text

    output = _field(response, "output")
    if isinstance(output, list):
        for item in output:
            if _field(item, "type") != "message":
                continue
            content = _field(item, "content")
            if isinstance(content, list):
                text = _text_from_content(content)
                if text:
                    return text
        return ""

    # Chat message objects (e.g. AIMessage)
    content = _field(response, "content")
    if _non_blank(content):
        return content
    if isinstance(content, list):
        return _text_from_content(content)

    return ""
