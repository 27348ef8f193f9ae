"""Generation model clients."""

from .client import (
    ChatModelGenerationClient,
    GenerationClient,
    create_chat_model,
    create_generation_client,
)

__all__ = [
    "GenerationClient",
    "ChatModelGenerationClient",
    "create_chat_model",
    "create_generation_client",
]
