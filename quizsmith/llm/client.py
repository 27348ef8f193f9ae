"""Generation client - Sends prompts to a chat model."""

import logging
from typing import Any, Callable, Protocol

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from quizsmith.config.settings import Settings, get_settings
from quizsmith.models.quiz import ModelProvider, UserSettings

logger = logging.getLogger(__name__)

# (temperature, max_output_tokens) -> chat model
ChatModelFactory = Callable[[float, int], BaseChatModel]


class GenerationClient(Protocol):
    """Anything that can turn a pair of prompts into a response envelope."""

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> Any:
        """Return the raw response; its text may or may not contain JSON."""
        ...


def create_chat_model(
    settings: UserSettings,
    temperature: float,
    max_output_tokens: int,
    api_key: str | None = None,
    env: Settings | None = None,
) -> BaseChatModel:
    """
    Create the chat model configured in the user settings.

    Args:
        settings: User settings holding provider and model name
        temperature: Sampling temperature
        max_output_tokens: Output token budget
        api_key: Anthropic API key from the vault; ANTHROPIC_API_KEY is used when empty
        env: Environment settings holding provider credentials

    Returns:
        A LangChain chat model
    """
    env = env or get_settings()
    kwargs: dict[str, Any] = {}

    if settings.provider == ModelProvider.ANTHROPIC:
        from langchain_anthropic import ChatAnthropic

        key = api_key or env.anthropic_api_key
        if key:
            kwargs["api_key"] = key
        return ChatAnthropic(
            model=settings.model,
            temperature=temperature,
            max_tokens=max_output_tokens,
            **kwargs,
        )

    from langchain_aws import ChatBedrock

    # Unset values fall back to the AWS credential chain
    if env.aws_default_region:
        kwargs["region_name"] = env.aws_default_region
    if env.aws_api_key_id and env.aws_api_key_secret:
        kwargs["aws_access_key_id"] = env.aws_api_key_id
        kwargs["aws_secret_access_key"] = env.aws_api_key_secret
    return ChatBedrock(
        model=settings.model,
        temperature=temperature,
        max_tokens=max_output_tokens,
        **kwargs,
    )


class ChatModelGenerationClient:
    """Generation client backed by a LangChain chat model."""

    def __init__(self, model_factory: ChatModelFactory):
        self.model_factory = model_factory

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> Any:
        llm = self.model_factory(temperature, max_output_tokens)
        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_prompt),
        ]
        logger.debug(
            "Requesting generation (temperature=%s, max_output_tokens=%s)",
            temperature,
            max_output_tokens,
        )
        return await llm.ainvoke(messages)


def create_generation_client(
    settings: UserSettings, api_key: str | None = None
) -> ChatModelGenerationClient:
    """
    Build the default generation client for a vault's settings.

    Args:
        settings: User settings holding provider and model name
        api_key: Anthropic API key stored in the vault

    Returns:
        Client that creates a fresh chat model per request
    """
    return ChatModelGenerationClient(
        lambda temperature, max_tokens: create_chat_model(
            settings, temperature, max_tokens, api_key=api_key
        )
    )
