"""Application settings and configuration."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

from quizsmith.models.quiz import Difficulty, ModelProvider, UserSettings

# Load .env file if present
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Model Configuration
    model_provider: ModelProvider = Field(
        default=ModelProvider.BEDROCK,
        description="Chat model backend (bedrock or anthropic)",
        validation_alias="MODEL_PROVIDER",
    )

    model_name: str = Field(
        default="anthropic.claude-3-7-sonnet-20250219-v1:0",
        description="Model to use (Bedrock model ID or Anthropic model name)",
        validation_alias="MODEL_NAME",
    )

    # AWS CONFIG (only read by the bedrock provider)
    aws_api_key_id: str | None = Field(
        default=None,
        description="AWS API key ID",
        validation_alias="AWS_ACCESS_KEY_ID",
    )
    aws_api_key_secret: str | None = Field(
        default=None,
        description="AWS API key",
        validation_alias="AWS_SECRET_ACCESS_KEY",
    )
    aws_default_region: str | None = Field(
        default=None,
        description="AWS API region",
        validation_alias="AWS_DEFAULT_REGION",
    )

    anthropic_api_key: str | None = Field(
        default=None,
        description="Anthropic API key (only read by the anthropic provider)",
        validation_alias="ANTHROPIC_API_KEY",
    )

    # Generation Settings
    default_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for question generation",
        validation_alias="DEFAULT_TEMPERATURE",
    )

    max_output_tokens: int = Field(
        default=6000,
        ge=256,
        description="Minimum output token budget for a generation request",
        validation_alias="MAX_OUTPUT_TOKENS",
    )

    default_difficulty: Difficulty = Field(
        default=Difficulty.MEDIUM,
        description="Difficulty used when none is given",
        validation_alias="DEFAULT_DIFFICULTY",
    )

    default_choices: int = Field(
        default=4,
        ge=4,
        le=8,
        description="Choices per question used when none is given",
        validation_alias="DEFAULT_CHOICES",
    )

    # Storage Settings
    vault_path: str = Field(
        default="quizsmith_vault.json",
        description="File the quiz library is stored in",
        validation_alias="VAULT_PATH",
    )

    log_level: str = Field(
        default="WARNING",
        description="Log level for the CLI",
        validation_alias="LOG_LEVEL",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def to_user_settings(self) -> UserSettings:
        """
        Build the settings a new vault starts with.

        Returns:
            UserSettings seeded from the environment
        """
        return UserSettings(
            provider=self.model_provider,
            model=self.model_name,
            temperature=self.default_temperature,
            max_tokens=self.max_output_tokens,
            default_difficulty=self.default_difficulty,
            default_choices=self.default_choices,
        )


# Loaded the first time and then cached for further use
@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with loaded configuration
    """
    return Settings()
