"""
src/config.py
"""


import os
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel

from orchestrator.errors import ConfigurationError


class Provider(str, Enum):

    OPENAI = "openai"
    OLLAMA = "ollama"
    GEMINI = "gemini"


# Defaults
MAX_ITERATIONS: int = 15                    # Model calls per run
MIN_OUTPUT_LENGTH: int = 20                 # Shorter answers get the tool-result fallback
DEFAULT_PROVIDER: Provider = Provider.OLLAMA
DEFAULT_CHAIN: str = "west_asset_hub"
OLLAMA_BASE_URL: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434/v1")
GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"

MODEL_SUGGESTIONS: Dict[str, List[str]] = {
    "openai": ["gpt-4o", "gpt-4", "gpt-3.5-turbo"],
    "ollama": ["llama3.2:3b", "qwen2.5:3b", "qwen3:latest"],
    "gemini": ["gemini-2.0-flash", "gemini-1.5-pro"],
}
API_KEY_ENV: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


def requires_api_key(provider: Provider) -> bool:
    """Hosted providers need a key; the local endpoint does not."""

    return Provider(provider) in (Provider.OPENAI, Provider.GEMINI)


class ModelClientConfig(BaseModel):

    provider: Provider = DEFAULT_PROVIDER
    model: str = MODEL_SUGGESTIONS[DEFAULT_PROVIDER.value][0]
    api_key: Optional[str] = None
    base_url: Optional[str] = None

    @classmethod
    def from_env(cls, provider: Optional[str] = None, model: Optional[str] = None) -> "ModelClientConfig":
        """
        Build a config from AGENT_PROVIDER / AGENT_MODEL and the provider's key variable.
        Explicit arguments win over the environment.
        """

        selected = provider or os.getenv("AGENT_PROVIDER", DEFAULT_PROVIDER.value)
        try:
            provider = Provider(selected)
        except ValueError:
            raise ConfigurationError(f"Unsupported provider: {selected}") from None

        model = model or os.getenv("AGENT_MODEL") or MODEL_SUGGESTIONS[provider.value][0]
        key_var = API_KEY_ENV.get(provider.value)

        return cls(
            provider=provider,
            model=model,
            api_key=os.getenv(key_var) if key_var else None,
            base_url=OLLAMA_BASE_URL if provider == Provider.OLLAMA else None,
        )

    def validate_credentials(self) -> None:
        """Raise ConfigurationError if the selected provider cannot be reached with this config."""

        if not self.model:
            raise ConfigurationError("A model name is required")
        if requires_api_key(self.provider) and not self.api_key:
            label = "OpenAI" if self.provider == Provider.OPENAI else "Gemini"
            raise ConfigurationError(f"{label} API key is required")

    def resolved_base_url(self) -> Optional[str]:

        if self.base_url:
            return self.base_url
        if self.provider == Provider.OLLAMA:
            return OLLAMA_BASE_URL
        if self.provider == Provider.GEMINI:
            return GEMINI_BASE_URL

        return None
# EOF
