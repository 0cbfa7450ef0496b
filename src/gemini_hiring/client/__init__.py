"""Model provider access."""

from .error_handler import ProviderErrorTranslator
from .model_client import GeminiModelClient, ModelClient

__all__ = ["GeminiModelClient", "ModelClient", "ProviderErrorTranslator"]
