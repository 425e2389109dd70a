from career_diagnosis.providers.base import BaseProvider, ProviderError
from career_diagnosis.providers.claude import ClaudeProvider

__all__ = ["BaseProvider", "ClaudeProvider", "ProviderError"]
