"""AI content generation: prompts, model client, and error classification."""

from niche.ai.client import AIResponse, ChatMessage, generate_response
from niche.ai.content import ContentGenerator
from niche.ai.errors import AIErrorType, AIServiceError, parse_api_error

__all__ = [
    "AIErrorType",
    "AIResponse",
    "AIServiceError",
    "ChatMessage",
    "ContentGenerator",
    "generate_response",
    "parse_api_error",
]
