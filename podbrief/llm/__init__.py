"""Language model access.

openai.py: OpenAI-compatible client initialization and chat completion calls
"""

from .openai import init_llm_openai, request_chat_completion

__all__ = ["init_llm_openai", "request_chat_completion"]
