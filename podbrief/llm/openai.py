import logging

from openai import APIConnectionError, APIStatusError, OpenAI

from podbrief.config import Settings
from podbrief.errors import ConfigurationError, UpstreamAIError


logger = logging.getLogger("processor")


def init_llm_openai(settings: Settings) -> OpenAI:
    """
    Initialize a client for the configured OpenAI-compatible endpoint.

    Retries are disabled: a failed call fails the episode.

    Raises:
        ConfigurationError: If no API key is configured
    """
    if not settings.ai_api_key:
        raise ConfigurationError("AI API token not configured")
    return OpenAI(
        api_key=settings.ai_api_key,
        base_url=settings.ai_base_url.rstrip("/"),
        max_retries=0,
    )


def request_chat_completion(
    client: OpenAI, model: str, prompt: str, max_tokens: int = 2000
) -> str:
    """
    Send a single-message, non-streaming chat completion.

    Returns:
        Content of the first choice ("" when the reply is empty)

    Raises:
        UpstreamAIError: If the endpoint answers with an error status or is unreachable
    """
    try:
        response = client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            stream=False,
            max_tokens=max_tokens,
        )
    except APIStatusError as e:
        raise UpstreamAIError(e.status_code, e.response.text) from e
    except APIConnectionError as e:
        raise UpstreamAIError(None, str(e)) from e

    if not response.choices:
        logger.warning("AI API returned no choices")
        return ""
    return response.choices[0].message.content or ""
