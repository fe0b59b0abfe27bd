import logging
from typing import Dict, List, Optional

import httpx
from openai import APIConnectionError, APIStatusError, OpenAI

from trip_planner.config import Settings, get_api_key
from trip_planner.integrations.errors import (
    ConfigurationError,
    MalformedResponse,
    PaymentRequired,
    RateLimited,
    UpstreamAPIError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


def status_error(status_code: int, detail: str = "") -> UpstreamAPIError:
    """Translate a non-2xx gateway status into the matching planner error."""
    if status_code == 429:
        return RateLimited()
    if status_code == 402:
        return PaymentRequired()
    return UpstreamError(status_code, detail)


def build_client(api_key: str, settings: Settings, http_client: Optional[httpx.Client] = None) -> OpenAI:
    # Retries are disabled: a failed generation is reported, never replayed.
    return OpenAI(
        api_key=api_key,
        base_url=settings.gateway_url,
        timeout=settings.timeout,
        max_retries=0,
        http_client=http_client,
    )


def call_gpt(
    messages: List[Dict[str, str]],
    settings: Settings,
    http_client: Optional[httpx.Client] = None,
) -> str:
    """Send one chat-completion request and return the assistant text.

    The credential is looked up here, on every call, so a missing key fails
    before anything is sent over the network.
    """
    api_key = get_api_key()
    if api_key is None:
        raise ConfigurationError()

    client = build_client(api_key, settings, http_client)
    try:
        resp = client.chat.completions.create(
            model=settings.model,
            messages=messages,
            temperature=settings.temperature,
        )
    except APIStatusError as e:
        detail = e.response.text if e.response is not None else ""
        logger.error(f"AI gateway error: {e.status_code} {detail}")
        raise status_error(e.status_code, detail) from e
    except APIConnectionError as e:
        logger.error(f"AI gateway unreachable: {e}")
        raise UpstreamError(None, str(e)) from e
    finally:
        if http_client is None:
            client.close()

    choices = resp.choices or []
    content = choices[0].message.content if choices else None
    if not content:
        raise MalformedResponse("", "empty completion")
    return content
