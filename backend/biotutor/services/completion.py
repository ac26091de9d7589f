"""
Completion stream proxy for BioTutor.

Forwards a chat transcript to an OpenAI-compatible chat completions API
and relays the generated text back to the caller as it arrives.
"""

from typing import Any, AsyncIterator, Dict, List, Optional, Protocol, Sequence
import logging

from openai import AsyncOpenAI

from biotutor.core.config import Settings, settings as default_settings
from biotutor.core.errors import CompletionProviderError


logger = logging.getLogger(__name__)


class CompletionProvider(Protocol):
    """Anything that turns a message list into an ordered stream of text fragments."""

    def stream(self, messages: List[Dict[str, str]]) -> AsyncIterator[str]:
        ...


class OpenAICompatibleProvider:
    """
    Streams completions from an OpenAI-compatible endpoint (Groq by default).

    Model and generation parameters are operator configuration, never
    taken from the request.
    """

    def __init__(self, config: Optional[Settings] = None, client: Optional[AsyncOpenAI] = None):
        self.config = config or default_settings
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.config.llm_enabled:
                raise CompletionProviderError("Completion provider is not configured")
            self._client = AsyncOpenAI(
                api_key=self.config.LLM_API_KEY,
                base_url=self.config.LLM_BASE_URL,
            )
        return self._client

    async def stream(self, messages: List[Dict[str, str]]) -> AsyncIterator[str]:
        upstream = await self.client.chat.completions.create(
            model=self.config.LLM_MODEL,
            messages=messages,
            temperature=self.config.LLM_TEMPERATURE,
            top_p=self.config.LLM_TOP_P,
            max_tokens=self.config.LLM_MAX_TOKENS,
            stream=True,
        )
        try:
            async for chunk in upstream:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    yield content
        finally:
            await upstream.close()


def _as_payload(messages: Sequence[Any]) -> List[Dict[str, str]]:
    payload = []
    for message in messages:
        if isinstance(message, dict):
            payload.append({"role": message["role"], "content": message["content"]})
        else:
            payload.append({"role": message.role, "content": message.content})
    return payload


async def _close(fragments: AsyncIterator[str]) -> None:
    aclose = getattr(fragments, "aclose", None)
    if aclose is not None:
        await aclose()


class CompletionStreamProxy:
    """
    Relay a provider's fragments to the caller in arrival order.

    Failures before the first fragment raise CompletionProviderError so the
    route can still answer with a 500. Once output has been sent, a
    provider failure is logged and re-raised inside the relay, which
    aborts the already-started response. Nothing is retried.
    """

    def __init__(self, provider: CompletionProvider):
        self.provider = provider

    async def stream_completion(self, messages: Sequence[Any]) -> AsyncIterator[bytes]:
        """
        Start the upstream call and return the byte relay.

        Raises:
            CompletionProviderError: the provider failed before producing output
        """
        payload = _as_payload(messages)
        fragments = self.provider.stream(payload)
        logger.info(f"Streaming completion for {len(payload)} message(s)")

        try:
            first = await fragments.__anext__()
        except StopAsyncIteration:
            first = None
        except Exception as exc:
            logger.error(f"Completion provider failed before streaming: {exc!r}")
            await _close(fragments)
            raise CompletionProviderError() from exc

        return self._relay(first, fragments)

    async def _relay(self, first: Optional[str], fragments: AsyncIterator[str]) -> AsyncIterator[bytes]:
        sent = 0
        try:
            if first is None:
                return
            if first:
                sent += 1
                yield first.encode("utf-8")
            async for fragment in fragments:
                if fragment:
                    sent += 1
                    yield fragment.encode("utf-8")
            logger.info(f"Completion stream finished after {sent} chunk(s)")
        except Exception:
            logger.exception(f"Completion stream failed after {sent} chunk(s)")
            raise
        finally:
            # Also runs when the consumer goes away mid-stream
            await _close(fragments)
