"""
Chat router for BioTutor.

Streams tutor output from the completion provider back to the browser.
"""

from functools import lru_cache

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, StreamingResponse

from biotutor.core.errors import CompletionProviderError
from biotutor.schemas.chat import ChatRequest
from biotutor.services.completion import (
    CompletionProvider,
    CompletionStreamProxy,
    OpenAICompatibleProvider,
)


router = APIRouter()


@lru_cache
def get_completion_provider() -> CompletionProvider:
    return OpenAICompatibleProvider()


def get_completion_proxy(
    provider: CompletionProvider = Depends(get_completion_provider)
) -> CompletionStreamProxy:
    return CompletionStreamProxy(provider)


async def stream_response(proxy: CompletionStreamProxy, messages):
    """
    Start the completion and wrap the relay in a streaming response.

    A provider failure before any output becomes a 500 JSON body; after
    that the status is committed and failures abort the stream.
    """
    try:
        relay = await proxy.stream_completion(messages)
    except CompletionProviderError as exc:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": exc.message},
        )
    return StreamingResponse(relay, media_type="text/plain; charset=utf-8")


@router.post("")
async def chat(
    body: ChatRequest,
    proxy: CompletionStreamProxy = Depends(get_completion_proxy)
):
    """
    Stream the tutor's reply to a chat transcript.
    """
    return await stream_response(proxy, body.messages)
