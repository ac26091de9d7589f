"""
Chat schemas for the completion stream proxy.
"""

from typing import List, Literal
from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(default_factory=list)


class InsightRequest(BaseModel):
    question: str | None = None
