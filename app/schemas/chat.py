"""Pydantic schemas for the chat endpoints."""

from typing import Literal

from pydantic import BaseModel, Field


class ContextTurn(BaseModel):
    """One earlier turn of the conversation, replayed to the provider."""

    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Body of ``POST /v1/{provider}/chat``."""

    message: str = Field(..., description="User message; must not be blank.")
    context: list[ContextTurn] = Field(
        default_factory=list,
        description="Earlier turns, oldest first.",
    )
    language: Literal["es", "en"] = Field(
        "es",
        description="Reply language; also selects the system prompt.",
    )


class ChatMetadata(BaseModel):
    model: str
    language: Literal["es", "en"]
    tokens: int | None = Field(
        None,
        description="Total tokens reported by the provider, when it reports usage.",
    )


class ChatResponse(BaseModel):
    reply: str
    metadata: ChatMetadata


class WidgetMessage(BaseModel):
    role: str
    content: str


class WidgetChatRequest(BaseModel):
    """Body of ``POST /v1/chat`` sent by the site chat widget."""

    messages: list[WidgetMessage] = Field(..., min_length=1)


class WidgetChatResponse(BaseModel):
    response: str


class AssistantChatRequest(ChatRequest):
    """Body of ``POST /v1/assistant/chat`` (portal assistant)."""

    prefer_provider: Literal["perplexity", "gemini"] = Field(
        "perplexity",
        description="Provider tried first when the knowledge base has no answer.",
    )


class KnowledgeSnippet(BaseModel):
    content: str
    source: str = Field(..., description="Site section the excerpt comes from, e.g. '/services'.")
    title: str
    score: float = Field(..., description="Cosine similarity to the question.")


class AssistantChatMetadata(BaseModel):
    language: Literal["es", "en"]
    provider: str | None = None
    model: str | None = None
    tokens: int | None = None
    confidence: Literal["high", "medium"] | None = Field(
        None,
        description="Set on knowledge-base answers: 'high' with two or more matches.",
    )


class AssistantChatResponse(BaseModel):
    source: Literal["knowledge-base", "perplexity", "gemini"]
    reply: str
    snippets: list[KnowledgeSnippet] = Field(default_factory=list)
    metadata: AssistantChatMetadata
