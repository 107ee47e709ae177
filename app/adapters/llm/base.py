from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal, TypedDict


class ChatMessage(TypedDict):
	role: Literal["system", "user", "assistant"]
	content: str


@dataclass(frozen=True)
class ChatCompletion:
	"""Text reply returned by a provider, plus what it reported about itself."""

	reply: str
	model: str
	total_tokens: int | None = None


class AbstractChatClient(ABC):
	"""Interface for chat-completion providers."""

	provider: str

	@abstractmethod
	async def complete(
		self,
		messages: list[ChatMessage],
		*,
		max_tokens: int | None = None,
		temperature: float | None = None,
	) -> ChatCompletion:
		"""Send a conversation and return the assistant reply.

		Args:
			messages: Ordered conversation, system prompt first.
			max_tokens: Optional cap on the reply length.
			temperature: Optional sampling temperature.

		Returns:
			ChatCompletion with the reply text and the model that produced it.

		Raises:
			LLMAppError: If the provider call fails or returns no content.
		"""
		...
