"""Conversational replies in the healer voice."""

from __future__ import annotations

from loguru import logger

from ..config.defaults import CHAT_FALLBACK_REPLY
from ..config.settings import CHAT_RETRY, RetryPolicy
from .interfaces import ResilienceManager, TextGenerator
from .prompts import CHAT_SYSTEM_INSTRUCTION
from .services.resilience import SimpleResilienceManager


class ChatService:
    """Answers chat messages; degrades to a fixed reply when the provider fails."""

    def __init__(
        self,
        generator: TextGenerator,
        resilience_manager: ResilienceManager | None = None,
        retry_policy: RetryPolicy = CHAT_RETRY,
        system_instruction: str = CHAT_SYSTEM_INSTRUCTION,
    ) -> None:
        self.generator = generator
        self.resilience_manager = resilience_manager or SimpleResilienceManager()
        self.retry_policy = retry_policy
        self.system_instruction = system_instruction

    async def send_message(self, history: list[dict[str, str]], message: str) -> str:
        """Reply to `message` given prior `history` (`{"role", "content"}` dicts)."""
        try:
            return await self.resilience_manager.execute_with_policy(
                self.generator.generate,
                self.retry_policy,
                message,
                False,
                system_instruction=self.system_instruction,
                history=list(history),
            )
        except Exception as e:
            logger.error(f"Chat error: {e}")
            return CHAT_FALLBACK_REPLY
