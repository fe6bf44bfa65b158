from __future__ import annotations

from dataclasses import dataclass

from tavno.domain.usecase.ports import TextGenerator, ValidationError

CHAT_PROMPT = """You are the friendly assistant of Tavno, a marketplace where people post paid micro-tasks ("quests") and others complete them for a reward.
Answer the user's message briefly and helpfully.

User: {message}"""


@dataclass(slots=True)
class ChatWithAssistant:
    generator: TextGenerator

    async def execute(self, message: str | None) -> str:
        message = (message or "").strip()
        if not message:
            raise ValidationError("Message required")
        return (await self.generator.generate(CHAT_PROMPT.format(message=message))).strip()
