from __future__ import annotations

import json


class OfflineTextGenerator:
    """
    Deterministic generator used when no AI API key is configured.

    Recommendation prompts get an empty JSON recommendation; anything else
    gets a short notice that the assistant is offline.
    """

    async def generate(self, prompt: str) -> str:
        if "quest recommendation engine" in prompt:
            return json.dumps(
                {
                    "recommendedIds": [],
                    "suggestion": "AI search is offline; try the keyword search instead.",
                    "reasoning": "No AI provider is configured.",
                }
            )
        return (
            "Offline demo mode: no AI provider is configured. "
            "Set GEMINI_API_KEY to enable real answers."
        )
