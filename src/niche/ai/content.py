"""Content generation: one coroutine per kind of AI task."""

from __future__ import annotations

from typing import TYPE_CHECKING

from niche.ai import prompts
from niche.ai.client import ChatMessage, generate_response

if TYPE_CHECKING:
    from niche.config.settings import Settings


class ContentGenerator:
    """Turns document text into model output for a given agent persona.

    Summaries, answers and chat use the light model; extraction, reports and
    research use the heavy one.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def _complete(
        self,
        system: str,
        user: str,
        *,
        heavy: bool,
        temperature: float,
        history: list[ChatMessage] | None = None,
    ) -> str:
        messages = [ChatMessage(role="system", content=system)]
        messages.extend(history or [])
        messages.append(ChatMessage(role="user", content=user))
        response = await generate_response(
            messages, self._settings, heavy=heavy, temperature=temperature
        )
        return response.content

    async def summarize_document(self, content: str, agent_type: str = "analyst") -> str:
        return await self._complete(
            prompts.system_prompt_for(agent_type),
            prompts.build_summary_prompt(content),
            heavy=False,
            temperature=0.3,
        )

    async def answer_question(
        self, content: str, question: str, agent_type: str = "analyst"
    ) -> str:
        return await self._complete(
            prompts.system_prompt_for(agent_type),
            prompts.build_question_prompt(content, question),
            heavy=False,
            temperature=0.3,
        )

    async def extract_data(
        self, content: str, extraction_type: str = "general", agent_type: str = "analyst"
    ) -> str:
        return await self._complete(
            prompts.system_prompt_for(agent_type),
            prompts.build_extraction_prompt(content, extraction_type),
            heavy=True,
            temperature=0.2,
        )

    async def generate_report(
        self, content: str, report_type: str = "analysis", agent_type: str = "analyst"
    ) -> str:
        return await self._complete(
            prompts.system_prompt_for(agent_type),
            prompts.build_report_prompt(content, report_type),
            heavy=True,
            temperature=0.5,
        )

    async def conduct_research(
        self, topic: str, context: str = "", agent_type: str = "researcher"
    ) -> str:
        return await self._complete(
            prompts.system_prompt_for(agent_type, fallback="researcher"),
            prompts.build_research_prompt(topic, context),
            heavy=True,
            temperature=0.6,
        )

    async def chat_with_context(
        self,
        history: list[ChatMessage],
        message: str,
        document_context: str = "",
        agent_type: str = "analyst",
    ) -> str:
        return await self._complete(
            prompts.build_chat_system_prompt(agent_type, document_context),
            message,
            heavy=False,
            temperature=0.7,
            history=history,
        )
