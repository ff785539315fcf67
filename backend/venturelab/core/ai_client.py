"""
AI collaborator for VentureLab.

Everything that talks to a language model goes through an ``AIClient``:

- **extract** – one structured call; the reply is validated against a Pydantic model
- **chat**    – one free-text conversational reply

``AgentAIClient`` implements both with pydantic-ai agents on OpenAI models.
Agents are built on first use so the app starts without an API key; every
call is bounded by ``AI_TIMEOUT_SECONDS`` and every failure surfaces as
``AIServiceError``.
"""

import asyncio
import logging
from typing import Protocol, TypeVar

from openai import OpenAIError
from pydantic import BaseModel
from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError, UserError
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from venturelab.core.config import settings

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)


class AIServiceError(Exception):
    """The model could not be reached, timed out, or returned unusable output."""


class AIClient(Protocol):
    async def extract(self, system_prompt: str, payload: str, output_type: type[OutputT]) -> OutputT: ...

    async def chat(self, system_prompt: str, prompt: str) -> str: ...


class AgentAIClient:
    def __init__(
        self,
        *,
        api_key: str | None = None,
        structured_model: str | None = None,
        chat_model: str | None = None,
        timeout: float | None = None,
        retries: int | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self.structured_model = structured_model or settings.AI_STRUCTURED_MODEL
        self.chat_model = chat_model or settings.AI_CHAT_MODEL
        self.timeout = timeout if timeout is not None else settings.AI_TIMEOUT_SECONDS
        self.retries = retries if retries is not None else settings.AI_RETRIES
        self._provider: OpenAIProvider | None = None
        self._agents: dict[tuple, Agent] = {}

    def _agent(self, model_name: str, system_prompt: str, output_type: type) -> Agent:
        key = (model_name, system_prompt, output_type)
        agent = self._agents.get(key)
        if agent is None:
            if not self.api_key:
                raise AIServiceError("OPENAI_API_KEY is not configured")
            if self._provider is None:
                self._provider = OpenAIProvider(api_key=self.api_key)
            agent = Agent(
                OpenAIChatModel(model_name, provider=self._provider),
                output_type=output_type,
                system_prompt=system_prompt,
                retries=self.retries,
            )
            self._agents[key] = agent
        return agent

    async def _run(self, agent: Agent, prompt: str):
        try:
            result = await asyncio.wait_for(agent.run(prompt), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("AI call timed out after %ss", self.timeout)
            raise AIServiceError(f"AI call timed out after {self.timeout:g}s") from exc
        except (AgentRunError, UserError, OpenAIError) as exc:
            raise AIServiceError(str(exc)) from exc
        return result.output

    async def extract(self, system_prompt: str, payload: str, output_type: type[OutputT]) -> OutputT:
        agent = self._agent(self.structured_model, system_prompt, output_type)
        return await self._run(agent, payload)

    async def chat(self, system_prompt: str, prompt: str) -> str:
        agent = self._agent(self.chat_model, system_prompt, str)
        reply = await self._run(agent, prompt)
        if not reply or not reply.strip():
            raise AIServiceError("Model returned an empty reply")
        return reply
