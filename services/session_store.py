"""Simple in-memory store for editing sessions."""

from __future__ import annotations

from typing import Dict
from uuid import uuid4

from services.generation.model_client import ModelClient
from services.generation.orchestrator import GenerationOrchestrator
from services.generation.prompts import DEFAULT_INSTRUCTION


class SessionStore:
	"""Manage one generation orchestrator per editing session."""

	def __init__(self, model_client: ModelClient, default_instruction: str = DEFAULT_INSTRUCTION) -> None:
		self.model_client = model_client
		self.default_instruction = default_instruction
		self._sessions: Dict[str, GenerationOrchestrator] = {}

	def create(self) -> GenerationOrchestrator:
		"""Create a new session seeded with the default instruction."""
		session_id = uuid4().hex
		orchestrator = GenerationOrchestrator(session_id, self.model_client, self.default_instruction)
		self._sessions[session_id] = orchestrator
		return orchestrator

	def get(self, session_id: str) -> GenerationOrchestrator:
		"""Return a session or raise KeyError if missing."""
		orchestrator = self._sessions.get(session_id)
		if orchestrator is None:
			raise KeyError(f"Session {session_id} not found")
		return orchestrator

	def delete(self, session_id: str) -> None:
		"""Discard a session and everything it holds."""
		if self._sessions.pop(session_id, None) is None:
			raise KeyError(f"Session {session_id} not found")

	def __len__(self) -> int:
		return len(self._sessions)
