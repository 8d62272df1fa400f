"""Contextual session: a generator that recovers from context overflow.

The session forwards prompts to its generator. When the generator
reports a context window overflow, the session reduces the transcript,
rebinds a fresh generator to the reduced transcript and retries:

1. The first overflow is handled by the configured policy.
2. Later overflows use a sliding window of ``max(1, 6 - attempt)``
   conversation entries, ignoring the policy.
3. If a reduction does not shrink the transcript, the session keeps only
   the last ``max(1, 5 - attempt)`` conversation entries and drops the
   instructions.
4. After five reductions the transcript is forced down to the last
   conversation entry and one final attempt is made; its outcome,
   success or error, goes to the caller.

Any error other than a context window overflow propagates unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
import weakref
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Protocol

from .constants import MAX_REDUCTION_ATTEMPTS
from .engine import ContextReductionEngine
from .llm.base import ContextWindowExceededError, LLMProvider, LLMResponse
from .llm.generator import Generator
from .observability.logging import StructuredLogger, get_logger
from .observability.reduction import ReductionLogLevel, log_reduction
from .policy import ReductionPolicy
from .reducers.base import last_entries
from .transcript import Transcript

logger = logging.getLogger(__name__)

DEFAULT_POLICY = ReductionPolicy.sliding_window(10)


class SessionState(str, Enum):
    """Where a contextual session is in its respond cycle."""

    READY = "ready"
    GENERATING = "generating"
    REDUCING = "reducing"
    EXHAUSTED = "exhausted"  # final forced single-entry attempt


class ReductionTrigger(str, Enum):
    """What caused a reduction."""

    PROACTIVE = "proactive"  # requested through ContextualSession.reduce
    REACTIVE = "reactive"  # forced by a context window overflow


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ReductionEvent:
    """Record of one reduction."""

    original: Transcript
    reduced: Transcript
    reducer_name: str
    trigger: ReductionTrigger = ReductionTrigger.REACTIVE
    timestamp: datetime = field(default_factory=_utcnow)
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def entries_removed(self) -> int:
        return len(self.original) - len(self.reduced)

    @property
    def tokens_saved(self) -> int:
        """Estimated tokens saved by the reduction."""
        return self.original.estimated_token_count() - self.reduced.estimated_token_count()


ReductionInfo = ReductionEvent


class ReductionObserver(Protocol):
    """Listener notified after every reduction."""

    def on_reduced(
        self,
        original: Transcript,
        reduced: Transcript,
        reducer_name: str,
    ) -> None:
        ...


class ContextualSession:
    """Wrap a generator with automatic context reduction.

    Calls to :meth:`respond` and :meth:`reduce` on one session are
    serialized. The observer is held by weak reference, so the session
    never keeps it alive.

    Example:
        generator = LLMGenerator(provider, Transcript([Entry.instructions("Be brief.")]))
        session = ContextualSession(
            generator,
            policy=ReductionPolicy.rolling_summary(),
            log_level=ReductionLogLevel.MINIMAL,
        )
        response = await session.respond("What did we decide yesterday?")
    """

    def __init__(
        self,
        generator: Generator,
        policy: ReductionPolicy = DEFAULT_POLICY,
        log_level: ReductionLogLevel = ReductionLogLevel.OFF,
        llm_provider: Optional[LLMProvider] = None,
        observer: Optional[ReductionObserver] = None,
        structured_logger: Optional[StructuredLogger] = None,
    ):
        """Initialize the session.

        Args:
            generator: Generator bound to the starting transcript.
            policy: Policy for the first reduction after an overflow.
            log_level: Reduction logging level.
            llm_provider: Provider for LLM-backed reducer components.
                Defaults to the generator's own provider, if it has one.
            observer: Listener notified after each reduction.
            structured_logger: Logger for reduction lines.
        """
        self.session_id = uuid.uuid4().hex
        self.log_level = log_level
        self._generator = generator
        self._engine = ContextReductionEngine(
            policy,
            llm_provider if llm_provider is not None else getattr(generator, "llm_provider", None),
        )
        self._state = SessionState.READY
        self._lock = asyncio.Lock()
        self._observer_ref: Optional[weakref.ref] = None
        self._history: List[ReductionEvent] = []
        self._logger = (structured_logger or get_logger("context_reduction.session")).bind(
            session_id=self.session_id
        )
        self.observer = observer

    @property
    def transcript(self) -> Transcript:
        """The current transcript of the underlying generator."""
        return self._generator.transcript

    @property
    def generator(self) -> Generator:
        return self._generator

    @property
    def policy(self) -> ReductionPolicy:
        return self._engine.policy

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def last_reduction_info(self) -> Optional[ReductionEvent]:
        """The most recent reduction, if any."""
        return self._history[-1] if self._history else None

    @property
    def history(self) -> List[ReductionEvent]:
        """All reductions, oldest first."""
        return list(self._history)

    @property
    def observer(self) -> Optional[ReductionObserver]:
        if self._observer_ref is None:
            return None
        return self._observer_ref()

    @observer.setter
    def observer(self, value: Optional[ReductionObserver]) -> None:
        self._observer_ref = weakref.ref(value) if value is not None else None

    async def respond(self, prompt: str) -> LLMResponse:
        """Answer a prompt, reducing context on overflow.

        Args:
            prompt: The user prompt.

        Returns:
            The generator's response.

        Raises:
            ContextWindowExceededError: If even the final single-entry
                attempt overflows.
            Exception: Any other generator or reducer error, unchanged.
        """
        async with self._lock:
            try:
                return await self._respond_with_reduction(prompt)
            finally:
                self._state = SessionState.READY

    async def reduce(self) -> ReductionEvent:
        """Reduce the transcript now with the configured policy.

        Returns:
            The recorded proactive reduction event.
        """
        async with self._lock:
            self._state = SessionState.REDUCING
            try:
                original = self.transcript
                reduced = await self._engine.reduce(original)
                self._generator = self._generator.with_transcript(reduced)
                return self._record(
                    original, reduced, self._engine.policy_name, ReductionTrigger.PROACTIVE
                )
            finally:
                self._state = SessionState.READY

    async def _respond_with_reduction(self, prompt: str) -> LLMResponse:
        attempts = 0
        while attempts < MAX_REDUCTION_ATTEMPTS:
            self._state = SessionState.GENERATING
            try:
                return await self._generator.respond(prompt)
            except ContextWindowExceededError:
                attempts += 1
                logger.debug("Context window exceeded, reduction attempt %d", attempts)

            self._state = SessionState.REDUCING
            await self._reduce_after_overflow(attempts)

        self._state = SessionState.EXHAUSTED
        _, conversation = self.transcript.split()
        self._generator = self._generator.with_transcript(
            Transcript(last_entries(conversation, 1))
        )
        logger.debug("Reduction attempts exhausted, retrying with one entry")
        return await self._generator.respond(prompt)

    async def _reduce_after_overflow(self, attempt: int) -> None:
        original = self.transcript

        if attempt == 1:
            reduced = await self._engine.reduce(original)
            reducer_name = self._engine.policy_name
        else:
            fallback = ContextReductionEngine(
                ReductionPolicy.sliding_window(max(1, 6 - attempt))
            )
            reduced = await fallback.reduce(original)
            reducer_name = f"AggressiveReduction(attempt {attempt})"

        if len(reduced) >= len(original) and len(original) > 0:
            _, conversation = original.split()
            reduced = Transcript(last_entries(conversation, max(1, 5 - attempt)))

        self._generator = self._generator.with_transcript(reduced)
        self._record(original, reduced, reducer_name, ReductionTrigger.REACTIVE)

    def _record(
        self,
        original: Transcript,
        reduced: Transcript,
        reducer_name: str,
        trigger: ReductionTrigger,
    ) -> ReductionEvent:
        event = ReductionEvent(
            original=original,
            reduced=reduced,
            reducer_name=reducer_name,
            trigger=trigger,
        )
        self._history.append(event)
        self._notify(event)
        log_reduction(original, reduced, reducer_name, self.log_level, logger=self._logger)
        return event

    def _notify(self, event: ReductionEvent) -> None:
        observer: Any = self.observer
        if observer is None:
            return
        try:
            observer.on_reduced(event.original, event.reduced, event.reducer_name)
        except Exception:
            logger.error("Reduction observer failed", exc_info=True)
