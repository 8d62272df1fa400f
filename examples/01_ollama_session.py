#!/usr/bin/env python3
"""Example 1: Contextual session on a small local model.

Ví dụ chat với model local qua Ollama, tự động giảm context khi tràn.

Base URL: http://localhost:11434
Model: llama3.2
Context window: 4096 tokens
"""

import asyncio

from context_reduction import (
    ContextualSession,
    Entry,
    LLMConfig,
    LLMGenerator,
    OllamaProvider,
    ReductionLogLevel,
    ReductionPolicy,
    RollingSummaryConfiguration,
    Transcript,
    configure_logging,
)


# ============================================================================
# Cấu hình LLM - Ollama local
# ============================================================================

LLM_CONFIG = LLMConfig(
    model="llama3.2",
    base_url="http://localhost:11434",
    temperature=0.7,
    max_tokens=512,
    extra_params={"options": {"num_ctx": 4096}},
)


class PrintingObserver:
    """In mỗi lần giảm context."""

    def on_reduced(self, original, reduced, reducer_name):
        print(f"[{reducer_name}] {len(original)} -> {len(reduced)} entries")


async def run_ollama_session():
    configure_logging()
    provider = OllamaProvider(LLM_CONFIG)

    generator = LLMGenerator(
        provider,
        Transcript([Entry.instructions("You are a concise travel assistant.")]),
        context_window_limit=4096,
    )
    observer = PrintingObserver()
    session = ContextualSession(
        generator,
        policy=ReductionPolicy.rolling_summary(
            RollingSummaryConfiguration(recent_turns_to_keep=4)
        ),
        log_level=ReductionLogLevel.MINIMAL,
        observer=observer,
    )

    print("Gõ 'quit' để thoát.")
    try:
        while True:
            prompt = input("\nYou: ").strip()
            if prompt.lower() in ("quit", "exit"):
                break
            if not prompt:
                continue

            response = await session.respond(prompt)
            print(f"\nAssistant: {response.content}")
            print(f"(~{session.transcript.estimated_token_count()} tokens in context)")
    finally:
        await provider.close()


if __name__ == "__main__":
    asyncio.run(run_ollama_session())
