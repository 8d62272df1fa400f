#!/usr/bin/env python3
"""Example 2: Proactive reduction with structured state.

Ví dụ giảm context chủ động: thay lịch sử cũ bằng các facts đã trích xuất,
dùng OpenAI-compatible endpoint cho cả chat lẫn extraction. Phần thứ hai
dùng custom summarizer (CallableSummarizer) cho rolling summary.

Base URL: http://localhost:4141/v1 (OpenAI-compatible)
Model: gpt-4o-mini
"""

import asyncio

from context_reduction import (
    CallableSummarizer,
    ContextualSession,
    Entry,
    LLMConfig,
    LLMGenerator,
    OpenAIProvider,
    ReductionPolicy,
    RollingSummaryConfiguration,
    StructuredStateConfiguration,
    Transcript,
)


# ============================================================================
# Cấu hình LLM - OpenAI-compatible endpoint
# ============================================================================

LLM_CONFIG = LLMConfig(
    model="gpt-4o-mini",
    api_key="test",  # Thay bằng API key thực
    base_url="http://localhost:4141/v1",
    temperature=0.2,
    max_tokens=1024,
)

CONVERSATION = [
    "Hi, I'd like to book a table for four this Friday.",
    "Around 7pm if possible. One of us is gluten free.",
    "Can we get a quiet table away from the kitchen?",
    "Great. Actually, make it 7:30 instead.",
]


async def run_proactive_state():
    provider = OpenAIProvider(LLM_CONFIG)
    generator = LLMGenerator(
        provider,
        Transcript([Entry.instructions("You are a restaurant booking assistant.")]),
    )
    session = ContextualSession(
        generator,
        policy=ReductionPolicy.structured_state(
            StructuredStateConfiguration(
                recent_turns_to_keep=2,
                extraction_instructions="Track party size, time, and dietary needs.",
            )
        ),
    )

    for prompt in CONVERSATION:
        response = await session.respond(prompt)
        print(f"You: {prompt}\nAssistant: {response.content}\n")

    # Giảm context trước khi chuyển sang chủ đề mới
    event = await session.reduce()
    print(f"{event.reducer_name}: saved ~{event.tokens_saved} tokens\n")
    print(session.transcript.pretty_printed())


# ============================================================================
# Custom summarizer - không gọi model
# ============================================================================


async def bullet_summary(entries, instructions, locale):
    """Tóm tắt mỗi entry thành một dòng ngắn."""
    return "\n".join(f"- {entry.text[:60]}" for entry in entries if entry.text)


async def run_custom_summarizer():
    provider = OpenAIProvider(LLM_CONFIG)
    session = ContextualSession(
        LLMGenerator(provider),
        policy=ReductionPolicy.rolling_summary(
            RollingSummaryConfiguration(
                recent_turns_to_keep=1,
                summarizer=CallableSummarizer(bullet_summary),
            )
        ),
    )

    for prompt in CONVERSATION:
        await session.respond(prompt)

    event = await session.reduce()
    print(f"{event.reducer_name}: {len(event.original)} -> {len(event.reduced)} entries\n")
    print(session.transcript.pretty_printed())


async def main():
    await run_proactive_state()
    await run_custom_summarizer()


if __name__ == "__main__":
    asyncio.run(main())
