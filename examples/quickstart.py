"""
Example: Storing memories and enhancing prompts with Contextual Retrieval.
"""

import asyncio

from contextual_retrieval import ContextualRetrievalSystem
from contextual_retrieval.config import load_config


async def example_enhance():
    """Store a few categorized memories and enhance a related prompt."""
    print("=== Enhance Prompt Example ===\n")

    system = ContextualRetrievalSystem(load_config())
    await system.initialize()

    await system.add_memory("Use binary search for sorted arrays", "code")
    await system.add_memory("User prefers TypeScript over JavaScript", "preferences")
    await system.add_memory("Decided to switch the build to Vite", "decisions")

    result = await system.enhance_prompt("what sorting algorithm should I use")

    print(f"Context items: {result['context_count']}")
    print(f"Categories: {result['context_categories']}")
    print(f"\n{result['enhanced_prompt']}")

    await system.close()


async def example_with_cache():
    """Example showing cache effectiveness."""
    print("\n=== Cache Example ===\n")

    system = ContextualRetrievalSystem(load_config())
    await system.add_memory("User works remotely", "general")

    # First call: cache miss
    print("First call (cold cache):")
    await system.retrieve("where does the user work")
    print(f"  Hit rate: {system.get_metrics().cache_hit_rate:.2f}")

    # Second call: cache hit
    print("\nSecond call (warm cache):")
    await system.retrieve("where does the user work")
    snapshot = system.get_metrics()
    print(f"  Hit rate: {snapshot.cache_hit_rate:.2f}")
    print(f"  Per tier: {snapshot.per_tier}")


if __name__ == "__main__":
    asyncio.run(example_enhance())
    # asyncio.run(example_with_cache())
