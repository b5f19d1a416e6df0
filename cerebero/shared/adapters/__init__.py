"""
Adapters Package

External service integrations.

Contents:
=========
- convex_client: Convex function API over httpx (used by the Convex backend)
- openai_adapter: OpenAI embeddings and completions

Usage:
======
    from cerebero.shared.adapters.openai_adapter import OpenAIAdapter

    ai = OpenAIAdapter(settings)
    vector = await ai.embed("Rust Book\nhttps://example.com/rust")
"""
