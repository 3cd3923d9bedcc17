"""
Slack Idea Bot (Slack Bolt + GPT/Claude + Notion)

Where: AWS Lambda via Function URL (Slack Events/Commands target), or a local Bolt server.
What:  Chat with a rolling per-user context, file Notion tickets for ideas, summarize channels.
Why:   Small-team channel assistant with a switchable LLM backend.
"""

__all__ = [
    "commands",
    "config",
    "context_store",
    "errors",
    "handler",
    "history",
    "ideas",
    "llm",
    "logs",
    "notion",
    "service",
]
