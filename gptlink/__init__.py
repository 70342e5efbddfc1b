"""Client for the OpenAI REST API with typed responses, pluggable transports and event callbacks."""

__version__ = "0.1.0"

__all__ = [
    "api",
    "common_types",
    "events",
    "http_helper",
    "provider",
    "response_types",
    "text_utils",
    "transport",
]