"""ragbot: local LLM chatbot with a cached weather tool.

A small chat application combining:
- Tool calling against a local Ollama model via LangChain
- City to coordinates resolution cached in memory and in a Chroma vector store
- Current weather from OpenWeatherMap

Modules:
    geo.resolver: Tiered coordinate resolution
    weather.tool: Weather lookup exposed to the model
    chat: Chat session with tool dispatch
    cli: Command-line interface
"""
