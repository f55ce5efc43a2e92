"""
AI Module - Everything between a URL and the model's HTML.

Submodules:
- flavors: Presentation styles and their prompt templates
- prompts: Deterministic prompt assembly
- providers: Generation clients (Gemini)
- monitoring: Structured logging and timing
"""
