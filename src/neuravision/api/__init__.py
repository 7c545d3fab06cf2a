"""NeuraVision — FastAPI REST API layer.

Modules
-------
main
    Application factory, route handlers, and the ``main()`` CLI entry point.
models
    Pydantic models for the non-CRUD request and response bodies.
errors
    ``ApiError`` hierarchy and the JSON exception handlers.
prompt_enhancer
    Gemini-backed prompt rewriting.
"""
