"""Lume Stylist — FastAPI REST API layer.

This package contains the FastAPI application, Pydantic request models, and
the prompt assembly logic.

Modules
-------
main
    FastAPI application factory with all route handlers and the ``main()``
    CLI entry point.
models
    Pydantic models for API request validation.
prompt_builder
    Outfit and moodboard prompt assembly from lookup tables.
"""
