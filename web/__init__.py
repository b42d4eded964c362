"""
Web application package for the engine.

Provides a FastAPI JSON API over the fixed-depth search and the static
evaluator. Serve with: uvicorn web.app:app
"""
