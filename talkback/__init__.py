# talkback/__init__.py
"""
Keep this file minimal so 'talkback' is always a proper package.

Do NOT import submodules here (e.g., don't import main).
Tests and runtime should import from 'talkback.main' directly:
    from talkback.main import create_app
And Uvicorn should use:
    uvicorn talkback.main:create_app --factory
"""
