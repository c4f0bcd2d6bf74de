"""
Services Layer - export orchestration between models and renderers.
"""
