"""Launchpad: conversational selection and generation of AI coding instructions.

Usage::

    from launchpad.engine import ConversationEngine
    from launchpad.providers import OpenAIProvider

    engine = ConversationEngine(OpenAIProvider(api_key="sk-..."), project_name="my-app")
"""

__version__ = "0.1.0"
