"""
Core functionality for Stride Agent.

Command interpretation lives in ``stride_agent.core.commands``.
"""
