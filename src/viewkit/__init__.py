"""
viewkit
Declarative UI tree rendering with resilient, capability-aware action execution.
"""

__version__ = "0.1.0"
