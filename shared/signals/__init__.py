"""
Typed signal unions, one module per component.

Each module defines frozen dataclasses for its variants and a ``Signal``
alias for the union. Parents translate a child's variants into their own
through the routes declared with `core.bus.Handle.adopt`.
"""

from . import acquire, application, channel, generator, graph, level, palette, trigger

__all__ = ["acquire", "application", "channel", "generator", "graph", "level", "palette", "trigger"]
