# agentns namespace packages
"""
Each subpackage implements one extension vocabulary. A subpackage exposes
``NAMESPACE_URI`` and a ``loader(...)`` factory returning a
``NamespaceLoader``; ``NamespaceRegistry.discover`` registers them.
"""
