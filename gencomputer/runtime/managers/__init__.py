"""Business logic for the runtime.

Managers take their collaborators (store, invoker, writer) as arguments and
raise domain exceptions (``InvalidPathError``, ``LookupError``,
``AgentError``), never HTTP exceptions -- that translation is the router's
responsibility.
"""
