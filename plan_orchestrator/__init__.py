"""Plan orchestrator.

This package executes machine-generated plans made of function calls,
user-input pauses and conditional branches, and records a deterministic,
resumable execution trace.

High-level architecture
-----------------------

- ``plan_orchestrator.engine``:

  - Plan/step/result schemas and plan validation.
  - A LangGraph-based executor with per-step timeouts and conditional
    branching.
  - A condition evaluator that fails closed (False) instead of raising.
  - A session manager with pause/resume, retry and cancellation on top of
    pluggable session and plan stores.

- ``plan_orchestrator.core``: logging configuration and settings.

Typical workflow
----------------

1. Build a session manager with ``build_session_manager``.
2. ``create_session(plan)`` then ``execute_session(session_id)``.
3. If the session is ``waiting_input``, collect values for
   ``session.pending_input`` and call ``resume_session``.
4. If it failed, ``retry_session(session_id, from_step=...)`` and execute the
   new session.

Plan generation, user interfaces, durable storage and the transport behind
function calls are external collaborators plugged in through protocols.
"""
