"""
iBuddy Backend — Application Package
======================================

What: Backend for the iBuddy mentee/buddy management dashboard.
Why:  Keeps track of incoming mentees, the buddies assigned to them, the
      notes buddies write along the way, and who is allowed to change what.

Architecture Note:

    ┌─────────────────────────────────────┐
    │     Routes (thin JSON handlers)     │  ← authenticate, authorize, respond
    ├─────────────────────────────────────┤
    │   Services (stores + authorization) │  ← user / mentee / asset stores
    ├─────────────────────────────────────┤
    │     Models, Schemas & Keys (Data)   │  ← ORM rows, API records, key format
    ├─────────────────────────────────────┤
    │       Database (Persistence)        │  ← engine owned by the app lifespan
    └─────────────────────────────────────┘

    Services never reach for a global connection: every store method takes
    the session it should use as its first argument.
"""

__version__ = "1.0.0"
