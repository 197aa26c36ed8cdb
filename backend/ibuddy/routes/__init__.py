"""
iBuddy Backend — API Routes
=============================

Route Inventory:
    - auth.py:     POST /api/auth/login, GET /api/auth/me
    - users.py:    /api/users (list, create, deletion check, delete)
    - mentees.py:  /api/mentees and /api/mentees/{id}/notes
    - health.py:   GET /health

Routes stay thin: load through the services, check the authorization rules,
write through the services. Business rules live in ibuddy.services.
"""
