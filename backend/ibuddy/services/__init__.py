"""
iBuddy Backend — Services Layer
=================================

What:  The stores and the rules that guard them, between the route handlers
       and the database.

Service Inventory:
    - UserService:      identity store (users, password hashes, login, deletion check)
    - MenteeService:    mentees and their notes in one collection
    - AssetService:     assets owned by users
    - PasswordHasher:   bcrypt hashing used by UserService
    - authorization:    pure rule functions (delete user, mutate mentee / note)
"""
