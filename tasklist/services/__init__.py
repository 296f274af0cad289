"""Domain services.

Services:
- auth.py: Registration and credential checks
- users.py: User lookups and path-user resolution
- tasks.py: Task CRUD scoped to the owning user
- passwords.py: bcrypt hashing off the event loop
"""
