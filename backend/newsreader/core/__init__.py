# newsreader/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Application initialization and default admin creation
- db: Database configuration and connection management
- errors: Application error taxonomy
- security: Password hashing and session token signing
- sessions: Server-side session store and flash messages
"""
