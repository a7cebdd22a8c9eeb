"""BookCircle API: accounts, JWT access/refresh tokens and role-gated book handlers."""
