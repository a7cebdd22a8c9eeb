"""Business logic: auth lifecycle and role-gated books."""
