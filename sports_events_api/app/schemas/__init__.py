"""
Pydantic schema definitions.

Request schemas validate action input and carry user-facing messages
for every rule; read schemas describe the rows relayed back to callers.
"""
