"""
Conversational layer.

This package contains:
- dispatcher: map raw chat input to a dataset selection
- assistants: the tips and salon front-end profiles
- session: per-user conversation/table state and the actions that change it
"""
