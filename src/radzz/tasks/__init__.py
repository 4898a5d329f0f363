"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskPriority, EditSession)
- task_views.py: derived views (filtered, priority, selector)
- task_store.py: canonical in-memory collection + mutations + re-rendering
- task_api.py: small high-level helpers used by the console commands
"""
