"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter)
- task_store.py: the task store (commands, filtering, persistence mirror)
- task_api.py: small helpers used by the presentation layer
"""
