"""
Task subsystem.

Components:
- task_models.py: data structures (Task, User, TaskPriority, TaskStatus, RecurringPattern)
- task_schema.py: boundary validation of create/update payloads
- task_store.py: in-memory storage + query helpers
- ordering.py: canonical sort order and overdue/due-soon classification
- notifications.py: polling scheduler that raises due-date alerts
"""
