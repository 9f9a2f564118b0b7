"""
mytodo: a todo-list application split into a user service, a todo service and
an HTTP gateway (backend-for-frontend) that fronts both.
"""

__version__ = "0.1.0"
