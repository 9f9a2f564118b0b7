"""
HTTP gateway (backend-for-frontend): bearer-token authentication and JSON
endpoints translated into calls on the user and todo services.
"""
