"""
Request headers shared by the service and the API clients
"""

# Development mode: pick the acting user without a token
DEV_ROLE_HEADER = "X-Dev-User-Role"
DEV_USER_ID_HEADER = "X-Dev-User-Id"
