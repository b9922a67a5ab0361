"""
Middleware package for the Anamola API.
"""
from .auth import AuthContext, authenticate_request, get_bearer_token, require_auth, require_admin
