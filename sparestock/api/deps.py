"""
Shared API dependencies
"""
from fastapi import Header
from typing import Optional


def get_actor(x_user: Optional[str] = Header(None)) -> Optional[str]:
    """Acting user as reported by the caller; authentication happens upstream"""
    if x_user is None:
        return None
    return x_user.strip() or None
