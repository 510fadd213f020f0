# /gradeflow/routers/dependencies.py

from typing import Optional
from fastapi import Header

from .. import config

def get_actor_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """The acting user, as forwarded by the upstream authentication layer."""
    return x_user_id or config.DEFAULT_ACTOR_ID
