"""Caller identity threaded through every service operation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ActorContext:
    """Who is acting, and on behalf of which organization."""

    user: str
    organization_id: int
