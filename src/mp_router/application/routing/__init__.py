"""Application routing – Router, Group and JsonPublisher."""
from mp_router.application.routing.group import Group
from mp_router.application.routing.publisher import JsonPublisher
from mp_router.application.routing.router import Router

__all__ = ["Group", "JsonPublisher", "Router"]
