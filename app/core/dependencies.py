from fastapi import Request

from app.services.notification_service import NotificationDispatcher
from app.services.waitlist_service import WaitlistStore


def get_waitlist_store(request: Request) -> WaitlistStore:
    """Process-wide store built in the application lifespan"""
    return request.app.state.store


def get_notification_dispatcher(request: Request) -> NotificationDispatcher:
    """Process-wide dispatcher built in the application lifespan"""
    return request.app.state.dispatcher
