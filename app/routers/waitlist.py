from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from app.core.dependencies import get_notification_dispatcher, get_waitlist_store
from app.core.errors import PersistenceError
from app.models.waitlist import DeleteResponse, WaitlistCreate, WaitlistEntry
from app.services.notification_service import NotificationDispatcher
from app.services.waitlist_service import WaitlistStore
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["waitlist"])


@router.post("", response_model=WaitlistEntry)
async def create_waitlist_entry(
    waitlist_data: WaitlistCreate,
    background_tasks: BackgroundTasks,
    store: WaitlistStore = Depends(get_waitlist_store),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher)
):
    """Join the waitlist"""
    try:
        entry = await store.create(
            waitlist_data.email,
            wait_list_code=waitlist_data.wait_list_code,
            preferences=waitlist_data.preferences
        )
    except PersistenceError as e:
        logger.error(f"Error creating waitlist entry: {e}")
        raise HTTPException(
            status_code=500,
            detail="Failed to create waitlist entry"
        )

    # Emails go out after the response has been sent
    background_tasks.add_task(dispatcher.notify, entry)
    return entry


@router.get("", response_model=List[WaitlistEntry])
async def list_waitlist_entries(
    store: WaitlistStore = Depends(get_waitlist_store)
):
    """All waitlist entries, newest first"""
    try:
        return await store.list_all()
    except PersistenceError as e:
        logger.error(f"Error listing waitlist entries: {e}")
        raise HTTPException(
            status_code=500,
            detail="Failed to get waitlist entries"
        )


@router.get("/{entry_id}", response_model=Optional[WaitlistEntry])
async def get_waitlist_entry(
    entry_id: str,
    store: WaitlistStore = Depends(get_waitlist_store)
):
    """A single waitlist entry; null when the id is unknown"""
    try:
        return await store.get_by_id(entry_id)
    except PersistenceError as e:
        logger.error(f"Error getting waitlist entry {entry_id}: {e}")
        raise HTTPException(
            status_code=500,
            detail="Failed to get waitlist entry"
        )


@router.delete("/{entry_id}", response_model=DeleteResponse)
async def delete_waitlist_entry(
    entry_id: str,
    store: WaitlistStore = Depends(get_waitlist_store)
):
    """Remove a waitlist entry"""
    try:
        deleted = await store.delete_by_id(entry_id)
    except PersistenceError as e:
        logger.error(f"Error deleting waitlist entry {entry_id}: {e}")
        raise HTTPException(
            status_code=500,
            detail="Failed to delete waitlist entry"
        )

    if not deleted:
        raise HTTPException(status_code=404, detail="Waitlist entry not found")
    return DeleteResponse()
