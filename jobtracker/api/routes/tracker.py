from fastapi import APIRouter, Depends, HTTPException, status

from jobtracker.schemas.tracker import TrackerEntryCreateRequest, TrackerEntryDeletedResponse, TrackerEntryOut
from jobtracker.services.store import InMemoryStore, get_tracker_store

router = APIRouter()


@router.get("", response_model=list[TrackerEntryOut])
async def list_entries(store: InMemoryStore = Depends(get_tracker_store)) -> list[TrackerEntryOut]:
    return [TrackerEntryOut(**entry) for entry in store.list_entries()]


@router.post("", response_model=TrackerEntryOut, status_code=status.HTTP_201_CREATED)
async def create_entry(
    payload: TrackerEntryCreateRequest,
    store: InMemoryStore = Depends(get_tracker_store),
) -> TrackerEntryOut:
    entry = store.add_entry(
        company=payload.company,
        position=payload.position,
        applied_date=payload.applied_date,
        status=payload.status,
        link=payload.link,
        notes=payload.notes,
    )
    return TrackerEntryOut(**entry)


@router.get("/{entry_id}", response_model=TrackerEntryOut)
async def get_entry(entry_id: int, store: InMemoryStore = Depends(get_tracker_store)) -> TrackerEntryOut:
    entry = store.get_entry(entry_id)
    if not entry:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    return TrackerEntryOut(**entry)


@router.delete("/{entry_id}", response_model=TrackerEntryDeletedResponse)
async def delete_entry(
    entry_id: int,
    store: InMemoryStore = Depends(get_tracker_store),
) -> TrackerEntryDeletedResponse:
    entry = store.delete_entry(entry_id)
    if not entry:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    return TrackerEntryDeletedResponse(message="Application deleted", app=TrackerEntryOut(**entry))
