import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.auth.models import User
from bottin.auth.permissions import is_owner_or_admin
from bottin.auth.sessions import SessionRecord
from bottin.events.models import Event
from bottin.events.schemas import EventCreate, EventUpdate

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = {"title", "description", "location", "event_date"}


class EventNotFoundError(Exception):
    pass


class EventPermissionError(Exception):
    pass


class InvalidOrganizerError(Exception):
    pass


class EventService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_events(self, limit: Optional[int] = None, organizer_id: Optional[int] = None) -> List[Event]:
        query = select(Event).order_by(Event.event_date.asc(), Event.id.asc())
        if organizer_id is not None:
            query = query.where(Event.organizer_id == organizer_id)
        if limit:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_event(self, event_id: int) -> Event:
        event = await self.db.get(Event, event_id)
        if not event:
            raise EventNotFoundError(event_id)
        return event

    async def create_event(self, event_data: EventCreate, actor: SessionRecord) -> Event:
        organizer_id = event_data.organizer_id or actor.user_id

        # Seuls les admins peuvent créer un événement pour un autre utilisateur
        if organizer_id != actor.user_id:
            if not actor.is_admin:
                raise EventPermissionError("Only admins can create events for other users")
            await self._check_organizer(organizer_id)

        db_event = Event(
            title=event_data.title,
            description=event_data.description,
            location=event_data.location,
            event_date=event_data.event_date,
            image_url=event_data.image_url,
            registration_url=event_data.registration_url,
            organizer_id=organizer_id,
        )
        self.db.add(db_event)
        await self.db.commit()

        logger.info(f"Event created: id={db_event.id}, title={db_event.title}, by organizer_id={organizer_id}")
        return db_event

    async def update_event(self, event_id: int, event_data: EventUpdate, actor: SessionRecord) -> Event:
        event = await self.get_event(event_id)

        # Seul l'organisateur ou un admin peut modifier un événement
        if not is_owner_or_admin(actor, event.organizer_id):
            raise EventPermissionError("Only the organizer or an admin can update this event")

        update_data = event_data.model_dump(exclude_unset=True)

        if "organizer_id" in update_data:
            new_organizer = update_data["organizer_id"]
            if new_organizer != event.organizer_id:
                if not actor.is_admin:
                    raise EventPermissionError("Only admins can change the organizer")
                if new_organizer is not None:
                    await self._check_organizer(new_organizer)

        for field, value in update_data.items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(event, field, value)

        await self.db.commit()
        logger.info(f"Event updated: id={event.id}, fields={sorted(update_data)}")
        return event

    async def delete_event(self, event_id: int, actor: SessionRecord) -> None:
        event = await self.get_event(event_id)

        if not is_owner_or_admin(actor, event.organizer_id):
            raise EventPermissionError("Only the organizer or an admin can delete this event")

        await self.db.delete(event)
        await self.db.commit()
        logger.info(f"Event deleted: id={event_id} by user_id={actor.user_id}")

    async def _check_organizer(self, organizer_id: int) -> None:
        if not await self.db.get(User, organizer_id):
            raise InvalidOrganizerError(f"Organizer {organizer_id} does not exist")
