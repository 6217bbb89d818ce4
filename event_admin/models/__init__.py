from event_admin.models.event import Event
from event_admin.models.nwta_event import NwtaEvent

__all__ = ["Event", "NwtaEvent"]
