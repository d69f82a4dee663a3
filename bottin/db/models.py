# Importer tous les modules de modèles pour enregistrer toutes les tables dans Base.metadata
from bottin.db.session import Base
from bottin.auth.models import User, UserSession
from bottin.events.models import Event
from bottin.media.models import ProfileMedia
from bottin.messages.models import Message
from bottin.troc.models import TrocAd

__all__ = ["Base", "User", "UserSession", "Event", "ProfileMedia", "Message", "TrocAd"]
