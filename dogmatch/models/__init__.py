from .user import User
from .dog import Dog, DogLocation
from .match import Match
from .message import Message
from .notification import Notification

__all__ = ["User", "Dog", "DogLocation", "Match", "Message", "Notification"]
