"""
Configuration constants for the Dog Match application.
"""

# Firestore collections
USERS_COLLECTION = "users"
DOGS_COLLECTION = "dogs"
MATCHES_COLLECTION = "matches"
MESSAGES_COLLECTION = "messages"
NOTIFICATIONS_COLLECTION = "notifications"
ACCOUNTS_COLLECTION = "accounts"
MATCH_PAIRS_COLLECTION = "match_pairs"

# Firestore limits
MAX_IN_QUERY_VALUES = 30

# Authentication
MIN_PASSWORD_LENGTH = 6
DEFAULT_TOKEN_EXPIRY_HOURS = 24 * 7

# Users
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 50
MIN_SEARCH_RADIUS_KM = 1
MAX_SEARCH_RADIUS_KM = 100
DEFAULT_PREFERENCES = {
    "notifications": True,
    "emailUpdates": False,
    "radius": 10,
}

# Dogs
MIN_DOG_AGE = 0
MAX_DOG_AGE = 30
DOG_GENDERS = ("male", "female")
DOG_SIZES = ("small", "medium", "large")
LEVELS = ("low", "medium", "high")
MAX_PHOTOS = 6
MAX_DESCRIPTION_LENGTH = 500

# Geolocation
DEFAULT_RADIUS_KM = 10
EARTH_RADIUS_KM = 6371

# Matches
MATCH_RESPONSES = ("accepted", "rejected")
MATCH_PURPOSES = ("breeding", "playdate")
MAX_NOTES_LENGTH = 500

# Messages
MAX_MESSAGE_LENGTH = 1000
MAX_ATTACHMENTS = 5
ATTACHMENT_TYPES = ("image", "document")

# Notifications
NOTIFICATION_TYPES = ("match_request", "match_update", "message", "system")

# Real-time events
EVENT_JOIN_MATCH = "joinMatch"
EVENT_LEAVE_MATCH = "leaveMatch"
EVENT_NEW_MESSAGE = "newMessage"
EVENT_MESSAGE_READ = "messageRead"
EVENT_MATCH_UPDATE = "matchUpdate"
EVENT_ERROR = "error"
