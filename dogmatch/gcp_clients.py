import os
import logging
from google.cloud import pubsub_v1
from google.cloud import firestore
import googlemaps
from dotenv import load_dotenv

from .config import DEFAULT_TOKEN_EXPIRY_HOURS

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

# Configuration
PROJECT_ID = os.getenv("GOOGLE_CLOUD_PROJECT", "your-project-id")
PUSH_TOPIC_ID = os.getenv("PUSH_TOPIC_ID", "dog-match-push")
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")
DEFAULT_JWT_SECRET_KEY = "change-me"
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", DEFAULT_JWT_SECRET_KEY)
JWT_EXPIRES_HOURS = int(os.getenv("JWT_EXPIRES_HOURS", str(DEFAULT_TOKEN_EXPIRY_HOURS)))
APP_ENV = os.getenv("APP_ENV", "development")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
PORT = int(os.getenv("PORT", "8080"))

# Initialize Clients
pubsub_publisher = None
topic_path = None
firestore_client = None
gmaps = None


def init_services():
    global pubsub_publisher, topic_path, firestore_client, gmaps

    logger.info("Initializing services...")

    # Pub/Sub (device push relay)
    try:
        pubsub_publisher = pubsub_v1.PublisherClient()
        topic_path = pubsub_publisher.topic_path(PROJECT_ID, PUSH_TOPIC_ID)
        logger.info(f"Successfully initialized Pub/Sub client. Topic: {topic_path}")
    except Exception as e:
        logger.error(f"Failed to initialize Pub/Sub client: {e}")

    # Firestore
    try:
        firestore_client = firestore.Client()
        logger.info("Successfully initialized Firestore client")
    except Exception as e:
        logger.error(f"Failed to initialize Firestore client: {e}")

    # Maps
    if not GOOGLE_MAPS_API_KEY:
        logger.warning("GOOGLE_MAPS_API_KEY not set, reverse geocoding disabled")
        return
    try:
        gmaps = googlemaps.Client(key=GOOGLE_MAPS_API_KEY)
        logger.info("Successfully initialized Google Maps client")
    except Exception as e:
        logger.error(f"Failed to initialize Google Maps client: {e}")
