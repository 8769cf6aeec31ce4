import os
import logging
from google.cloud import storage
from google.cloud import firestore
import requests
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Configuration
STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "snaphood-images")
STORAGE_BASE_URL = os.getenv("STORAGE_BASE_URL", "/storage")
PROJECT_ID = os.getenv("GOOGLE_CLOUD_PROJECT", "your-project-id")
NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org/reverse")
GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "snaphood/1.0")
SLACK_CLIENT_ID = os.getenv("SLACK_CLIENT_ID", "")
SLACK_CLIENT_SECRET = os.getenv("SLACK_CLIENT_SECRET", "")
SLACK_REDIRECT_URI = os.getenv("SLACK_REDIRECT_URI", "http://localhost:8080/auth/callback")
FLASK_SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "dev-secret-key")
FRONT_CAMERA_INDEX = int(os.getenv("FRONT_CAMERA_INDEX", "0"))
BACK_CAMERA_INDEX = int(os.getenv("BACK_CAMERA_INDEX", "1"))

# Initialize Clients
storage_client = None
firestore_client = None
http_session = None

def init_services():
    global storage_client, firestore_client, http_session

    logger.info("Initializing services...")

    # Storage
    try:
        storage_client = storage.Client(project=PROJECT_ID)
        logger.info(f"Successfully initialized Storage client. Bucket: {STORAGE_BUCKET}")
    except Exception as e:
        logger.error(f"Failed to initialize Storage client: {e}")

    # Firestore
    try:
        firestore_client = firestore.Client(project=PROJECT_ID)
        logger.info("Successfully initialized Firestore client")
    except Exception as e:
        logger.error(f"Failed to initialize Firestore client: {e}")

    # HTTP (geocoding, OAuth)
    http_session = requests.Session()
    http_session.headers.update({"User-Agent": GEOCODER_USER_AGENT})
    logger.info("Successfully initialized HTTP session")
