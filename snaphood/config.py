"""
Configuration constants for the Snaphood application.
"""

# Firestore
SNAPS_COLLECTION = "snaps"
COMMENTS_COLLECTION = "comments"
PROFILES_COLLECTION = "profiles"

# Storage
IMAGES_BUCKET = "images"
IMAGE_CONTENT_TYPE = "image/png"
IMAGE_EXTENSION = "png"
MAX_IMAGE_SIZE_MB = 10

# Validation
MAX_DESCRIPTION_LENGTH = 500
MAX_COMMENT_LENGTH = 300

# Presentation
CLUSTER_PRECISION = 3
POPUP_DESCRIPTION_LENGTH = 60
FEED_DESCRIPTION_LENGTH = 120
SEARCHING_ADDRESS_LABEL = "Searching address..."
UNAVAILABLE_ADDRESS_LABEL = "Address unavailable"

# Map frame
MAP_CENTER = (37.7749, -122.4194)
MAP_ZOOM = 12
TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
TILE_ATTRIBUTION = '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'

# Geolocation
LOCATE_TIMEOUT_SECONDS = 10
LOCATE_MAXIMUM_AGE_SECONDS = 300

# Camera
CAMERA_IDEAL_WIDTH = 1920
CAMERA_IDEAL_HEIGHT = 1080
