import os

from dotenv import load_dotenv

from catholic_schedule.core.logger import get_logger

logger = get_logger(__name__)

load_dotenv()

# --- Supabase Configuration ---
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# --- Geocoder Configuration ---
GEOCODER_BASE_URL = os.getenv("GEOCODER_BASE_URL", "https://api.zippopotam.us")
GEOCODER_COUNTRY = os.getenv("GEOCODER_COUNTRY", "us")
HTTP_TIMEOUT = int(os.getenv("HTTP_TIMEOUT", "10"))

# --- Web Server ---
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if origin.strip()
]

# --- Search Defaults ---
ALLOWED_RADII = (5, 10, 25, 50)
DEFAULT_RADIUS = 25
RESULT_LIMIT = 20

# St. Monica Catholic Parish, shown until the first search
DEFAULT_MAP_CENTER = (40.76622, -80.35586)


def validate_config():
    """Validates that the backend credentials are loaded."""
    if not all([SUPABASE_URL, SUPABASE_KEY]):
        logger.warning("Warning: SUPABASE_URL and/or SUPABASE_KEY are not set.")
        logger.warning("Please check your .env file or environment configuration.")
        return False

    logger.info("All configurations loaded successfully.")
    return True


if __name__ == "__main__":
    validate_config()
