from supabase import Client, create_client
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from catholic_schedule import config
from catholic_schedule.core.logger import get_logger

logger = get_logger(__name__)

supabase_client: Client = None

# Retried while constructing a client
RETRYABLE_SUPABASE_EXCEPTIONS = (ConnectionError, TimeoutError)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(RETRYABLE_SUPABASE_EXCEPTIONS),
    reraise=True,
)
def _create_supabase_client_with_retry(url, key):
    """Internal helper to create Supabase client with retry logic."""
    return create_client(url, key)


def get_supabase_client() -> Client:
    """Initializes and returns the shared anonymous Supabase client."""
    global supabase_client
    if supabase_client is None:
        if not (config.SUPABASE_URL and config.SUPABASE_KEY):
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set in environment variables")
        supabase_client = _create_supabase_client_with_retry(config.SUPABASE_URL, config.SUPABASE_KEY)
        logger.info("Supabase client initialized successfully.")
    return supabase_client


def create_session_client() -> Client:
    """A fresh, unshared client for a password sign-in; its auth state stays private to the caller."""
    return _create_supabase_client_with_retry(config.SUPABASE_URL, config.SUPABASE_KEY)


def create_authenticated_client(access_token: str) -> Client:
    """
    Creates a fresh client whose table calls carry the user's JWT.

    The shared client is never bound to a user token.
    """
    client = _create_supabase_client_with_retry(config.SUPABASE_URL, config.SUPABASE_KEY)
    client.postgrest.auth(access_token)
    return client
