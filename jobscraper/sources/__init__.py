from .base import Extractor, SelectorStrategy, first_match
from .drushim import DrushimExtractor
from .linkedin import LinkedInPublicExtractor
from .linkedin_auth import LinkedInAuthExtractor

from jobscraper.log import get_logger
from jobscraper.session import SessionStore, authenticate

log = get_logger(__name__)

__all__ = [
    "Extractor", "SelectorStrategy", "first_match",
    "DrushimExtractor", "LinkedInPublicExtractor", "LinkedInAuthExtractor",
    "get_linkedin_extractor",
]


def get_linkedin_extractor(user_id: str, fetcher, credentials, sessions: SessionStore) -> Extractor:
    """Authenticated extractor when the user has usable credentials, else public."""
    if credentials is not None and credentials.has_credentials(user_id):
        session = authenticate(user_id, credentials, sessions)
        if session is not None:
            log.info("Using authenticated LinkedIn scraping for user %s", user_id)
            return LinkedInAuthExtractor(fetcher, session, credentials)
        log.warning("LinkedIn authentication failed for user %s — using public search", user_id)
    return LinkedInPublicExtractor(fetcher)
