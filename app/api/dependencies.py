from app.lib.logger import configure_logger
from app.services.core.explain_service import ExplainService

# Configure logger
logger = configure_logger(__name__)


def get_explain_service() -> ExplainService:
    """Provide the ExplainService used by the explain routes.

    Every request gets a fresh service; its Hiro clients are opened and
    closed per request, so nothing is shared between requests.
    """
    return ExplainService()
