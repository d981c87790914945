import logging

from admin_gateway.config import settings
from admin_gateway.domain.services.log_query_service import LogQueryService
from admin_gateway.domain.services.log_stream_service import LogStreamService
from admin_gateway.infrastructure.logs.log_file_client import LogFileClient

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# Service dependencies
def get_log_file_client() -> LogFileClient:
    return LogFileClient(settings)


def get_log_query_service() -> LogQueryService:
    return LogQueryService(get_log_file_client())


def get_log_stream_service() -> LogStreamService:
    return LogStreamService(get_log_file_client())
