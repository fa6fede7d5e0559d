from prometheus_fastapi_instrumentator import Instrumentator

from issueboard import create_app
from issueboard.core.config import get_settings
from issueboard.core.logging import configure_logging

settings = get_settings()
configure_logging(settings.LOG_LEVEL, app_name=settings.APP_NAME)
app = create_app(settings)
Instrumentator().instrument(app).expose(app)
