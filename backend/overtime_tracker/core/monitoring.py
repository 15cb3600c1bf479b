from typing import Optional

import sentry_sdk

from overtime_tracker.core.config import settings
from overtime_tracker.core.observability import SERVICE_NAME


def configure_error_monitoring(dsn: Optional[str] = None) -> bool:
    """Start Sentry when a DSN is configured. Returns whether it was started."""
    dsn = dsn or settings.sentry_dsn
    if not dsn:
        return False
    sentry_sdk.init(
        dsn=dsn,
        environment=settings.env,
        server_name=SERVICE_NAME,
        traces_sample_rate=0.2,
        send_default_pii=False,
    )
    sentry_sdk.set_tag("service.name", SERVICE_NAME)
    sentry_sdk.set_tag("office.timezone", settings.office_timezone)
    return True
