import os
from typing import Tuple


def _split_endpoints(raw: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


class Settings:
    # API Settings
    PROJECT_NAME: str = "rtinfo Prometheus Exporter"
    VERSION: str = "1.0.0"
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", 8089))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # rtinfo Polling Settings
    RTINFO_ENDPOINTS: Tuple[str, ...] = _split_endpoints(os.getenv("RTINFO_ENDPOINTS", ""))
    RTINFO_POLL_INTERVAL: float = float(os.getenv("RTINFO_POLL_INTERVAL", "1.0"))
    RTINFO_POLL_TIMEOUT: float = float(os.getenv("RTINFO_POLL_TIMEOUT", "2.0"))

    # Exporter Settings
    EXPORTER_LOCAL_PROBE: bool = os.getenv("EXPORTER_LOCAL_PROBE", "false").lower() == "true"
    EXPORTER_LOCAL_IP: str = os.getenv("EXPORTER_LOCAL_IP", "127.0.0.1")
    EXPORTER_ENABLE_PUSH: bool = os.getenv("EXPORTER_ENABLE_PUSH", "false").lower() == "true"

    @property
    def poller_enabled(self) -> bool:
        return bool(self.RTINFO_ENDPOINTS) or self.EXPORTER_LOCAL_PROBE


settings = Settings()
