from __future__ import annotations

import os
from pathlib import Path


class Settings:
    """Centralized configuration for the iFast client and the development backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        # ---- Backend API ----
        self.base_url: str = os.environ.get("IFAST_BASE_URL") or "http://localhost:8080"
        self.request_timeout: float = float(os.environ.get("IFAST_REQUEST_TIMEOUT") or "30")
        self.user_agent: str = os.environ.get("IFAST_USER_AGENT") or "iFast Python Client"

        # ---- Device-local storage ----
        self.data_root: Path = Path(
            os.environ.get("IFAST_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("IFAST_DB_PATH") or (self.data_root / "fasts.sqlite")
        ).expanduser()
        self.health_export_dir: Path = Path(
            os.environ.get("IFAST_HEALTH_EXPORT_DIR") or (self.data_root / "healthkit")
        ).expanduser()

        # Credential store key, mirrors the keychain service/account pair on device.
        self.credential_service: str = os.environ.get("IFAST_CREDENTIAL_SERVICE") or "iFast.AuthAPI.TokenStore"
        self.credential_account: str = os.environ.get("IFAST_CREDENTIAL_ACCOUNT") or "default"

        self.step_goal: int = int(os.environ.get("IFAST_STEP_GOAL") or "10000")
        self.log_level: str = (os.environ.get("IFAST_LOG_LEVEL") or "INFO").upper()

        # ---- Development backend ----
        self.dev_db_path: Path = Path(
            os.environ.get("IFAST_DEV_DB_PATH") or (self.data_root / "devserver.db")
        ).expanduser()
        # Local development only. Never reuse this default outside a laptop.
        self.dev_jwt_secret: str = os.environ.get("IFAST_DEV_JWT_SECRET") or "dev-secret-change-me"
        self.dev_access_ttl_minutes: int = int(os.environ.get("IFAST_DEV_ACCESS_TTL_MINUTES") or "15")
        self.dev_refresh_ttl_days: int = int(os.environ.get("IFAST_DEV_REFRESH_TTL_DAYS") or "7")
        self.dev_host: str = os.environ.get("IFAST_DEV_HOST") or "127.0.0.1"
        self.dev_port: int = int(os.environ.get("IFAST_DEV_PORT") or "8080")


settings = Settings()
