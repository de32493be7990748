from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional
from pathlib import Path

class Settings(BaseSettings):
    app_name: str = Field(default="Airline Ops API", alias="APP_NAME")
    env: str = Field(default="dev", alias="ENV")
    secret_key: str = Field(default="devsecret", alias="SECRET_KEY")
    algorithm: str = Field(default="HS256", alias="ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    # SQLite file by default; set a postgres URL in production
    database_url: str = Field(default="sqlite+pysqlite:///./airline_ops.db", alias="DATABASE_URL")
    sqlite_busy_timeout: float = Field(default=30.0, alias="SQLITE_BUSY_TIMEOUT", description="Seconds a SQLite writer waits for the lock")
    reservation_id_prefix: str = Field(default="R", alias="RESERVATION_ID_PREFIX")
    reservation_id_width: int = Field(default=4, ge=1, alias="RESERVATION_ID_WIDTH")
    auto_promote_waitlist: bool = Field(default=False, alias="AUTO_PROMOTE_WAITLIST")
    # Seed management account (dev/demo convenience)
    seed_management_username: str = Field(default="manager", alias="SEED_MANAGEMENT_USERNAME")
    seed_management_password: str = Field(default="Manager1234!", alias="SEED_MANAGEMENT_PASSWORD")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    # Raw env value (string), parsed to a list via property to avoid JSON decoding errors
    cors_origins_raw: Optional[str] = Field(default=None, alias="CORS_ORIGINS", description="Comma separated list of allowed CORS origins")

    class Config:
        # Load env from backend/.env regardless of CWD
        env_file = str(Path(__file__).resolve().parents[2] / ".env")
        case_sensitive = False
        populate_by_name = True

    def _parse_list(self, v: Optional[str]) -> List[str]:
        if v is None:
            return []
        s = v.strip()
        if not s:
            return []
        if s.startswith("[") and s.endswith("]"):
            import json
            try:
                loaded = json.loads(s)
            except ValueError:
                loaded = None
            if isinstance(loaded, list):
                return [str(e).strip() for e in loaded if str(e).strip()]
        return [e.strip() for e in s.split(",") if e.strip()]

    @property
    def cors_origins(self) -> List[str]:
        items = self._parse_list(self.cors_origins_raw)
        if not items:
            return ["http://localhost:5173", "http://127.0.0.1:5173"]
        return items

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

settings = Settings()  # type: ignore
