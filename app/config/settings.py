from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List, Tuple


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""  # anon key, used for password sign-in
    supabase_service_role_key: Optional[str] = None  # Required for admin operations (create/delete users, bypass RLS)
    storage_bucket: str = "Portfolio"
    max_upload_bytes: int = 5 * 1024 * 1024

    # SMTP (contact form notifications)
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    smtp_from_name: str = "Portfolio Contact"
    receiver_email: Optional[str] = None

    # App
    app_name: str = "portfolify-backend"
    port: int = 5000
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    rate_limit_enabled: bool = True

    # Database-backed limits (check_rate_limit RPC), per route scope
    register_rate_limit: int = 3
    register_rate_window_ms: int = 3_600_000
    login_rate_limit: int = 10
    login_rate_window_ms: int = 600_000
    contact_post_rate_limit: int = 5
    contact_post_rate_window_ms: int = 600_000
    tenant_get_rate_limit: int = 30
    tenant_get_rate_window_ms: int = 60_000
    add_admin_rate_limit: int = 10
    add_admin_rate_window_ms: int = 600_000

    # Tenant slugs that can never be registered
    reserved_tenant_ids: str = "admin,api,www,app,dashboard,login,register,default"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def smtp_configured(self) -> bool:
        return all([self.smtp_host, self.smtp_username, self.smtp_password])

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_reserved_tenant_ids(self) -> List[str]:
        return [t.strip().lower() for t in self.reserved_tenant_ids.split(",") if t.strip()]

    def get_rate_limit(self, scope: str) -> Tuple[int, int]:
        """Return (limit, window_ms) for a rate limit scope such as "register" or "login"."""
        return (
            getattr(self, f"{scope}_rate_limit"),
            getattr(self, f"{scope}_rate_window_ms"),
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
