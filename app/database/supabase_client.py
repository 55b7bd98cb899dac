from supabase import create_client, Client, ClientOptions
from app.config import settings


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, cls._anon_key())
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Use for admin operations and server-side queries."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def create_session_client(cls) -> Client:
        """Fresh, uncached anon client for a single password sign-in.

        Signing in stores the user's session on the client and switches its
        database auth header, so it must never be one of the shared clients.
        Token refresh is off: the session is handed to the caller and the
        client is discarded, so no refresh timer may outlive the request.
        """
        return create_client(
            settings.supabase_url,
            cls._anon_key(),
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None

    @staticmethod
    def _anon_key() -> str:
        return settings.supabase_key or settings.supabase_service_role_key or ""


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()


def get_session_client() -> Client:
    return SupabaseClient.create_session_client()
