"""FastAPI dependency providers (overridden in tests)."""

from functools import lru_cache

from app.adapters.supabase import SupabaseFunctionsClient
from app.config import settings
from app.services.edge_tools import EdgeFunctionTools
from app.services.function_service import FunctionStore
from app.services.runtime_controller import RuntimeController
from app.services.secret_service import SecretStore


@lru_cache
def get_edge_tools() -> EdgeFunctionTools:
    """Build the store facade once per process from ``settings``."""
    runtime = RuntimeController(
        settings.runtime_restart_command, timeout=settings.runtime_restart_timeout,
    )
    return EdgeFunctionTools(
        functions=FunctionStore(settings.functions_dir, source_ext=settings.functions_source_ext),
        secrets=SecretStore(settings.functions_dir, runtime),
        backend=SupabaseFunctionsClient(
            settings.functions_url, settings.service_role_key, timeout=settings.invoke_timeout,
        ),
    )
