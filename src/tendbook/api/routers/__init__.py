"""Instance routers, all mounted under ``{api_prefix}/{sync_id}``."""
