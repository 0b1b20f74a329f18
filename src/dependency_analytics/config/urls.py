from __future__ import annotations


def get_component_analyses_url(server_url: str) -> str:
    return f"{server_url.rstrip('/')}/component-analyses"


def get_api_url(server: str) -> str:
    """API root for a server given in ~/.analysis_rc."""
    return f"{server.rstrip('/')}/api/v2"
