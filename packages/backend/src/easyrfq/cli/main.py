"""EasyRFQ CLI — run the API and get tokens for it.

Usage:
    easyrfq serve                                # Run the API with uvicorn
    easyrfq token --id 7 --company-id 2          # Sign a token with the configured secret
    easyrfq token --id 1 --admin                 # ...for an admin
    easyrfq login alice@example.com              # Log in over HTTP and print the token
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:3001"


def _api_url() -> str:
    return os.environ.get("EASYRFQ_API_URL", DEFAULT_API_URL).rstrip("/")


def _client() -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the EasyRFQ backend."""
    return httpx.AsyncClient(base_url=_api_url(), timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Handles nested event loops (e.g. Click CliRunner inside an async
    test) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return response.text or f"HTTP {response.status_code}"


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="easyrfq")
def main():
    """EasyRFQ — multi-tenant RFQ and quoting API."""


# ---------------------------------------------------------------------------
# easyrfq serve
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default: EASYRFQ_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: EASYRFQ_PORT)")
@click.option("--reload", is_flag=True, help="Restart on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from easyrfq.config import settings

    uvicorn.run(
        "easyrfq.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# easyrfq token
# ---------------------------------------------------------------------------


@main.command()
@click.option("--id", "user_id", type=int, required=True, help="User id to put in the token")
@click.option("--company-id", type=int, default=None, help="Company the user belongs to")
@click.option("--admin", is_flag=True, help="Sign the token with isAdmin=true")
def token(user_id: int, company_id: Optional[int], admin: bool):
    """Sign a token offline with the configured secret.

    Handy for local testing; anyone holding the secret can mint any
    identity, so keep EASYRFQ_JWT_SECRET out of shared shells.
    """
    from easyrfq.auth.tokens import TokenService
    from easyrfq.config import settings

    tokens = TokenService(
        settings.jwt_secret,
        settings.jwt_algorithm,
        settings.access_token_expire_minutes,
    )
    click.echo(
        tokens.create_token(
            {"id": user_id, "is_admin": admin, "company_id": company_id}
        )
    )


# ---------------------------------------------------------------------------
# easyrfq login
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.password_option(confirmation_prompt=False)
def login(email: str, password: str):
    """Log in against a running server and print the token."""
    _run(_login_impl(email, password))


async def _login_impl(email: str, password: str):
    async with _client() as c:
        r = await c.post("/api/v1/auth/token", json={"email": email, "password": password})

    if r.status_code != 200:
        click.secho(f"Login failed: {_error_message(r)}", fg="red", err=True)
        sys.exit(1)
    click.echo(r.json()["token"])
