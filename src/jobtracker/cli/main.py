"""Job Tracker CLI — register, log in, and manage your applications.

Usage:
    jobtracker serve                                  # Run the API server
    jobtracker register "Ana" a@x.com                 # Create an account (prints token)
    jobtracker login a@x.com                          # Log in (prints token)
    export JOBTRACKER_TOKEN=<token>
    jobtracker list --status interviewing             # Your applications
    jobtracker add Acme "Backend Engineer"            # New application (status Applied)
    jobtracker update <job-id> --status offer         # Change fields
    jobtracker delete <job-id>                        # Remove an application
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import os
import sys
from typing import Optional

import click
import httpx

from jobtracker import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"
STATUS_CHOICES = ["applied", "interviewing", "rejected", "offer"]


def _api_url() -> str:
    return os.environ.get("JOBTRACKER_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the Job Tracker API."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Offloads to a thread when an event loop is already running
    (e.g. CliRunner inside an async test).
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _require_token(token: Optional[str]) -> str:
    tok = token or os.environ.get("JOBTRACKER_TOKEN")
    if not tok:
        click.secho(
            "Error: --token required (or set JOBTRACKER_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return tok


def _check(r: httpx.Response) -> None:
    """Exit with the API's error message on any non-2xx response."""
    if r.is_success:
        return
    try:
        detail = r.json().get("detail", r.text)
    except ValueError:
        detail = r.text
    click.secho(f"Error ({r.status_code}): {detail}", fg="red", err=True)
    sys.exit(1)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "—"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


def _status_color(status: str) -> str:
    colors = {
        "Applied": "blue",
        "Interviewing": "yellow",
        "Rejected": "red",
        "Offer": "green",
    }
    return colors.get(status, "white")


def _echo_job(job: dict, verb: str):
    status_str = click.style(job["status"], fg=_status_color(job["status"]))
    click.secho(f"{verb}: {job['title']} at {job['company']}", fg="green")
    click.echo(f"  ID:      {job['id']}")
    click.echo(f"  Status:  {status_str}")
    click.echo(f"  Applied: {job['applicationDate']}")
    if job.get("notes"):
        click.echo(f"  Notes:   {job['notes']}")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="jobtracker")
def main():
    """Job Tracker — keep track of your job applications."""


# ---------------------------------------------------------------------------
# jobtracker serve
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default: JOBTRACKER_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: JOBTRACKER_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server with uvicorn."""
    import uvicorn

    from jobtracker.config import settings

    uvicorn.run(
        "jobtracker.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# jobtracker register / login
# ---------------------------------------------------------------------------


@main.command()
@click.argument("name")
@click.argument("email")
@click.password_option(confirmation_prompt=True)
def register(name: str, email: str, password: str):
    """Create an account. Prints a token to export as JOBTRACKER_TOKEN."""
    _run(_register_impl(name, email, password))


async def _register_impl(name: str, email: str, password: str):
    async with _client() as c:
        r = await c.post("/api/auth/register", json={
            "name": name,
            "email": email,
            "password": password,
            "confirmPassword": password,
        })
        _check(r)
        data = r.json()
        click.secho(f"Registered {data['name']} <{data['email']}>", fg="green")
        click.echo(data["token"])


@main.command()
@click.argument("email")
@click.password_option(confirmation_prompt=False)
def login(email: str, password: str):
    """Log in. Prints a token to export as JOBTRACKER_TOKEN."""
    _run(_login_impl(email, password))


async def _login_impl(email: str, password: str):
    async with _client() as c:
        r = await c.post("/api/auth/login", json={"email": email, "password": password})
        _check(r)
        data = r.json()
        click.secho(f"Logged in as {data['name']} <{data['email']}>", fg="green")
        click.echo(data["token"])


# ---------------------------------------------------------------------------
# jobtracker list
# ---------------------------------------------------------------------------


@main.command(name="list")
@click.option("--status", "-s", "status_filter",
              type=click.Choice(STATUS_CHOICES + ["all"], case_sensitive=False),
              help="Filter by status")
@click.option("--token", help="Bearer token (or set JOBTRACKER_TOKEN)")
def list_jobs(status_filter: Optional[str], token: Optional[str]):
    """List your job applications, newest first."""
    _run(_list_impl(status_filter, _require_token(token)))


async def _list_impl(status_filter: Optional[str], token: str):
    async with _client(token) as c:
        params = {"status": status_filter} if status_filter else {}
        r = await c.get("/api/jobs", params=params)
        _check(r)
        jobs = r.json()

        if not jobs:
            click.echo("No jobs found.")
            return

        click.secho(f"Jobs ({len(jobs)}):", bold=True)
        click.echo()
        _print_table(jobs, [
            ("ID", "id", 36),
            ("Status", "status", 12),
            ("Applied", "applicationDate", 10),
            ("Company", "company", 24),
            ("Title", "title", 40),
        ])


# ---------------------------------------------------------------------------
# jobtracker add / update / delete
# ---------------------------------------------------------------------------


@main.command()
@click.argument("company")
@click.argument("title")
@click.option("--status", "-s", default="applied", show_default=True,
              type=click.Choice(STATUS_CHOICES, case_sensitive=False))
@click.option("--date", "-d", "application_date", help="Application date (YYYY-MM-DD, default today)")
@click.option("--notes", "-n", help="Free-form notes")
@click.option("--token", help="Bearer token (or set JOBTRACKER_TOKEN)")
def add(company: str, title: str, status: str, application_date: Optional[str],
        notes: Optional[str], token: Optional[str]):
    """Add a job application."""
    _run(_add_impl(company, title, status, application_date, notes, _require_token(token)))


async def _add_impl(company: str, title: str, status: str, application_date: Optional[str],
                    notes: Optional[str], token: str):
    body: dict = {"company": company, "title": title, "status": status}
    if application_date:
        body["applicationDate"] = application_date
    if notes:
        body["notes"] = notes

    async with _client(token) as c:
        r = await c.post("/api/jobs", json=body)
        _check(r)
        _echo_job(r.json(), "Added")


@main.command()
@click.argument("job_id")
@click.option("--company", "-c")
@click.option("--title", "-t")
@click.option("--status", "-s", type=click.Choice(STATUS_CHOICES, case_sensitive=False))
@click.option("--date", "-d", "application_date", help="Application date (YYYY-MM-DD)")
@click.option("--notes", "-n")
@click.option("--token", help="Bearer token (or set JOBTRACKER_TOKEN)")
def update(job_id: str, company: Optional[str], title: Optional[str], status: Optional[str],
           application_date: Optional[str], notes: Optional[str], token: Optional[str]):
    """Change fields of a job application. Unspecified fields are kept."""
    changes = {
        "company": company,
        "title": title,
        "status": status,
        "applicationDate": application_date,
        "notes": notes,
    }
    _run(_update_impl(job_id, changes, _require_token(token)))


async def _update_impl(job_id: str, changes: dict, token: str):
    async with _client(token) as c:
        # PUT replaces every field, so start from the current record
        r = await c.get(f"/api/jobs/{job_id}")
        _check(r)
        current = r.json()

        body = {
            key: current.get(key)
            for key in ("company", "title", "status", "applicationDate", "notes")
        }
        body.update({k: v for k, v in changes.items() if v is not None})

        r = await c.put(f"/api/jobs/{job_id}", json=body)
        _check(r)
        _echo_job(r.json(), "Updated")


@main.command()
@click.argument("job_id")
@click.option("--token", help="Bearer token (or set JOBTRACKER_TOKEN)")
def delete(job_id: str, token: Optional[str]):
    """Delete a job application."""
    _run(_delete_impl(job_id, _require_token(token)))


async def _delete_impl(job_id: str, token: str):
    async with _client(token) as c:
        r = await c.delete(f"/api/jobs/{job_id}")
        _check(r)
        click.secho(f"Deleted job {r.json()['id']}", fg="green")
