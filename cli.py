# cli.py
from datetime import datetime, timedelta

import click
import httpx

from models import STATUSES, as_utc, utcnow

DEFAULT_URL = "http://127.0.0.1:8080"


@click.group()
@click.option("--url", envvar="JOBREG_URL", default=DEFAULT_URL, show_default=True, help="Base URL of a running jobreg server")
@click.pass_context
def cli(ctx, url):
    """jobreg - a register of deferred jobs"""
    ctx.ensure_object(dict)
    ctx.obj.setdefault("url", url)


def _client(ctx):
    return httpx.Client(base_url=ctx.obj["url"], transport=ctx.obj.get("transport"), timeout=30.0)


def _call(ctx, method, path, **kwargs):
    """Send one request; prints the server's error and exits non-zero on failure."""
    try:
        with _client(ctx) as client:
            resp = client.request(method, path, **kwargs)
    except httpx.HTTPError as e:
        click.echo(f"❌ Cannot reach {ctx.obj['url']}: {e}")
        ctx.exit(1)
    if resp.status_code >= 400:
        try:
            error = resp.json().get("error") or resp.text
        except ValueError:
            error = resp.text
        click.echo(f"❌ {error} (HTTP {resp.status_code})")
        ctx.exit(1)
    return resp.json()


def _parse_when(value):
    """ISO timestamp (UTC if naive) or +seconds from now."""
    if value.startswith("+"):
        return utcnow() + timedelta(seconds=float(value[1:]))
    return as_utc(datetime.fromisoformat(value))


def _format(job):
    executed = job.get("executedAt") or "-"
    return f"{job['id']} | {job['description']} | status={job['status']} | execute_at={job['executeAt']} | executed_at={executed}"


# ---------------- Server ----------------
@cli.command()
@click.option("--host", envvar="JOBREG_HOST", default="127.0.0.1", show_default=True)
@click.option("--port", envvar="JOBREG_PORT", default=8080, type=int, show_default=True)
@click.option("--tick-seconds", envvar="JOBREG_TICK_SECONDS", default=1.0, type=float, show_default=True, help="Interval between scheduler scans")
@click.option("--work-seconds", envvar="JOBREG_WORK_SECONDS", default=1.0, type=float, show_default=True, help="Simulated execution time per job")
def serve(host, port, tick_seconds, work_seconds):
    """Run the HTTP API together with the background scheduler"""
    import uvicorn

    from api import create_app
    from service import JobService
    from storage import JobStore
    from worker import Executor, Scheduler

    store = JobStore()
    executor = Executor(store, work_seconds=work_seconds)
    scheduler = Scheduler(store, executor, tick_seconds=tick_seconds)
    app = create_app(JobService(store, executor, scheduler))

    click.echo(f"🚀 Serving on http://{host}:{port} (tick={tick_seconds}s, work={work_seconds}s)")
    uvicorn.run(app, host=host, port=port)
    click.echo("✅ Scheduler stopped cleanly.")


# ---------------- Submit ----------------
@cli.command()
@click.option("--description", required=True, help="What the job is about")
@click.option("--at", "at", required=True, help="ISO timestamp (UTC) or +seconds delay")
@click.pass_context
def submit(ctx, description, at):
    """Schedule a new job"""
    try:
        execute_at = _parse_when(at)
    except ValueError as e:
        click.echo(f"❌ Invalid --at value: {at} ({e})")
        ctx.exit(1)
    job = _call(ctx, "POST", "/jobs", json={"description": description, "executeAt": execute_at.isoformat()})
    click.echo(f"✅ Job {job['id']} scheduled for {job['executeAt']}.")


# ---------------- List Jobs ----------------
@cli.command(name="list")
@click.option("--status", default=None, type=click.Choice(STATUSES), help="Filter by status")
@click.pass_context
def list_jobs(ctx, status):
    """List live jobs"""
    jobs = _call(ctx, "GET", "/jobs")
    if status:
        jobs = [job for job in jobs if job["status"] == status]
    if not jobs:
        click.echo("No jobs found.")
        return
    for job in sorted(jobs, key=lambda j: j["executeAt"]):
        click.echo(_format(job))


@cli.command()
@click.argument("job_id")
@click.pass_context
def show(ctx, job_id):
    """Show details of a single job"""
    job = _call(ctx, "GET", f"/jobs/{job_id}")
    click.echo(f"🔎 Job {job['id']}")
    click.echo(f"  Description: {job['description']}")
    click.echo(f"  Status: {job['status']}")
    click.echo(f"  Execute at: {job['executeAt']}")
    click.echo(f"  Executed at: {job.get('executedAt') or '-'}")


@cli.command()
@click.argument("job_id")
@click.pass_context
def cancel(ctx, job_id):
    """Cancel a scheduled job"""
    job = _call(ctx, "DELETE", f"/jobs/{job_id}")
    click.echo(f"🛑 Job {job['id']} {job['status']}.")


@cli.command()
@click.argument("job_id")
@click.pass_context
def run(ctx, job_id):
    """Execute a job now and wait for it to finish"""
    job = _call(ctx, "POST", f"/jobs/{job_id}/run")
    click.echo(f"✅ Job {job['id']} {job['status']} (started {job.get('executedAt') or '-'}).")


# ---------------- Entrypoint ----------------
if __name__ == "__main__":
    cli()
