"""Flask CLI commands for HabitGarden."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from .core import format_date


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("habitgarden-remind")
    @click.option(
        "--at",
        "at_time",
        default=None,
        help="Pretend the sweep runs at this ISO timestamp (defaults to now; no offset means reminder-zone time).",
    )
    def habitgarden_remind(at_time: str | None) -> None:
        """Run one reminder sweep immediately."""

        from .extensions import get_context, get_scheduler

        if at_time:
            now = datetime.fromisoformat(at_time)
            if now.tzinfo is None:
                # offset-less timestamps are read on the reminder clock
                now = now.replace(tzinfo=get_context(app).config.reminder_zone())
        else:
            now = datetime.now(timezone.utc)
        report = get_scheduler(app).run_reminders(now)
        if report is None:
            raise click.ClickException("Reminder sweep failed; see the log for details.")
        click.echo(
            f"{report.current_time} {format_date(report.today)}: "
            f"{report.accounts_scanned} account(s), {report.habits_matched} matched, "
            f"{report.notifications_sent} sent, {report.failures} failed"
        )

    @app.cli.command("habitgarden-sync")
    def habitgarden_sync() -> None:
        """Recompute cached completion and streak fields for every habit."""

        from .extensions import get_context
        from .services.auth import list_user_ids
        from .services.store import sync_remote_habits

        ctx = get_context(app)
        today = ctx.config.local_today()
        total = 0
        for user_id in list_user_ids(ctx.session_factory):
            total += len(sync_remote_habits(ctx.habit_repo, user_id=user_id, today=today))
        click.echo(f"Synced {total} habit(s) as of {format_date(today)}.")
