"""CLI helpers for date range resolution."""

from datetime import date

import click

from venueledger.domain.seasons import ALL_SEASONS
from venueledger.utils.date_parser import parse_date, season_date_range


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    season: str | None,
) -> tuple[date | None, date | None]:
    """Resolve a CLI date range from a season label or explicit dates."""
    if season and (start_date or end_date):
        click.echo(
            "Error: --season cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if season:
        if season == ALL_SEASONS:
            return None, None
        try:
            return season_date_range(season)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

    start = None
    end = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    return start, end
