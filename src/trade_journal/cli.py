"""CLI entry point for the trade journal."""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any

import click

from .core.clock import FixedClock, IClock, WallClock
from .core.config import Settings, load_settings
from .core.errors import ConfigError, JournalError
from .formatting import format_currency, format_date, format_percentage, format_short_date
from .journal.dashboard import DashboardService, DashboardSummary
from .observability.logger import new_run_id, setup_logging
from .store.file_source import FileTradeSource

logger = logging.getLogger(__name__)


class _Context:
    def __init__(self, settings: Settings, clock: IClock, as_json: bool) -> None:
        self.settings = settings
        self.clock = clock
        self.as_json = as_json

    def summary(self, path: str | None) -> DashboardSummary:
        trades_file = path or self.settings.source.path
        if not trades_file:
            raise click.UsageError(
                "No trades file given (argument or source.path in config)"
            )
        try:
            service = DashboardService(
                FileTradeSource(trades_file), settings=self.settings, clock=self.clock
            )
            try:
                return service.summary()
            finally:
                service.close()
        except JournalError as exc:
            raise click.ClickException(str(exc)) from exc

    def money(self, value: float) -> str:
        return format_currency(value, self.settings.display.currency_symbol)

    def pct(self, value: float) -> str:
        return format_percentage(value, self.settings.display.percent_decimals)

    def when(self, timestamp: Any) -> str:
        return format_date(timestamp, self.settings.display.date_format)


def _emit_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


@click.group()
@click.option("--config", default=None, help="Config file path (TOML)")
@click.option("--as-of", "as_of", default=None, help="Report date (YYYY-MM-DD), default today")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of text")
@click.pass_context
def main(ctx: click.Context, config: str | None, as_of: str | None, as_json: bool) -> None:
    """Trading journal analytics."""
    try:
        settings = load_settings(config)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    setup_logging(settings.observability.log_level, settings.observability.log_format)
    new_run_id()

    clock: IClock = WallClock()
    if as_of:
        try:
            clock = FixedClock.on_date(date.fromisoformat(as_of))
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--as-of") from exc

    ctx.obj = _Context(settings, clock, as_json)


@main.command()
@click.argument("trades_file", required=False)
@click.pass_obj
def summary(obj: _Context, trades_file: str | None) -> None:
    """Headline performance numbers."""
    s = obj.summary(trades_file)
    if obj.as_json:
        data = s.to_dict()
        for key in ("daily", "equity_curve", "time_based"):
            data.pop(key)
        _emit_json(data)
        return

    click.echo(f"Trades:          {s.total_trades} ({s.open_trades} open, {s.closed_trades} closed)")
    click.echo(f"Total PnL:       {obj.money(s.total_pnl)}")
    click.echo(f"Win rate:        {obj.pct(s.win_rate)}")
    click.echo(f"Avg win / loss:  {obj.money(s.average_profit)} / {obj.money(s.average_loss)}")
    click.echo(f"Profit factor:   {s.profit_factor:.2f}")
    click.echo(f"Risk/reward:     {s.risk_reward_ratio:.2f}")
    click.echo(f"Max drawdown:    {obj.money(s.max_drawdown)}")
    click.echo(f"Fees / funding:  {obj.money(s.total_fees)} / {obj.money(s.total_funding)}")
    for label, trade in (("Best trade:", s.best_trade), ("Worst trade:", s.worst_trade)):
        if trade is not None:
            click.echo(
                f"{label:<17}{trade.symbol} {obj.money(trade.pnl)} "
                f"({obj.when(trade.exit_timestamp)})"
            )
    if s.current_streak is not None:
        click.echo(f"Streak:          {s.current_streak.label}")


@main.command()
@click.argument("trades_file", required=False)
@click.pass_obj
def strategies(obj: _Context, trades_file: str | None) -> None:
    """Per-strategy breakdown."""
    s = obj.summary(trades_file)
    if obj.as_json:
        _emit_json({k: v.to_dict() for k, v in s.strategies.items()})
        return
    if not s.strategies:
        click.echo("No closed trades.")
        return
    click.echo(f"{'Strategy':<24} {'Trades':>6} {'Win%':>8} {'Total PnL':>12} {'Avg PnL':>10}")
    for name, st in s.strategies.items():
        click.echo(
            f"{name:<24} {st.total_trades:>6} {obj.pct(st.win_rate):>8} "
            f"{obj.money(st.total_pnl):>12} {obj.money(st.average_pnl):>10}"
        )


@main.command()
@click.argument("trades_file", required=False)
@click.option("--days", default=None, type=int, help="Days to show (default from config)")
@click.pass_obj
def heatmap(obj: _Context, trades_file: str | None, days: int | None) -> None:
    """Daily PnL for the trailing window (days with trades only)."""
    if days is not None:
        obj.settings.analytics.heatmap_days = max(0, days)
    s = obj.summary(trades_file)
    traded = [d for d in s.daily if d.trade_count]
    if obj.as_json:
        _emit_json([d.to_dict() for d in s.daily])
        return
    if not traded:
        click.echo("No closed trades in window.")
        return
    for day in traded:
        click.echo(
            f"{format_short_date(day.date):<14} {obj.money(day.pnl):>12} "
            f"{day.trade_count:>4} trades  {day.color_category.value:<7} {'#' * day.intensity}"
        )


@main.command()
@click.argument("trades_file", required=False)
@click.pass_obj
def sessions(obj: _Context, trades_file: str | None) -> None:
    """Performance by weekday and hour of exit."""
    s = obj.summary(trades_file)
    if obj.as_json:
        _emit_json(s.time_based.to_dict())
        return
    for day in s.time_based.by_day:
        click.echo(f"{day.name:<10} {obj.money(day.pnl):>12} {day.total:>4} {obj.pct(day.win_rate):>8}")
    click.echo("")
    for hour in s.time_based.by_hour:
        if hour.total:
            click.echo(f"{hour.label:<10} {obj.money(hour.pnl):>12} {hour.total:>4} {obj.pct(hour.win_rate):>8}")


@main.command()
@click.argument("trades_file", required=False)
@click.pass_obj
def streaks(obj: _Context, trades_file: str | None) -> None:
    """Current and longest win/loss streaks."""
    s = obj.summary(trades_file)
    if obj.as_json:
        _emit_json(s.streaks.to_dict())
        return
    click.echo(s.current_streak.label if s.current_streak else "No trades yet")
    click.echo(f"Longest win streak:  {s.streaks.longest_win_streak}")
    click.echo(f"Longest loss streak: {s.streaks.longest_loss_streak}")


if __name__ == "__main__":
    main()
