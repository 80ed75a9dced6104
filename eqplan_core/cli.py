from __future__ import annotations

import dataclasses
import datetime as dt
import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from eqplan_core.domain.models import EquityRules, PlanInputs, PlanResult
from eqplan_core.io import config as config_io
from eqplan_core.io import store as store_io
from eqplan_core.services import calendar, evaluator, pipeline, projector
from eqplan_core.services.amounts import format_chf, parse_amount

app = typer.Typer(help="Equity planner for a Swiss home purchase (20% total / 10% hard equity).")

LOGGER = logging.getLogger(__name__)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _save_json(path: Path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def _parse_now(raw: Optional[str]) -> dt.date:
    if not raw:
        return dt.date.today()
    try:
        return dt.date.fromisoformat(raw)
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {raw!r}", param_hint="--now")


def _load_rules(path: Optional[Path]) -> EquityRules:
    if path is None:
        return EquityRules()
    try:
        return config_io.load_rules(path)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--rules")


def _resolve_inputs(inputs: Optional[Path], **overrides: Optional[str]) -> PlanInputs:
    base = PlanInputs()
    if inputs is not None:
        try:
            base = config_io.load_plan_inputs(inputs)
        except (FileNotFoundError, ValueError) as exc:
            raise typer.BadParameter(str(exc), param_hint="--inputs")
    changes = {k: v for k, v in overrides.items() if v is not None}
    return dataclasses.replace(base, **changes)


def _run_plan(
    inputs: Optional[Path],
    rules: Optional[Path],
    now: Optional[str],
    with_timeline: bool = True,
    **overrides: Optional[str],
) -> PlanResult:
    plan_inputs = _resolve_inputs(inputs, **overrides)
    return pipeline.build_plan(
        plan_inputs,
        _parse_now(now),
        rules=_load_rules(rules),
        with_timeline=with_timeline,
        use_default_target=True,
    )


def _yes_no(flag: bool) -> str:
    return "[green]met[/green]" if flag else "[red]open[/red]"


def _render_report(console: Console, result: PlanResult) -> None:
    state = result.state

    console.print("\n[bold cyan]== Equity Plan ==[/bold cyan]")
    console.print(f"Purchase price: [bold]{format_chf(state.price)}[/bold]")
    console.print(f"Target month: {result.target_month or '-'} | Months remaining: {state.months}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("")
    table.add_column("Total (20%)", justify="right")
    table.add_column("Hard (10%)", justify="right")
    table.add_row("Required", format_chf(state.total_required), format_chf(state.hard_required))
    table.add_row("Today", format_chf(state.total_now), format_chf(state.hard_now))
    table.add_row("At target", format_chf(state.total_projected), format_chf(state.hard_projected))
    table.add_row("Shortfall", format_chf(state.total_shortfall), format_chf(state.hard_shortfall))
    table.add_row("Rule", _yes_no(state.total_rule_met), _yes_no(state.hard_rule_met))
    table.add_row("Progress", f"{state.total_progress * 100:.0f}%", f"{state.hard_progress * 100:.0f}%")
    console.print(table)

    console.print(f"Savings gap: [bold]{format_chf(state.savings_gap)}[/bold]")
    console.print(f"Binding constraint: {evaluator.binding_constraint_label(state)}")

    if not state.price_valid:
        console.print("[yellow]Enter a purchase price to compute the monthly savings rate.[/yellow]")
    elif state.invalid_time_window:
        console.print("[yellow]Pick a target month in the future to compute the monthly savings rate.[/yellow]")
    else:
        console.print(f"Additional monthly savings: [bold]{format_chf(state.required_monthly_rate)}[/bold]")

    if state.hard_equity_warning:
        console.print(
            "[bold red]Warning:[/bold red] total equity is sufficient, but too much of it "
            "comes from the pension fund. At least half of the equity must be hard equity."
        )

    comp = evaluator.equity_composition(state)
    console.print(
        f"Composition of target: hard {format_chf(comp.hard, decimals=0)}, "
        f"pension fund {format_chf(comp.soft, decimals=0)}, gap {format_chf(comp.gap, decimals=0)}"
    )


@app.command()
def evaluate(
    inputs: Optional[Path] = typer.Option(None, help="JSON file with plan inputs"),
    rules: Optional[Path] = typer.Option(None, help="JSON file with total_ratio/hard_ratio"),
    now: Optional[str] = typer.Option(None, help="Reference date YYYY-MM-DD (default: today)"),
    price: Optional[str] = typer.Option(None, help="Purchase price, e.g. 800'000"),
    target_month: Optional[str] = typer.Option(None, help="Purchase month YYYY-MM"),
    cash: Optional[str] = typer.Option(None, help="Cash savings"),
    pillar_3a: Optional[str] = typer.Option(None, help="Pillar 3a balance"),
    pension_fund: Optional[str] = typer.Option(None, help="Pension fund balance"),
    other: Optional[str] = typer.Option(None, help="Other liquid assets"),
    pillar_3a_monthly: Optional[str] = typer.Option(None, help="Monthly pillar 3a contribution"),
    pension_fund_monthly: Optional[str] = typer.Option(None, help="Monthly pension fund contribution"),
    timeline: bool = typer.Option(False, help="Include the month-by-month growth timeline"),
    out: Optional[Path] = typer.Option(None, help="Output path for result JSON"),
):
    """Evaluate the equity rules and print the result as JSON."""
    result = _run_plan(
        inputs,
        rules,
        now,
        with_timeline=timeline,
        price=price,
        target_month=target_month,
        cash=cash,
        pillar_3a=pillar_3a,
        pension_fund=pension_fund,
        other=other,
        pillar_3a_monthly=pillar_3a_monthly,
        pension_fund_monthly=pension_fund_monthly,
    )
    payload = pipeline.plan_to_dict(result)
    if out:
        _save_json(out, payload)
        typer.echo(f"Plan written to {out}")
    else:
        typer.echo(json.dumps(payload, indent=2))


@app.command()
def report(
    inputs: Optional[Path] = typer.Option(None, help="JSON file with plan inputs"),
    rules: Optional[Path] = typer.Option(None, help="JSON file with total_ratio/hard_ratio"),
    now: Optional[str] = typer.Option(None, help="Reference date YYYY-MM-DD (default: today)"),
    price: Optional[str] = typer.Option(None, help="Purchase price, e.g. 800'000"),
    target_month: Optional[str] = typer.Option(None, help="Purchase month YYYY-MM"),
    cash: Optional[str] = typer.Option(None, help="Cash savings"),
    pillar_3a: Optional[str] = typer.Option(None, help="Pillar 3a balance"),
    pension_fund: Optional[str] = typer.Option(None, help="Pension fund balance"),
    other: Optional[str] = typer.Option(None, help="Other liquid assets"),
    pillar_3a_monthly: Optional[str] = typer.Option(None, help="Monthly pillar 3a contribution"),
    pension_fund_monthly: Optional[str] = typer.Option(None, help="Monthly pension fund contribution"),
):
    """Render a readable summary of the plan."""
    result = _run_plan(
        inputs,
        rules,
        now,
        with_timeline=False,
        price=price,
        target_month=target_month,
        cash=cash,
        pillar_3a=pillar_3a,
        pension_fund=pension_fund,
        other=other,
        pillar_3a_monthly=pillar_3a_monthly,
        pension_fund_monthly=pension_fund_monthly,
    )
    _render_report(Console(), result)


@app.command()
def timeline(
    inputs: Optional[Path] = typer.Option(None, help="JSON file with plan inputs"),
    now: Optional[str] = typer.Option(None, help="Reference date YYYY-MM-DD (default: today)"),
    target_month: Optional[str] = typer.Option(None, help="Purchase month YYYY-MM"),
    out: Optional[Path] = typer.Option(None, help="Output path for timeline CSV"),
):
    """Month-by-month projected balances up to the target month."""
    result = _run_plan(inputs, None, now, with_timeline=True, target_month=target_month)
    frame = projector.timeline_frame(result.timeline)
    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(out, index=False)
        typer.echo(f"Timeline written to {out}")
    else:
        typer.echo(frame.to_csv(index=False), nl=False)


@app.command()
def parse(values: List[str] = typer.Argument(..., help="Amounts as typed, e.g. \"1'000.50\"")):
    """Show how amounts are read."""
    for raw in values:
        typer.echo(f"{raw!r} -> {parse_amount(raw):.2f}")


@app.command()
def interactive(
    state: Optional[Path] = typer.Option(None, help="State file (default ~/.eqplan_state.json)"),
    now: Optional[str] = typer.Option(None, help="Reference date YYYY-MM-DD (default: today)"),
):
    """
    Step through the inputs one by one. Answers are remembered for the next run.
    """
    console = Console()
    console.print("[bold cyan]Equity Planner[/bold cyan]\n")
    today = _parse_now(now)

    store = store_io.JsonFileStore(state)
    previous = store_io.load_inputs(store)

    console.print("[cyan]The goal: purchase price and date.[/cyan]")
    price = typer.prompt("Purchase price (CHF)", default=previous.price)
    target_month = typer.prompt(
        "Purchase month (YYYY-MM)",
        default=previous.target_month or calendar.default_target_month(today),
    )

    console.print("[cyan]Your assets today.[/cyan]")
    cash = typer.prompt("Cash savings", default=previous.cash)
    pillar_3a = typer.prompt("Pillar 3a", default=previous.pillar_3a)
    pension_fund = typer.prompt("Pension fund", default=previous.pension_fund)
    other = typer.prompt("Other liquid assets", default=previous.other)

    console.print("[cyan]Planned monthly contributions.[/cyan]")
    pillar_3a_monthly = typer.prompt("Pillar 3a per month", default=previous.pillar_3a_monthly)
    pension_fund_monthly = typer.prompt("Pension fund buy-ins per month", default=previous.pension_fund_monthly)

    plan_inputs = PlanInputs(
        price=price,
        target_month=target_month,
        cash=cash,
        pillar_3a=pillar_3a,
        pension_fund=pension_fund,
        other=other,
        pillar_3a_monthly=pillar_3a_monthly,
        pension_fund_monthly=pension_fund_monthly,
    )
    if calendar.parse_target_month(target_month) is None:
        console.print("[yellow]Could not read the purchase month; assuming no time remains.[/yellow]")

    result = pipeline.build_plan(plan_inputs, today, with_timeline=False)
    _render_report(console, result)

    store_io.save_inputs(store, plan_inputs)
    LOGGER.debug("Saved inputs to %s", store.path)
    console.print("\n[bold cyan]Done.[/bold cyan]\n")


if __name__ == "__main__":
    app()
