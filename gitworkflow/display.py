"""Console rendering of git-workflow results."""
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import Config, DEFAULT_CONFIG_FILENAME
from .models import (
    BranchStatus,
    BranchValidationResult,
    CommitValidationResult,
    LastCommitCheck,
    PullRequestReport,
    Verdict,
    WorkflowStatus,
)


def _bullets(console: Console, lines, style: str) -> None:
    for line in lines:
        console.print(f"[{style}]   • {escape(line)}[/{style}]")


def show_commit_validation(console: Console, result: CommitValidationResult) -> None:
    if result.valid:
        console.print("[green]✅ Commit message is valid[/green]")
    else:
        console.print("[red]❌ Commit message validation failed:[/red]")
        _bullets(console, result.errors, "red")

    if result.warnings:
        console.print("[yellow]\n⚠️  Warnings:[/yellow]")
        _bullets(console, result.warnings, "yellow")


def show_last_commit(console: Console, check: LastCommitCheck) -> None:
    console.print("[blue]📝 Last Commit Message:[/blue]")
    console.print(f"[dim]{escape(check.message.strip())}[/dim]")
    console.print("")
    show_commit_validation(console, check.validation)


def show_branch_validation(console: Console, name: str, result: BranchValidationResult) -> None:
    if result.valid:
        console.print(f"[green]✅ {escape(name)} follows the branch naming convention[/green]")
    else:
        console.print(f"[red]❌ Error:[/red] {escape(result.error)}")


def show_branch_status(console: Console, status: BranchStatus) -> None:
    console.print(f"[blue]📍 Current Branch:[/blue] [bold]{escape(status.branch)}[/bold]")

    if status.naming.valid:
        console.print("[green]✅ Branch name follows convention[/green]")
    else:
        console.print(f"[yellow]⚠️  Warning:[/yellow] {escape(status.naming.error)}")

    tracking = status.tracking
    if tracking is None:
        console.print("[dim]ℹ️  No remote tracking branch set[/dim]")
        return
    if tracking.ahead:
        console.print(f"[yellow]📤 {tracking.ahead} commit(s) ahead of {tracking.tracking}[/yellow]")
    if tracking.behind:
        console.print(f"[yellow]📥 {tracking.behind} commit(s) behind {tracking.tracking}[/yellow]")
    if tracking.up_to_date:
        console.print("[green]✅ Branch is up to date[/green]")


def show_workflow_messages(console: Console, status: WorkflowStatus) -> None:
    for lines, prefix in (
        (status.info, "[blue]ℹ️ [/blue]"),
        (status.issues, "[red]❌[/red]"),
        (status.warnings, "[yellow]⚠️ [/yellow]"),
    ):
        if not lines:
            continue
        for line in lines:
            console.print(f"{prefix} {escape(line)}")
        console.print("")


def show_workflow_status(console: Console, status: WorkflowStatus, remote_name: str = "origin") -> None:
    console.print("[bold blue]\n📊 Git Workflow Status\n[/bold blue]")
    show_workflow_messages(console, status)

    if status.ready_for_pr:
        console.print("[bold green]✅ Branch is ready for Pull Request![/bold green]")
        console.print("[dim]\nNext steps:[/dim]")
        console.print(f"[dim]  1. Push your branch: git push {escape(remote_name)} <branch>[/dim]")
        console.print("[dim]  2. Create a Pull Request on GitHub/GitLab[/dim]")
    else:
        console.print("[bold red]❌ Branch is NOT ready for Pull Request[/bold red]")
        console.print("[dim]\nPlease address the issues above before creating a PR.[/dim]")


def show_pull_request_report(console: Console, report: PullRequestReport, remote_name: str = "origin") -> None:
    branch = escape(report.branch)
    console.print("[bold blue]\n🚀 Preparing Pull Request Checklist\n[/bold blue]")
    console.print(f"[dim]Branch: {branch}\n[/dim]")

    console.print("[blue]1️⃣  Checking branch status...[/blue]")
    show_branch_status(console, report.branch_status)
    console.print("")

    console.print("[blue]2️⃣  Validating commit messages...[/blue]")
    if report.last_commit is None:
        console.print("[red]❌ Error:[/red] Could not read last commit")
    else:
        show_last_commit(console, report.last_commit)
    console.print("")

    console.print("[blue]3️⃣  Checking PR readiness...[/blue]")
    show_workflow_messages(console, report.readiness)

    console.print("[bold blue]\n📋 Summary\n[/bold blue]")
    verdict = report.verdict
    if verdict is Verdict.NOT_READY:
        console.print("[bold red]❌ Branch is NOT ready for Pull Request[/bold red]")
        console.print("[dim]\nPlease address the errors above before creating a PR.[/dim]")
        console.print("[dim]\nSuggested next steps:[/dim]")
        console.print("[dim]  1. Fix the issues listed above[/dim]")
        console.print("[dim]  2. Run: git-workflow pr (again)[/dim]")
        console.print("[dim]  3. Once ready, push and create PR[/dim]")
    elif verdict is Verdict.READY_WITH_WARNINGS:
        console.print("[bold yellow]⚠️  Branch is ready, but has warnings[/bold yellow]")
        console.print("[dim]\nConsider addressing warnings for best practices.[/dim]")
        console.print("[dim]\nYou can proceed with:[/dim]")
        console.print(f"[dim]  1. Push: git push {remote_name} {branch}[/dim]")
        console.print("[dim]  2. Create a Pull Request on GitHub/GitLab[/dim]")
    else:
        console.print("[bold green]✅ Branch is ready for Pull Request![/bold green]")
        console.print("[dim]\nNext steps:[/dim]")
        console.print(f"[dim]  1. Push: git push {remote_name} {branch}[/dim]")
        console.print("[dim]  2. Create a Pull Request on GitHub/GitLab[/dim]")
        console.print("[dim]\nTo sync before pushing:[/dim]")
        console.print("[dim]  git-workflow sync[/dim]")


def show_template(console: Console, template: str, source: Optional[Path]) -> None:
    console.print("[blue]📝 Commit Message Template\n[/blue]")
    console.print(f"[dim]{escape(template)}[/dim]")
    console.print(
        "[dim]\n💡 Tip: Use this template to ensure your commits follow Conventional Commits format.[/dim]"
    )
    if source is not None:
        console.print(f"[dim]   You can copy this template and use it with: git commit -F {escape(str(source))}[/dim]")


def show_config(console: Console, config: Config, repo_path: Path) -> None:
    config_path = repo_path / DEFAULT_CONFIG_FILENAME
    source = "config" if config_path.exists() else "default"

    console.print("\n[bold]Current Configuration Settings:[/bold]")
    if config_path.exists():
        console.print(f"[dim]Config file: {escape(config_path.as_posix())}[/dim]")
    else:
        console.print("[dim]Using default values (no config file found)[/dim]")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_column("Source")
    for name, value in config.model_dump().items():
        table.add_row(name, escape(str(value)), source)
    console.print(table)

    console.print(
        f"\nTo modify these settings, create or edit {DEFAULT_CONFIG_FILENAME} in your repository root"
    )
