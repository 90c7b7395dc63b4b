#!/usr/bin/env python3
"""Interactive admin console for the vaccination record service."""

import inspect
import sys
from collections.abc import Callable
from pathlib import Path

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

# (field, label, required) in editor order
RECORD_FIELDS = [
    ("name", "Full name", True),
    ("address", "Address", True),
    ("birth_date", "Date of birth (YYYY-MM-DD)", True),
    ("sex", "Sex", True),
    ("nationality", "Nationality", True),
    ("national_id", "National ID", False),
    ("doctor_name", "Doctor name", True),
    ("vaccine_type", "Vaccine type", True),
    ("vaccine_date", "Vaccination date (YYYY-MM-DD)", True),
    ("valid_until", "Valid until (YYYY-MM-DD)", False),
    ("administration_location", "Administration location", True),
    ("vaccine_batch_number", "Vaccine batch number", False),
    ("disease_targeted", "Disease targeted", False),
    ("disease_date", "Disease date (YYYY-MM-DD)", False),
    ("manufacture_brand_batch", "Manufacturer, brand name and batch no.", False),
    ("next_booster_date", "Next booster date (YYYY-MM-DD)", False),
    ("official_stamp_signature", "Official stamp and signature", False),
]


def accepts_args(handler: Callable, args: list[str]) -> bool:
    """Check that a command handler can be called with these arguments."""
    try:
        inspect.signature(handler).bind(*args)
    except TypeError:
        return False
    return True


class AdminCLI:
    """Interactive console over the record service HTTP API."""

    def __init__(self, base_url: str = "http://localhost:3001"):
        """Initialize admin console."""
        self.base_url = base_url.rstrip("/")
        self.token: str | None = None
        self.console = Console()
        self.client = httpx.Client(base_url=self.base_url, timeout=30.0)

    def start(self) -> None:
        """Start the interactive session."""
        self.console.print(
            Panel.fit(
                "[bold blue]💉 Vaccination Records - Admin Console[/bold blue]\n"
                "Commands: /login, /list, /view, /add, /edit, /delete, /qr, /pdf, /help, /quit",
                border_style="blue",
            )
        )

        if not self._test_connection():
            self.console.print(f"[red]❌ Cannot connect to the service at {self.base_url}.[/red]")
            return

        self.console.print("[green]✅ Connected to vaccination record service[/green]\n")

        try:
            while True:
                parts = Prompt.ask("\n[bold cyan]admin[/bold cyan]").split()
                if not parts:
                    continue
                command, *args = parts

                if command in ["/quit", "/exit", "quit", "exit"]:
                    break
                try:
                    self.run_command(command, args)
                except httpx.HTTPError as e:
                    self.console.print(f"[red]❌ Connection error: {e}[/red]")

        except KeyboardInterrupt:
            pass
        finally:
            self.console.print("\n[yellow]👋 Goodbye![/yellow]")
            self.client.close()

    def run_command(self, command: str, args: list[str]) -> bool:
        """Dispatch one console command.

        Returns:
            True if a handler ran
        """
        handler = self._commands().get(command)
        if handler is None:
            self.console.print("[yellow]Unknown command, try /help[/yellow]")
            return False
        if not accepts_args(handler, args):
            self.console.print("[yellow]Wrong arguments, try /help[/yellow]")
            return False

        handler(*args)
        return True

    def _commands(self) -> dict:
        return {
            "/help": self._show_help,
            "/login": self.login,
            "/list": self.list_records,
            "/view": self.view_record,
            "/add": self.add_record,
            "/edit": self.edit_record,
            "/delete": self.delete_record,
            "/qr": self.download_qr,
            "/pdf": self.download_pdf,
        }

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _test_connection(self) -> bool:
        """Test connection to the service."""
        try:
            return self.client.get("/").status_code == 200
        except httpx.HTTPError:
            return False

    def _report_error(self, response: httpx.Response) -> None:
        if response.status_code in (401, 403):
            self.token = None
            self.console.print("[red]❌ Not logged in or session expired, use /login[/red]")
            return
        self.console.print(f"[red]❌ API Error: {response.status_code} - {response.text}[/red]")

    def login(self) -> None:
        """Log in and keep the bearer token for later commands."""
        username = Prompt.ask("Username")
        password = Prompt.ask("Password", password=True)
        response = self.client.post("/login", json={"username": username, "password": password})
        if response.status_code != 200:
            self.console.print("[red]❌ Invalid credentials[/red]")
            return

        data = response.json()
        self.token = data["token"]
        self.console.print(f"[green]✅ Logged in as {data['admin']['username']}[/green]")

    def list_records(self, page: str = "1", limit: str = "10") -> None:
        """Show one page of records."""
        response = self.client.get("/patients", params={"page": page, "limit": limit}, headers=self._headers())
        if response.status_code != 200:
            self._report_error(response)
            return

        data = response.json()
        pagination = data["pagination"]
        table = Table(title=f"Patients - page {pagination['currentPage']} of {max(pagination['totalPages'], 1)}")
        for column in ("ID", "Slug", "Name", "Vaccine", "Date", "Location"):
            table.add_column(column)
        for patient in data["patients"]:
            table.add_row(
                str(patient["id"]),
                patient["slug"],
                patient["name"],
                patient["vaccine_type"],
                patient["vaccine_date"],
                patient["administration_location"],
            )
        self.console.print(table)
        self.console.print(f"[dim]{pagination['totalRecords']} records total[/dim]")

    def view_record(self, slug: str) -> None:
        """Show every field of one record, as the public sees it."""
        response = self.client.get(f"/patients/{slug}")
        if response.status_code != 200:
            self._report_error(response)
            return

        record = response.json()
        lines = [
            f"[bold]{label.split(' (')[0]}:[/bold] {record.get(field) or '-'}" for field, label, _ in RECORD_FIELDS
        ]
        self.console.print(Panel("\n".join(lines), title=f"[green]{record['slug']}[/green]", border_style="green"))

    def add_record(self) -> None:
        """Create a record from prompted fields."""
        fields = self._prompt_fields({})
        response = self.client.post("/patients", json=fields, headers=self._headers())
        if response.status_code != 201:
            self._report_error(response)
            return
        self.console.print(f"[green]✅ Created record {response.json()['slug']}[/green]")

    def edit_record(self, slug: str) -> None:
        """Edit a record; pressing enter keeps the current value."""
        current = self.client.get(f"/patients/{slug}")
        if current.status_code != 200:
            self._report_error(current)
            return

        fields = self._prompt_fields(current.json())
        response = self.client.put(f"/patients/{slug}", json=fields, headers=self._headers())
        if response.status_code != 200:
            self._report_error(response)
            return
        self.console.print(f"[green]✅ Updated record {slug}[/green]")

    def delete_record(self, record_id: str) -> None:
        """Delete a record by id after confirmation."""
        if not Confirm.ask(f"Delete patient record {record_id}?"):
            return
        response = self.client.delete(f"/patients/{record_id}", headers=self._headers())
        if response.status_code != 200:
            self._report_error(response)
            return
        self.console.print(f"[green]✅ Deleted record {record_id}[/green]")

    def download_qr(self, slug: str) -> None:
        """Save the QR code of a record's public view."""
        self._download(f"/patients/{slug}/qr", Path(f"qr-code-{slug}.png"))

    def download_pdf(self, slug: str) -> None:
        """Save the PDF certificate of a record."""
        self._download(f"/patients/{slug}/certificate.pdf", Path(f"Vaccination_Record_{slug}.pdf"))

    def _download(self, path: str, target: Path) -> None:
        response = self.client.get(path)
        if response.status_code != 200:
            self._report_error(response)
            return
        target.write_bytes(response.content)
        self.console.print(f"[green]✅ Saved {target}[/green]")

    def _prompt_fields(self, current: dict) -> dict[str, str | None]:
        fields: dict[str, str | None] = {}
        for field, label, required in RECORD_FIELDS:
            default = current.get(field) or ""
            while True:
                value = Prompt.ask(label + ("" if required else " [dim](optional)[/dim]"), default=default).strip()
                if value or not required:
                    break
                self.console.print(f"[red]{label} is required[/red]")
            fields[field] = value or None
        return fields

    def _show_help(self) -> None:
        """Show help information."""
        help_text = """
[bold]Available Commands:[/bold]
• /login - Log in as admin
• /list [page] [limit] - List records, newest first
• /view <slug> - Show a record
• /add - Create a record
• /edit <slug> - Edit a record
• /delete <id> - Delete a record by id
• /qr <slug> - Download the QR code of the public view
• /pdf <slug> - Download the PDF certificate
• /quit or /exit - Exit the console
        """

        self.console.print(Panel(help_text.strip(), title="[cyan]❓ Help[/cyan]", border_style="cyan"))


def main():
    """Main entry point for the admin console."""
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:3001"

    cli = AdminCLI(base_url)
    cli.start()


if __name__ == "__main__":
    main()
