from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import typer

from .config import settings
from .db.session import SessionLocal
from .models import Building, Tenant
from .services.building_report import build_gap_report
from .services.document_store import DocumentStore
from .services.gaps import required_types_from_keys

app = typer.Typer(help="Property documents administrative CLI")


@app.command()
def create_tenant(name: str = typer.Argument(..., help="Tenant (organization) name")) -> None:
    """Create a tenant organization."""
    db = SessionLocal()
    try:
        tenant = db.query(Tenant).filter(Tenant.name == name).one_or_none()
        if tenant is None:
            tenant = Tenant(name=name)
            db.add(tenant)
            db.commit()
        typer.echo(f"Tenant {tenant.name} ({tenant.id})")
    finally:
        db.close()


@app.command()
def create_building(
    tenant_id: int = typer.Argument(..., help="Owning tenant id"),
    name: str = typer.Argument(..., help="Building name"),
    address: str = typer.Argument(..., help="Street address"),
) -> None:
    """Register a building under a tenant."""
    db = SessionLocal()
    try:
        if db.get(Tenant, tenant_id) is None:
            typer.echo(f"Tenant {tenant_id} not found", err=True)
            raise typer.Exit(code=1)
        building = Building(tenant_id=tenant_id, name=name, address=address)
        db.add(building)
        db.commit()
        typer.echo(f"Created building {building.name} ({building.id}) for tenant {tenant_id}")
    finally:
        db.close()


@app.command()
def gap_report(
    building_id: int = typer.Argument(..., help="Building id"),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Reference year (defaults to the current year)"),
) -> None:
    """Print the documentation gaps of a building."""
    reference_year = year or datetime.now(timezone.utc).year
    db = SessionLocal()
    try:
        building = db.get(Building, building_id)
        if building is None:
            typer.echo(f"Building {building_id} not found", err=True)
            raise typer.Exit(code=1)

        report = build_gap_report(
            DocumentStore(db),
            building.id,
            required_types_from_keys(settings.required_document_types),
            reference_year,
            stale_after_years=settings.document_stale_after_years,
        )
        typer.echo(f"{building.name} ({reference_year})")
        if report.is_compliant:
            typer.echo("Inga luckor")
            return
        for finding in report.findings:
            typer.echo(f"[{finding.severity.value}] {finding.message}")
    finally:
        db.close()


@app.command()
def seed() -> None:
    """Load the demo tenant, buildings and documents."""
    from seed import run_seed

    run_seed()
    typer.echo("Seed applied")


if __name__ == "__main__":
    app()
