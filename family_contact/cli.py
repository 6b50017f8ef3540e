"""CLI tools for family contact administration."""

import click

from family_contact.db.models import Organization
from family_contact.db.session import SessionLocal
from family_contact.services import child_service, contact_schedule_service, risk_assessment_service


@click.group()
def cli():
    """Family contact CLI tools."""
    pass


def _find_org(db, slug: str) -> Organization | None:
    return db.query(Organization).filter(Organization.slug == slug.lower().strip()).first()


@cli.command()
@click.option("--name", required=True, help="Organization name")
@click.option("--slug", required=True, help="URL-friendly slug (lowercase, no spaces)")
def create_org(name: str, slug: str):
    """
    Create an organization (tenant).

    Example:
        python -m family_contact.cli create-org --name "Oak House" --slug "oak-house"
    """
    db = SessionLocal()
    try:
        slug = slug.lower().strip()
        if not slug.replace("-", "").replace("_", "").isalnum():
            click.echo("❌ Slug must be alphanumeric (with optional hyphens/underscores)")
            raise SystemExit(1)

        if _find_org(db, slug):
            click.echo(f"❌ Organization with slug '{slug}' already exists")
            raise SystemExit(1)

        org = Organization(name=name, slug=slug)
        db.add(org)
        db.commit()

        click.echo(f"✓ Created organization: {name}")
        click.echo(f"  ID: {org.id}")
        click.echo(f"  Slug: {slug}")
    finally:
        db.close()


@cli.command()
@click.option("--org-slug", required=True, help="Organization slug")
@click.option("--first-name", required=True, help="Child first name")
@click.option("--last-name", required=True, help="Child last name")
def add_child(org_slug: str, first_name: str, last_name: str):
    """
    Add a child record to an organization.

    Example:
        python -m family_contact.cli add-child --org-slug oak-house --first-name Sam --last-name Lee
    """
    db = SessionLocal()
    try:
        org = _find_org(db, org_slug)
        if not org:
            click.echo(f"❌ Organization not found: {org_slug}")
            raise SystemExit(1)

        child = child_service.create_child(db, org.id, first_name, last_name)
        db.commit()

        click.echo(f"✓ Created child {child.child_number}")
        click.echo(f"  ID: {child.id}")
    finally:
        db.close()


@cli.command()
@click.option("--org-slug", required=True, help="Organization slug")
def review_report(org_slug: str):
    """
    Print schedules due for review and overdue risk assessments.

    Example:
        python -m family_contact.cli review-report --org-slug oak-house
    """
    db = SessionLocal()
    try:
        org = _find_org(db, org_slug)
        if not org:
            click.echo(f"❌ Organization not found: {org_slug}")
            raise SystemExit(1)

        schedules = contact_schedule_service.list_schedules_due_for_review(db, org.id)
        assessments = risk_assessment_service.list_overdue_assessments(db, org.id)

        click.echo(f"Schedules due for review: {len(schedules)}")
        for schedule in schedules:
            click.echo(
                f"  {schedule.contact_schedule_number}  "
                f"review due {schedule.next_review_date.isoformat()}"
            )

        click.echo(f"Risk assessments overdue for review: {len(assessments)}")
        for assessment in assessments:
            click.echo(
                f"  {assessment.assessment_number}  "
                f"{assessment.overall_risk_level}  "
                f"review due {assessment.next_review_date.isoformat()}"
            )
    finally:
        db.close()


if __name__ == "__main__":
    cli()
