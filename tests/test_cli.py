"""Tests for the admin CLI."""

from datetime import date

from click.testing import CliRunner

from family_contact.cli import cli
from family_contact.db.models import Child, Organization
from family_contact.services import contact_schedule_service


def test_create_org_and_add_child(db):
    runner = CliRunner()

    result = runner.invoke(cli, ["create-org", "--name", "Oak House", "--slug", "Oak-House"])
    assert result.exit_code == 0, result.output
    assert "Created organization" in result.output

    result = runner.invoke(
        cli, ["add-child", "--org-slug", "oak-house", "--first-name", "Sam", "--last-name", "Lee"]
    )
    assert result.exit_code == 0, result.output

    org = db.query(Organization).filter(Organization.slug == "oak-house").one()
    child = db.query(Child).filter(Child.organization_id == org.id).one()
    assert child.child_number.startswith("CH-")


def test_create_org_rejects_duplicate_slug(db, test_org):
    slug = test_org.slug
    db.commit()

    result = CliRunner().invoke(cli, ["create-org", "--name", "Again", "--slug", slug])
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_add_child_unknown_org(db):
    result = CliRunner().invoke(
        cli, ["add-child", "--org-slug", "missing", "--first-name", "A", "--last-name", "B"]
    )
    assert result.exit_code == 1
    assert "Organization not found" in result.output


def test_review_report(db, test_org, schedule_data):
    schedule = contact_schedule_service.create_schedule(
        db, schedule_data(start_date=date(2020, 1, 1))
    )
    slug, number = test_org.slug, schedule.contact_schedule_number
    # CLI opens its own session on the shared in-memory connection
    db.commit()

    result = CliRunner().invoke(cli, ["review-report", "--org-slug", slug])
    assert result.exit_code == 0, result.output
    assert "Schedules due for review: 1" in result.output
    assert number in result.output
