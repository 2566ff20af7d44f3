import click
from flask.cli import with_appcontext


@click.command('init-db')
@with_appcontext
def init_db_command():
    """
    Create tables and the default settings row.

    Usage: flask --app run init-db
    """
    from judging.extension.extensions import db
    from judging.services.setting_service import get_settings

    db.create_all()
    settings = get_settings()
    click.echo(f"✅ Database ready for '{settings.event_title}' (admin: {settings.admin_email})")


@click.command('reset-finalization')
@click.option('--evaluator-id', default=None, help='Unlock a single evaluator instead of everyone')
@with_appcontext
def reset_finalization_command(evaluator_id):
    """
    Re-open finalized evaluators so they can edit scores again.

    Usage:
        flask reset-finalization
        flask reset-finalization --evaluator-id=EVAL-ABC123XYZ
    """
    from judging.services.finalization_service import reset_finalization

    count = reset_finalization(evaluator_id)
    if count > 0:
        click.echo(f"✅ Successfully reset finalization for {count} evaluator(s).")
    else:
        click.echo("✓ No finalized evaluators to reset")


@click.command('finalization-status')
@with_appcontext
def finalization_status_command():
    """
    List evaluators with their remaining projects and lock state.

    Usage: flask finalization-status
    """
    from judging.services.evaluator_service import list_evaluators
    from judging.services.finalization_service import worklist

    evaluators = list_evaluators()
    if not evaluators:
        click.echo("No evaluators found.\n")
        return

    click.echo(f"\n{'ID':<16} {'Name':<24} {'Assigned':<9} {'Left':<6} {'Finalized'}")
    click.echo("-" * 70)

    locked = 0
    for ev in evaluators:
        wl = worklist(ev.id)
        locked += 1 if wl["finalizedAll"] else 0
        click.echo(
            f"{ev.id:<16} {(ev.display_name or '')[:24]:<24} "
            f"{len(wl['assignedProjectIds']):<9} {wl['remaining']:<6} "
            f"{'yes' if wl['finalizedAll'] else 'no'}"
        )

    click.echo(f"\nTotal: {len(evaluators)} | Finalized: {locked}\n")


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(reset_finalization_command)
    app.cli.add_command(finalization_status_command)
