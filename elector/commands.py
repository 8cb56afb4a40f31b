import click
from flask.cli import AppGroup

from elector.errors import ElectionError
from elector.extensions import db
from elector.fhe import InputContext, get_arithmetic
from elector.services.engine import get_engine

elections_cli = AppGroup("elections", help="Create, vote on and finalize encrypted elections.")


def parse_options(raw_options):
    if not raw_options:
        return []
    return [entry.strip() for entry in raw_options.split(",") if entry.strip()]


def _run(action, *args):
    try:
        return action(*args)
    except ElectionError as exc:
        raise click.ClickException(f"{exc.code}: {exc}") from exc


@elections_cli.command("create")
@click.option("--name", required=True, help="Name for the election")
@click.option("--options", "raw_options", required=True, help="Comma separated list of 2-8 options")
@click.option("--duration", type=int, required=True, help="Seconds from now until voting closes")
@click.option("--as", "caller", required=True, help="Identity creating the election")
def create_command(name, raw_options, duration, caller):
    options = parse_options(raw_options)
    if len(options) < 2:
        raise click.UsageError("Please provide at least two options")
    if duration <= 0:
        raise click.UsageError("--duration must be a positive integer")

    engine = get_engine()
    election_id = _run(engine.create_election, caller, name, options, engine.clock() + duration)
    click.echo(f"Election {election_id} created")


@elections_cli.command("list")
def list_command():
    engine = get_engine()
    click.echo(f"Total elections: {engine.election_count()}")
    for election in engine.list_elections():
        click.echo(
            f'#{election["id"]} "{election["name"]}" options={election["option_count"]} '
            f'endsAt={election["end_time"]} finalized={election["finalized"]} '
            f'status={election["status"]}'
        )


@elections_cli.command("vote")
@click.option("--id", "election_id", type=int, required=True, help="Election id to vote for")
@click.option("--choice", type=int, required=True, help="Index of the option you want to support")
@click.option("--as", "caller", required=True, help="Identity casting the vote")
def vote_command(election_id, choice, caller):
    arithmetic = get_arithmetic()
    if not hasattr(arithmetic, "encrypt_input"):
        raise click.ClickException("Configured backend cannot encrypt inputs locally")

    engine = get_engine()
    election = _run(engine.get_election, election_id)
    context = InputContext(election_id=election_id, caller=caller, bound=election["option_count"])
    encrypted = arithmetic.encrypt_input(choice, context)
    db.session.commit()

    _run(engine.vote, caller, election_id, encrypted.handle, encrypted.proof)
    click.echo("Vote stored successfully")


@elections_cli.command("finalize")
@click.option("--id", "election_id", type=int, required=True, help="Election id to finalize")
@click.option("--as", "caller", required=True, help="Identity triggering finalization")
def finalize_command(election_id, caller):
    _run(get_engine().finalize, caller, election_id)
    click.echo("Election finalized")


@elections_cli.command("decrypt-tallies")
@click.option("--id", "election_id", type=int, required=True, help="Election id you want to inspect")
def decrypt_tallies_command(election_id):
    arithmetic = get_arithmetic()
    if not hasattr(arithmetic, "public_decrypt"):
        raise click.ClickException("Configured backend has no public decryption")

    engine = get_engine()
    election = _run(engine.get_election, election_id)
    click.echo(f'Decrypting tallies for "{election["name"]}"')
    for index, label in enumerate(election["options"]):
        handle = engine.get_tally(election_id, index)
        value = _run(arithmetic.public_decrypt, handle)
        click.echo(f'Option[{index}] "{label}" -> {value}')


def register_commands(app):
    app.cli.add_command(elections_cli)
