# type: ignore
from invoke import task


@task
def venv(ctx):
    """Create the development environment with test and dev extras."""
    print("Initializing development environment with uv...")
    ctx.run("uv sync --extra test --extra dev")
    print("Development environment initialization complete!")


@task
def clean(ctx):
    """
    Remove untracked files and directories after confirmation.
    This cannot be undone.
    """

    ctx.run("git clean -nfdx")

    response = (
        input("Are you sure you want to remove all untracked files? (y/n) [n]: ")
        .strip()
        .lower()
    )
    if response == "y":
        ctx.run("git clean -fdx")


@task
def lint(ctx):
    """
    Run ruff and mypy over the package and the tests.
    """
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src tests", pty=True)
    ctx.run("mypy src", pty=True)


@task
def test(ctx):
    """
    Run tests with coverage information.
    """
    ctx.run("pytest --cov=acbridge --cov-report=term-missing", pty=True)


@task
def serve(ctx, loglevel="DEBUG"):
    """Run the bridge in the foreground with verbose logging."""
    ctx.run(f"LOGLEVEL={loglevel} acbridge run", pty=True)


@task
def build_package(ctx):
    """
    Build package using uv.
    """

    ctx.run("rm -rf dist")
    ctx.run("uv build")
