# type: ignore
from invoke import task


@task
def venv(ctx):
    """Create .venv with runtime, test and dev dependencies."""
    ctx.run("uv sync --extra test --extra dev")


@task
def lint(ctx):
    """
    Static analysis: ruff for style, mypy for types.
    """
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src tests", pty=True)
    ctx.run("mypy src", pty=True)


@task
def test(ctx):
    """
    Run tests with coverage information.
    """
    ctx.run("pytest --cov=src --cov-report=term-missing", pty=True)


@task
def run(ctx, mode="table", interval=60):
    """Start the dashboard with debug logging to ./smartdmt.log."""
    ctx.run(
        f"smartdmt --log-level DEBUG --log-file smartdmt.log"
        f" --mode {mode} --interval {interval}",
        pty=True,
    )


@task
def build_package(ctx):
    """
    Build package using uv.
    """
    ctx.run("rm -rf dist")
    ctx.run("uv build")
