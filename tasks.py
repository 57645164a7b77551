from invoke import task
from pathlib import Path

# Get project root directory
PROJECT_ROOT = Path(__file__).parent.absolute()


def project_relative(path):
    """Convert a relative path to an absolute path relative to the project root."""
    return str(PROJECT_ROOT / path)


@task
def update(c):
    """Update all dependencies to their latest versions using poetry."""
    c.run("poetry update")


@task
def up(c):
    """Alias for update - update all dependencies to their latest versions."""
    update(c)


@task
def migrate(c):
    """Run Django database migrations."""
    manage_py = project_relative("manage.py")
    c.run(f"python {manage_py} migrate")


@task
def makemigrations(c):
    """Create new Django migrations."""
    manage_py = project_relative("manage.py")
    c.run(f"python {manage_py} makemigrations")


@task
def shell(c):
    """Start Django shell."""
    manage_py = project_relative("manage.py")
    c.run(f"python {manage_py} shell")


@task
def test(c, path=None):
    """Run the tests with the in-memory test settings. Optionally specify a test path."""
    manage_py = project_relative("manage.py")
    settings = "--settings=quizcup.test_settings"
    if path:
        c.run(f"python {manage_py} test {settings} {path}")
    else:
        c.run(f"python {manage_py} test {settings}")


@task
def seed(c, teams=8, format="single_elimination", play=False, random_seed=None):
    """Create a quiz tournament with generated teams, optionally playing it out."""
    manage_py = project_relative("manage.py")
    args = f"--teams {teams} --format {format}"
    if play:
        args += " --play"
    if random_seed is not None:
        args += f" --seed {random_seed}"
    c.run(f"python {manage_py} seed_quiz_tournament {args}")
