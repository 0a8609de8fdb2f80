import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

# psycopg2 ships a C extension; rebuild it so the .so matches each interpreter.
_C_EXT_PACKAGES = ["psycopg2"]


def _install(session: nox.Session) -> None:
    """Install the storefront with its test extra into the nox virtualenv."""
    session.run("poetry", "install", "--all-extras", external=True)
    session.run(
        "pip",
        "install",
        "--force-reinstall",
        "--no-cache-dir",
        *_C_EXT_PACKAGES,
    )


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run the full suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Aggregate behaviour only; nothing goes through a handler."""
    _install(session)
    session.run("pytest", "-m", "domain", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_api(session: nox.Session) -> None:
    """FastAPI endpoints against the in-memory domain."""
    _install(session)
    session.run("pytest", "tests/api/", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_postgres(session: nox.Session) -> None:
    """Full suite against PostgreSQL (needs DATABASE_URL)."""
    _install(session)
    session.run("python", "src/manage.py", "setup-db", env={"PROTEAN_ENV": "production"})
    session.run("pytest", "--env", "production", *session.posargs)
