"""Nox sessions for tanglesmith."""

import nox


PYPROJECT = nox.project.load_toml("pyproject.toml")
PYTHON_VERSIONS = ["3.10", "3.11", "3.12", "3.13"]
nox.options.default_venv_backend = "uv"


def _install_test_deps(session: nox.Session) -> None:
    deps = list(nox.project.dependency_groups(PYPROJECT, "dev"))
    session.install(".", *deps)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run pytest across all supported Python versions."""
    _install_test_deps(session)
    session.run("pytest", *session.posargs)


@nox.session(python="3.13")
def coverage(session: nox.Session) -> None:
    """Run tests with coverage reporting once."""
    _install_test_deps(session)
    session.run(
        "pytest",
        "--cov=tanglesmith",
        "--cov-report=term-missing",
        *session.posargs,
    )
