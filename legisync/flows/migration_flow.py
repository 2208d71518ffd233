"""
Prefect flow to run Alembic schema migrations.

Lets deployments migrate from inside the worker container, using the same
database settings as the sync flow.

Responsibility: Apply bills/sync_log schema migrations
"""

from typing import Any, Dict, Optional

from alembic import command
from alembic.config import Config
from prefect import flow, task, get_run_logger

from ..config import DatabaseConfig


def make_alembic_config(
    config_path: str = "alembic.ini",
    database: Optional[DatabaseConfig] = None,
) -> Config:
    """Alembic Config bound to the runtime database URL."""
    config = Config(config_path)
    database = database or DatabaseConfig()
    config.set_main_option("sqlalchemy.url", database.connection_string.replace("%", "%%"))
    return config


@task(name="run_alembic_upgrade", retries=0, log_prints=True)
def run_alembic_upgrade_task(revision: str = "head", config_path: str = "alembic.ini") -> str:
    logger = get_run_logger()
    logger.info(f"Running Alembic upgrade to revision '{revision}'")

    command.upgrade(make_alembic_config(config_path), revision)

    logger.info(f"Alembic upgrade to '{revision}' completed successfully")
    return revision


@flow(
    name="alembic-upgrade",
    description="Run Alembic migrations inside the Prefect worker environment.",
    log_prints=True,
)
def alembic_upgrade_flow(revision: str = "head", config_path: str = "alembic.ini") -> Dict[str, Any]:
    """
    Example:
        prefect deployment run alembic-upgrade --param revision=head
    """
    applied = run_alembic_upgrade_task(revision=revision, config_path=config_path)
    return {"status": "success", "revision": applied}


if __name__ == "__main__":
    alembic_upgrade_flow()
