"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, ContextManager, Optional

from sqlmodel import Session

from .config import BaseConfig
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelHabitRepository
from .logging_config import setup_logging
from .services.habit_actions import HabitActionHandler


@dataclass
class AppContext:
    """Wiring shared by whatever front end drives the habits."""

    config: BaseConfig
    engine: Any
    session_factory: Callable[[], ContextManager[Session]]
    habit_repo: SQLModelHabitRepository
    habits: HabitActionHandler

    def close(self) -> None:
        self.engine.dispose()


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    configure_logging: bool = True,
) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    if configure_logging:
        setup_logging(config)

    engine, session_factory = bootstrap_database(config)
    habit_repo = SQLModelHabitRepository(session_factory)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        habit_repo=habit_repo,
        habits=HabitActionHandler(habit_repo, days_back=config.HISTORY_DAYS),
    )
