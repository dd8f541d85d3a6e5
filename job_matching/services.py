"""Wiring: builds every service over one Database.

Nothing in the application holds module-level service instances; the HTTP
layer and the CLI receive a Services bundle built here.
"""

from dataclasses import dataclass
from typing import Optional

from job_matching.accounts import AccountService
from job_matching.config.environment import EnvironmentConfig
from job_matching.config.models import AppConfig
from job_matching.matching import MatchingEngine
from job_matching.notifications import EmailSender, NotificationService
from job_matching.persistence import Database
from job_matching.postings import JobPostingService
from job_matching.statistics import StatisticsAggregator


@dataclass
class Services:
    """Every use case the application exposes, sharing one store."""

    database: Database
    accounts: AccountService
    postings: JobPostingService
    matching: MatchingEngine
    statistics: StatisticsAggregator
    notifications: NotificationService


def build_services(
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    database: Optional[Database] = None,
    email_sender: Optional[EmailSender] = None,
) -> Services:
    """Build the service bundle.

    Args:
        app_config: Validated configuration file contents
        env_config: Environment settings (database URL, sender identity)
        database: Already initialized store (initializes one from
            env_config.database_url when omitted)
        email_sender: Delivery for account emails (logging sender when omitted)
    """
    if database is None:
        database = Database(env_config.database_url).initialize()

    notifications = NotificationService(
        sender=email_sender,
        sender_name=env_config.email_from_name or app_config.email.sender_name,
        sender_email=app_config.email.sender_email or env_config.email_from,
        code_ttl=app_config.accounts.verification_code_ttl_delta,
    )

    return Services(
        database=database,
        accounts=AccountService(database, notifications, app_config.accounts),
        postings=JobPostingService(database),
        matching=MatchingEngine(database),
        statistics=StatisticsAggregator(
            database, recent_window=app_config.matching.recent_match_window_delta
        ),
        notifications=notifications,
    )
