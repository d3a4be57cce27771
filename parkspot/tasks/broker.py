"""TaskIQ broker and scheduler configuration."""

from taskiq import TaskiqScheduler
from taskiq.schedule_sources import LabelScheduleSource
from taskiq_postgresql import PostgresqlBroker

from parkspot.config import settings

# Create PostgreSQL broker
broker = PostgresqlBroker(
    dsn=settings.SYNC_DATABASE_URL,
)

# Picks up tasks declared with a ``schedule`` label
scheduler = TaskiqScheduler(
    broker=broker,
    sources=[LabelScheduleSource(broker)],
)
