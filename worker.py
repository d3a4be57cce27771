#!/usr/bin/env python
"""TaskIQ worker entry point."""

# Import broker and tasks to ensure they are registered
from parkspot.tasks.broker import broker, scheduler
from parkspot.tasks.reservation_tasks import reconcile_reservations_task

# TaskIQ CLI entry points:
#   taskiq worker worker:broker
#   taskiq scheduler worker:scheduler
# Set RECONCILE_IN_PROCESS=false on the API when running these.
