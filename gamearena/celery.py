"""
Celery configuration for GameArena
"""
import os

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "gamearena.settings")

app = Celery("gamearena")

# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

# Celery Beat schedule for periodic tasks
app.conf.beat_schedule = {
    "broadcast-slot-resync": {
        "task": "tournaments.tasks.broadcast_slot_resync",
        "schedule": crontab(minute="*"),  # Run every minute
    },
}

app.conf.timezone = "Asia/Kolkata"
