from .settings import *
import os

# Local override to use SQLite for quick local setup
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.path.join(BASE_DIR, "db.sqlite3"),
        "OPTIONS": {
            # BEGIN IMMEDIATE makes concurrent admissions queue on the write lock
            "transaction_mode": "IMMEDIATE",
            "timeout": 20,
        },
    }
}
