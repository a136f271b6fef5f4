"""
Test cases for the watch_slots management command
"""
from unittest.mock import patch

from django.core.management import CommandError, call_command

import pytest


@pytest.mark.django_db
def test_watch_slots_prints_availability(bgmi_squad, capsys):
    with patch("tournaments.management.commands.watch_slots.SlotWatcher.run", lambda watcher: watcher.refresh()):
        call_command("watch_slots", str(bgmi_squad.id))

    out = capsys.readouterr().out
    assert out.startswith("[poll] ")
    assert '"remaining": 25' in out


@pytest.mark.django_db
def test_watch_slots_all(catalog, capsys):
    with patch("tournaments.management.commands.watch_slots.SlotWatcher.run", lambda watcher: watcher.refresh()):
        call_command("watch_slots", "all")

    assert '"slug": "freefire-squad"' in capsys.readouterr().out


@pytest.mark.django_db
def test_watch_slots_unknown_tournament(catalog):
    with pytest.raises(CommandError):
        call_command("watch_slots", "99999")

    with pytest.raises(CommandError):
        call_command("watch_slots", "bgmi")
