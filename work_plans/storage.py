"""Durable snapshot of the draft being authored."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

from .models import WorkPlanFormData

STORAGE_KEY = "work_plan_draft"
DRAFT_PATH = Path(os.path.expanduser(f"~/.cache/work_plans/{STORAGE_KEY}.json"))


def dump_form(form: WorkPlanFormData) -> str:
    return json.dumps(form.to_dict())


def load_form(text: str) -> WorkPlanFormData:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Draft snapshot is not an object: {type(data).__name__}")
    return WorkPlanFormData.from_dict(data)


class DraftStore:
    """Read once at session start, overwrite on every change, clear on commit."""

    def load(self) -> Optional[WorkPlanFormData]:
        raise NotImplementedError

    def save(self, form: WorkPlanFormData) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemoryDraftStore(DraftStore):
    def __init__(self) -> None:
        self.items: Dict[str, str] = {}

    def load(self) -> Optional[WorkPlanFormData]:
        text = self.items.get(STORAGE_KEY)
        return load_form(text) if text else None

    def save(self, form: WorkPlanFormData) -> None:
        self.items[STORAGE_KEY] = dump_form(form)

    def clear(self) -> None:
        self.items.pop(STORAGE_KEY, None)


class FileDraftStore(DraftStore):
    def __init__(self, path: Path = DRAFT_PATH) -> None:
        self.path = Path(path)

    def load(self) -> Optional[WorkPlanFormData]:
        if not self.path.exists():
            return None
        try:
            return load_form(self.path.read_text(encoding="utf-8"))
        except (ValueError, KeyError, TypeError) as exc:
            logging.warning("Ignoring unreadable draft %s: %s", self.path, exc)
            return None

    def save(self, form: WorkPlanFormData) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(dump_form(form), encoding="utf-8")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
