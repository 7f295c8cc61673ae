from __future__ import annotations

"""merge.py - справочник + текущий пользователь -> плоский список для users.json."""

from typing import Any, Iterable, Optional

from .models import CurrentUserProfile, OutputRecord, UserRecord


def merge_records(users: Iterable[UserRecord], current: Optional[CurrentUserProfile]) -> list[OutputRecord]:
    """
    Каждый пользователь справочника ровно один раз, в исходном порядке.

    Текущий пользователь: совпал email с записью -> помечаем её isCurrent,
    иначе добавляем новую запись в конец. isCurrent=True максимум у одной записи.
    """
    out = [OutputRecord(id=u.id, name=u.name, email=u.email) for u in users]
    if current is None:
        return out

    for rec in out:
        if rec.email == current.email:
            rec.isCurrent = True
            return out

    out.append(OutputRecord(id=current.id, name=current.name, email=current.email, isCurrent=True))
    return out


def records_to_json(records: Iterable[OutputRecord]) -> list[dict[str, Any]]:
    return [r.to_dict() for r in records]
