"""JSON <-> domain conversion for the kiosk HTTP layer."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..checkin.model import (
    CheckInFamily,
    CheckInGroup,
    CheckInGroupType,
    CheckInLocation,
    CheckInPerson,
    CheckInSchedule,
    OptionNode,
)
from ..checkin.pager import PageWindow
from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..core.enums import AbilityGroup, Gender
from ..core.exceptions import DomainError
from ..people.model import HouseholdGroup, PendingPerson, Person
from ..people.service import PersonInfo, PersonInfoForm
from ..session.model import Kiosk, KioskLocation


def _date(value: Any) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value))
    except ValueError as e:
        raise DomainError(f"invalid date: {value!r}") from e


def _datetime(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    try:
        return parse_iso_datetime(str(value))
    except ValueError as e:
        raise DomainError(f"invalid timestamp: {value!r}") from e


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def _optional_int(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    return int(value)


def _ability_group(value: Any) -> Optional[AbilityGroup]:
    if not value:
        return None
    return AbilityGroup(value)


# ---- parsing ----

def person_from_dict(data: Mapping[str, Any]) -> Person:
    return Person(
        person_id=int(data["person_id"]),
        first_name=str(data.get("first_name", "")),
        last_name=str(data.get("last_name", "")),
        nick_name=data.get("nick_name"),
        suffix_value_id=_optional_int(data.get("suffix_value_id")),
        birth_date=_date(data.get("birth_date")),
        gender=Gender(data.get("gender") or Gender.UNKNOWN.value),
        grade_offset=_optional_int(data.get("grade_offset")),
        ability_level=data.get("ability_level"),
        is_special_needs=bool(data.get("is_special_needs", False)),
        allergy=data.get("allergy"),
    )


def _node_flags(data: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "name": str(data.get("name", "")),
        "selected": bool(data.get("selected", False)),
        "pre_selected": bool(data.get("pre_selected", False)),
        "last_check_in": _datetime(data.get("last_check_in")),
    }


def group_type_from_dict(data: Mapping[str, Any]) -> CheckInGroupType:
    return CheckInGroupType(
        group_type_id=int(data["id"]),
        groups=[
            CheckInGroup(
                group_id=int(g["id"]),
                locations=[
                    CheckInLocation(
                        location_id=int(loc["id"]),
                        schedules=[
                            CheckInSchedule(schedule_id=int(s["id"]), **_node_flags(s))
                            for s in loc.get("schedules", [])
                        ],
                        **_node_flags(loc),
                    )
                    for loc in g.get("locations", [])
                ],
                **_node_flags(g),
            )
            for g in data.get("groups", [])
        ],
        **_node_flags(data),
    )


def checkin_person_from_dict(data: Mapping[str, Any]) -> CheckInPerson:
    return CheckInPerson(
        person=person_from_dict(data["person"]),
        family_member=bool(data.get("family_member", True)),
        selected=bool(data.get("selected", False)),
        first_time=bool(data.get("first_time", False)),
        excluded_by_filter=bool(data.get("excluded_by_filter", False)),
        last_check_in=_datetime(data.get("last_check_in")),
        group_types=[group_type_from_dict(gt) for gt in data.get("group_types", [])],
    )


def family_from_dict(data: Mapping[str, Any]) -> CheckInFamily:
    group = HouseholdGroup(
        group_id=int(data["group_id"]),
        name=str(data.get("name") or data.get("caption") or ""),
        campus_id=_optional_int(data.get("campus_id")),
    )
    family = CheckInFamily(
        group=group,
        caption=str(data.get("caption") or group.name),
        sub_caption=str(data.get("sub_caption", "")),
        selected=bool(data.get("selected", False)),
        people=[checkin_person_from_dict(p) for p in data.get("people", [])],
    )
    if not family.sub_caption:
        family.refresh_sub_caption()
    return family


def kiosk_from_dict(data: Mapping[str, Any]) -> Kiosk:
    return Kiosk(
        kiosk_id=int(data.get("kiosk_id", 0)),
        name=str(data.get("name", "")),
        locations=tuple(
            KioskLocation(
                location_id=int(loc["location_id"]),
                name=str(loc.get("name", "")),
                campus_id=_optional_int(loc.get("campus_id")),
            )
            for loc in data.get("locations", [])
        ),
    )


def pending_person_from_dict(data: Mapping[str, Any]) -> PendingPerson:
    return PendingPerson(
        first_name=str(data.get("first_name") or ""),
        last_name=str(data.get("last_name") or ""),
        suffix_value_id=_optional_int(data.get("suffix_value_id")),
        birth_date=_date(data.get("birth_date")),
        gender=Gender(data.get("gender") or Gender.UNKNOWN.value),
        ability=str(data.get("ability") or ""),
        ability_group=_ability_group(data.get("ability_group")),
        is_special_needs=bool(data.get("is_special_needs", False)),
    )


def person_info_form_from_dict(data: Mapping[str, Any]) -> PersonInfoForm:
    return PersonInfoForm(
        first_name=str(data.get("first_name") or ""),
        last_name=str(data.get("last_name") or ""),
        birth_date=_date(data.get("birth_date")),
        nick_name=str(data.get("nick_name") or ""),
        suffix_value_id=_optional_int(data.get("suffix_value_id")),
        ability_grade=str(data.get("ability_grade") or ""),
        ability_group=_ability_group(data.get("ability_group")),
        is_special_needs=bool(data.get("is_special_needs", False)),
        allergy=data.get("allergy"),
        note=data.get("note"),
    )


# ---- rendering ----

def pager_to_dict(pager: PageWindow) -> dict[str, Any]:
    return {"start_index": pager.start_index, "page_size": pager.page_size, "visible": pager.visible}


def _node_to_dict(node: OptionNode) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": node.node_id,
        "name": getattr(node, "name", ""),
        "selected": node.selected,
        "pre_selected": node.pre_selected,
        "last_check_in": node.last_check_in.isoformat() if node.last_check_in else None,
    }
    if isinstance(node, CheckInGroupType):
        data["groups"] = [_node_to_dict(c) for c in node.children]
    elif isinstance(node, CheckInGroup):
        data["locations"] = [_node_to_dict(c) for c in node.children]
    elif isinstance(node, CheckInLocation):
        data["schedules"] = [_node_to_dict(c) for c in node.children]
    return data


def person_to_dict(person: Person) -> dict[str, Any]:
    return {
        "person_id": person.person_id,
        "first_name": person.first_name,
        "last_name": person.last_name,
        "nick_name": person.nick_name,
        "full_name": person.full_name,
        "birth_date": _iso(person.birth_date),
        "gender": person.gender.value,
        "grade_offset": person.grade_offset,
        "ability_level": person.ability_level,
        "is_special_needs": person.is_special_needs,
    }


def checkin_person_to_dict(person: CheckInPerson) -> dict[str, Any]:
    return {
        "person": person_to_dict(person.person),
        "family_member": person.family_member,
        "selected": person.selected,
        "first_time": person.first_time,
        "last_check_in": person.last_check_in.isoformat() if person.last_check_in else None,
        "group_types": [_node_to_dict(gt) for gt in person.group_types],
    }


def family_to_dict(family: CheckInFamily) -> dict[str, Any]:
    return {
        "group_id": family.family_id,
        "caption": family.caption,
        "sub_caption": family.sub_caption,
        "campus_id": family.campus_id,
        "selected": family.selected,
    }


def pending_person_to_dict(row: PendingPerson) -> dict[str, Any]:
    return {
        "first_name": row.first_name,
        "last_name": row.last_name,
        "suffix_value_id": row.suffix_value_id,
        "birth_date": _iso(row.birth_date),
        "gender": row.gender.value,
        "ability": row.ability,
        "ability_group": row.ability_group.value if row.ability_group else None,
        "is_special_needs": row.is_special_needs,
    }


def person_info_to_dict(info: PersonInfo) -> dict[str, Any]:
    return {
        "person_id": info.person_id,
        "first_name": info.first_name,
        "last_name": info.last_name,
        "nick_name": info.nick_name,
        "suffix_value_id": info.suffix_value_id,
        "birth_date": _iso(info.birth_date),
        "ability_grade": info.ability_grade,
        "ability_group": info.ability_group.value if info.ability_group else None,
        "is_special_needs": info.is_special_needs,
        "allergy": info.allergy,
        "note": info.note,
    }
