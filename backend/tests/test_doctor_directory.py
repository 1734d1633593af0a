import asyncio

import pytest

from healthmate.core.errors import AuthRequired, BackendError
from healthmate.services.distance import Coordinate
from healthmate.services.doctor_directory import (
    DirectoryFilter,
    DoctorInfo,
    SearchGate,
    list_doctors,
    mask_contact,
    rank_doctors,
)


BENGALURU = Coordinate(latitude=12.9716, longitude=77.5946)


def make_info(doctor_id, name, **overrides):
    values = {
        "id": doctor_id,
        "name": name,
        "specialty": "General Physician",
        "address": "Bengaluru",
        "latitude": None,
        "longitude": None,
        "rating": None,
        "experience_years": None,
        "consultation_fee": None,
        "availability_hours": None,
    }
    values.update(overrides)
    return DoctorInfo(**values)


class FakeAccessor:
    def __init__(self, infos, failing_ids=(), list_error=None):
        self.infos = {info.id: info for info in infos}
        self.failing_ids = set(failing_ids)
        self.list_error = list_error
        self.requested = []

    async def list_doctor_ids(self):
        if self.list_error is not None:
            raise self.list_error
        return list(self.infos) + sorted(self.failing_ids)

    async def get_doctor_info(self, doctor_id):
        self.requested.append(doctor_id)
        await asyncio.sleep(0)
        if doctor_id in self.failing_ids:
            raise ConnectionError(f"doctor {doctor_id} unavailable")
        return self.infos.get(doctor_id)


def test_requires_authenticated_user():
    accessor = FakeAccessor([make_info(1, "Dr. Rao")])

    with pytest.raises(AuthRequired):
        asyncio.run(list_doctors(accessor, DirectoryFilter(), user_id=None))

    assert accessor.requested == []


def test_id_listing_failure_is_backend_error():
    accessor = FakeAccessor([], list_error=RuntimeError("db down"))

    with pytest.raises(BackendError):
        asyncio.run(list_doctors(accessor, DirectoryFilter(), user_id=1))


def test_failed_info_fetch_drops_only_that_doctor():
    accessor = FakeAccessor(
        [make_info(1, "Dr. Rao"), make_info(2, "Dr. Iyer")],
        failing_ids=[3],
    )

    ranked = asyncio.run(list_doctors(accessor, DirectoryFilter(), user_id=1))

    assert [r.doctor.id for r in ranked] == [1, 2]
    assert sorted(accessor.requested) == [1, 2, 3]


def test_search_matches_name_specialty_or_address_case_insensitively():
    accessor = FakeAccessor(
        [
            make_info(1, "Dr. Rao", specialty="Cardiologist"),
            make_info(2, "Dr. Iyer", address="Koramangala, Bengaluru"),
            make_info(3, "Dr. Cardoso"),
            make_info(4, "Dr. Shah", specialty="Dermatologist", address="Pune"),
        ]
    )

    ranked = asyncio.run(list_doctors(accessor, DirectoryFilter(search_term="  CARD "), user_id=1))
    assert [r.doctor.id for r in ranked] == [1, 3]

    ranked = asyncio.run(list_doctors(accessor, DirectoryFilter(search_term="koramangala"), user_id=1))
    assert [r.doctor.id for r in ranked] == [2]


def test_without_reference_directory_order_is_kept():
    infos = [make_info(3, "Dr. C"), make_info(1, "Dr. A"), make_info(2, "Dr. B")]

    ranked = rank_doctors(infos, None)

    assert [r.doctor.id for r in ranked] == [3, 1, 2]
    assert all(r.distance_km is None for r in ranked)


def test_ranking_by_distance_is_stable_and_unlocated_last():
    infos = [
        make_info(1, "Far", latitude=19.0760, longitude=72.8777),
        make_info(2, "Unlocated"),
        make_info(3, "Near", latitude=12.9352, longitude=77.6245),
        make_info(4, "Near twin", latitude=12.9352, longitude=77.6245),
        make_info(5, "Here", latitude=12.9716, longitude=77.5946),
    ]

    ranked = rank_doctors(infos, BENGALURU)

    assert [r.doctor.id for r in ranked] == [5, 3, 4, 1, 2]
    assert ranked[0].distance_km == 0.0
    assert ranked[1].distance_km == ranked[2].distance_km
    assert ranked[-1].distance_km is None


def test_concurrency_is_bounded():
    in_flight = 0
    peak = 0

    class SlowAccessor(FakeAccessor):
        async def get_doctor_info(self, doctor_id):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return self.infos[doctor_id]

    accessor = SlowAccessor([make_info(i, f"Dr. {i}") for i in range(1, 11)])

    ranked = asyncio.run(list_doctors(accessor, DirectoryFilter(), user_id=1, max_concurrency=3))

    assert len(ranked) == 10
    assert peak <= 3


def test_masked_record_never_carries_contact():
    info = make_info(1, "Dr. Rao", phone="+91-1", email="rao@example.com")

    assert info.can_view_contact is False
    assert info.phone is None
    assert info.email is None


def test_unlocked_record_keeps_contact():
    info = make_info(1, "Dr. Rao", can_view_contact=True, phone="+91-1", email="rao@example.com")

    assert mask_contact(info) is info
    assert info.phone == "+91-1"


def test_search_gate_only_latest_token_is_current():
    gate = SearchGate()

    first = gate.begin("user-1")
    second = gate.begin("user-1")
    other = gate.begin("user-2")

    assert not gate.is_current("user-1", first)
    assert gate.is_current("user-1", second)
    assert gate.is_current("user-2", other)
