import threading
from datetime import datetime

import pytest

from moto_app.entity import Motorcycle
from moto_app.errors import ConflictError, NotFoundError, ValidationError

from conftest import HONDA_VIN, KTM_VIN


@pytest.fixture(params=["repository", "sql_repository"])
def any_repository(request):
    # Both implementations honour the same contract
    return request.getfixturevalue(request.param)


def test_list_empty_repository(any_repository):
    assert any_repository.list() == []


def test_insert_assigns_id_and_created_time(any_repository, honda):
    inserted = any_repository.insert(honda)

    assert inserted.id == 1
    assert isinstance(inserted.created_utc, datetime)
    assert inserted.created_utc.tzinfo is not None
    assert inserted.modified_utc is None
    assert [m.vin for m in any_repository.list()] == [HONDA_VIN]


def test_insert_duplicate_vin_conflicts(any_repository, honda):
    any_repository.insert(honda)
    before = any_repository.list()

    with pytest.raises(ConflictError):
        any_repository.insert(
            Motorcycle(make="Yamaha", model="R1", year=2010, vin=HONDA_VIN)
        )

    assert any_repository.list() == before


def test_insert_existing_id_conflicts(any_repository, honda, ktm):
    inserted = any_repository.insert(honda)
    ktm.id = inserted.id

    with pytest.raises(ConflictError):
        any_repository.insert(ktm)

    assert len(any_repository.list()) == 1


def test_insert_invalid_motorcycle_is_not_added(any_repository):
    with pytest.raises(ValidationError):
        any_repository.insert(
            Motorcycle(make="Ford", model="Falcon", year=2006, vin=HONDA_VIN)
        )

    assert any_repository.list() == []
    assert any_repository.exists_by_vin(HONDA_VIN) is False


def test_failed_insert_does_not_consume_an_id(any_repository, honda, ktm):
    with pytest.raises(ValidationError):
        any_repository.insert(Motorcycle(make="Honda", model="Shadow", year=1900, vin=KTM_VIN))

    assert any_repository.insert(honda).id == 1
    assert any_repository.insert(ktm).id == 2


def test_ids_are_never_reused_after_delete(any_repository, honda, ktm):
    first = any_repository.insert(honda)
    any_repository.delete(first.id)

    second = any_repository.insert(ktm)
    # the VIN of a deleted motorcycle may be used again, its id may not
    third = any_repository.insert(
        Motorcycle(make="Honda", model="Shadow", year=2006, vin=HONDA_VIN)
    )

    assert (second.id, third.id) == (2, 3)
    assert [m.id for m in any_repository.list()] == [2, 3]


def test_find_by_id_and_vin(any_repository, honda, ktm):
    any_repository.insert(honda)
    any_repository.insert(ktm)

    assert any_repository.find_by_id(2).vin == KTM_VIN
    assert any_repository.find_by_vin(HONDA_VIN).id == 1
    assert any_repository.exists_by_id(1) is True
    assert any_repository.exists_by_vin(KTM_VIN) is True


def test_find_missing_returns_none(any_repository):
    assert any_repository.find_by_id(999) is None
    assert any_repository.find_by_vin("NOPE0000000000000") is None
    assert any_repository.exists_by_id(999) is False
    assert any_repository.exists_by_vin("NOPE0000000000000") is False


def test_update_overwrites_fields_and_stamps_modified(any_repository, honda):
    inserted = any_repository.insert(honda)

    updated = any_repository.update(
        inserted.id, Motorcycle(make="Honda", model="Spirit", year=2007, vin=HONDA_VIN)
    )

    assert updated.id == inserted.id
    assert updated.model == "Spirit"
    assert updated.year == 2007
    assert updated.created_utc == inserted.created_utc
    assert updated.modified_utc is not None
    assert any_repository.find_by_id(inserted.id).model == "Spirit"


def test_update_can_change_vin(any_repository, honda):
    inserted = any_repository.insert(honda)

    any_repository.update(
        inserted.id, Motorcycle(make="Honda", model="Shadow", year=2006, vin=KTM_VIN)
    )

    assert any_repository.find_by_vin(HONDA_VIN) is None
    assert any_repository.find_by_vin(KTM_VIN).id == inserted.id


def test_update_missing_id_not_found(any_repository, honda):
    with pytest.raises(NotFoundError):
        any_repository.update(42, honda)


def test_update_vin_of_another_motorcycle_conflicts(any_repository, honda, ktm):
    any_repository.insert(honda)
    second = any_repository.insert(ktm)

    with pytest.raises(ConflictError):
        any_repository.update(
            second.id, Motorcycle(make="KTM", model="350 EXC-F", year=2018, vin=HONDA_VIN)
        )

    assert any_repository.find_by_id(second.id).vin == KTM_VIN


def test_update_invalid_leaves_record_untouched(any_repository, honda):
    inserted = any_repository.insert(honda)

    with pytest.raises(ValidationError):
        any_repository.update(
            inserted.id, Motorcycle(make="Ford", model="Falcon", year=2006, vin=HONDA_VIN)
        )

    stored = any_repository.find_by_id(inserted.id)
    assert (stored.make, stored.model, stored.modified_utc) == ("Honda", "Shadow", None)


def test_delete_preserves_order(any_repository, honda, ktm):
    any_repository.insert(honda)
    any_repository.insert(ktm)
    any_repository.insert(Motorcycle(make="BMW", model="R1250GS", year=2019, vin="BMW00000000000003"))

    any_repository.delete(2)

    assert [m.id for m in any_repository.list()] == [1, 3]
    assert any_repository.find_by_vin(KTM_VIN) is None


def test_delete_missing_id_leaves_list_unchanged(any_repository, honda):
    any_repository.insert(honda)
    before = any_repository.list()

    with pytest.raises(NotFoundError):
        any_repository.delete(999)

    assert any_repository.list() == before


def test_save_succeeds(any_repository, honda):
    any_repository.insert(honda)

    assert any_repository.save() is None


def test_memory_repository_hands_out_copies(repository, honda):
    inserted = repository.insert(honda)
    inserted.model = "changed outside"
    repository.list()[0].make = "changed outside"

    stored = repository.find_by_id(inserted.id)
    assert (stored.make, stored.model) == ("Honda", "Shadow")


def test_memory_repository_vin_lookup_with_many_records(repository):
    vins = [f"{n:017d}" for n in range(50, 0, -1)]
    for vin in vins:
        repository.insert(Motorcycle(make="Honda", model="Shadow", year=2006, vin=vin))

    for expected_id, vin in enumerate(vins, start=1):
        assert repository.find_by_vin(vin).id == expected_id
        assert repository.find_by_id(expected_id).vin == vin


def _run_in_threads(target, count):
    threads = [threading.Thread(target=target, args=(n,)) for n in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


def test_memory_repository_concurrent_inserts_of_one_vin(repository):
    inserted, conflicts = [], []

    def insert(n):
        try:
            inserted.append(
                repository.insert(Motorcycle(make="Honda", model="Shadow", year=2006, vin=HONDA_VIN))
            )
        except ConflictError:
            conflicts.append(n)

    _run_in_threads(insert, 20)

    assert len(inserted) == 1
    assert len(conflicts) == 19
    assert [m.vin for m in repository.list()] == [HONDA_VIN]
    assert repository._vin_index == [(HONDA_VIN, inserted[0].id)]


def test_memory_repository_concurrent_inserts_of_distinct_vins(repository):
    count = 50

    def insert(n):
        repository.insert(Motorcycle(make="Honda", model="Shadow", year=2006, vin=f"{n:017d}"))

    _run_in_threads(insert, count)

    stored = repository.list()
    assert [m.id for m in stored] == list(range(1, count + 1))
    assert sorted(m.vin for m in stored) == [f"{n:017d}" for n in range(count)]
    assert repository._vin_index == sorted((m.vin, m.id) for m in stored)
