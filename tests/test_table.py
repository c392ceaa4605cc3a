import threading

from satnetstack.table import CAPACITY_DEFAULT, Table


def test_source_scenario():
    table = Table()
    assert table.insert(1, 10)
    assert table.insert(2, 20)
    assert table.insert(3, 30)
    assert len(table) == 3

    assert table.get(2) == 20

    assert table.update(2, 99)
    assert table.get(2) == 99

    assert table.remove(1)
    assert len(table) == 2

    assert 3 in table
    assert 1 not in table

    table.clear()
    assert table.is_empty()
    assert len(table) == 0


def test_debug_lines_after_insertion():
    table = Table()
    table.insert(1, 10)
    table.insert(2, 20)
    table.insert(3, 30)
    assert table.debug_lines() == [
        "Table size: 3, capacity: 10",
        "  [0] Key: 1, Value: 10",
        "  [1] Key: 2, Value: 20",
        "  [2] Key: 3, Value: 30",
    ]


def test_insert_duplicate_key_rejected():
    table = Table()
    assert table.insert(5, "a")
    assert not table.insert(5, "b")
    assert table.get(5) == "a"
    assert len(table) == 1


def test_update_and_remove_missing_key():
    table = Table()
    assert not table.update(7, 1)
    assert not table.remove(7)
    assert table.get(7) is None


def test_values_are_copied():
    table = Table()
    value = {"willingness": 3}
    table.insert(1, value)
    value["willingness"] = 7
    assert table.get(1) == {"willingness": 3}


def test_remove_moves_last_entry_into_slot():
    table = Table()
    for key in (1, 2, 3, 4):
        table.insert(key, key * 10)
    table.remove(2)
    assert table.keys() == [1, 4, 3]


def test_capacity_grows_and_shrinks():
    table = Table()
    assert table.capacity == CAPACITY_DEFAULT
    for key in range(11):
        table.insert(key, key)
    assert table.capacity == 20
    for key in range(6):
        table.remove(key)
    assert len(table) == 5
    assert table.capacity == CAPACITY_DEFAULT


def test_clear_resets_capacity():
    table = Table()
    for key in range(15):
        table.insert(key, key)
    table.clear()
    assert table.capacity == CAPACITY_DEFAULT
    assert table.keys() == []


def test_concurrent_inserts():
    table = Table()

    def worker(start):
        for key in range(start, start + 50):
            table.insert(key, key)

    threads = [threading.Thread(target=worker, args=(n * 50,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(table) == 200
    assert sorted(table.keys()) == list(range(200))