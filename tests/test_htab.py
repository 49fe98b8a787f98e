import pytest

from smallproxy.htab import HashTable


def test_insert_and_find():
    table = HashTable(4)
    assert table.insert("Content-Length", 1) is True
    assert table.find("Content-Length") == 1
    assert len(table) == 1


def test_lookup_is_case_insensitive():
    table = HashTable(4)
    table.insert("Content-Type", "x")
    assert table.find("content-type") == "x"
    assert table.find("CONTENT-TYPE") == "x"
    assert "cOnTeNt-TyPe" in table


def test_insert_does_not_overwrite():
    table = HashTable(4)
    assert table.insert("key", "first")
    assert table.insert("KEY", "second") is False
    assert table.find("key") == "first"
    assert len(table) == 1


def test_find_missing_returns_none():
    table = HashTable(4)
    assert table.find("absent") is None
    assert table.find_key("absent") is None
    assert "absent" not in table


def test_find_key_returns_stored_spelling():
    table = HashTable(4)
    table.insert("Host", 7)
    assert table.find_key("HOST") == ("Host", 7)


def test_delete_and_reinsert():
    table = HashTable(4)
    table.insert("a", 1)
    assert table.delete("A") is True
    assert table.delete("a") is False
    assert "a" not in table
    assert table.insert("a", 2) is True
    assert table.find("a") == 2


def test_many_inserts_grow_table():
    table = HashTable(2)
    keys = [f"key{n}" for n in range(200)]
    for n, key in enumerate(keys):
        assert table.insert(key, n)
    assert len(table) == len(keys)
    assert all(table.find(key.upper()) == n for n, key in enumerate(keys))
    assert table.capacity >= len(keys)


def test_iteration_and_items():
    table = HashTable(8)
    data = {"One": 1, "Two": 2, "Three": 3}
    for key, value in data.items():
        table.insert(key, value)
    assert sorted(table) == sorted(data)
    assert dict(table.items()) == data


def test_non_ascii_case_is_not_folded():
    table = HashTable(4)
    table.insert("É", 1)
    assert "é" not in table
    assert "É" in table


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        HashTable(-1)