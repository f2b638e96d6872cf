from subslayer.client.storage import LocalStorage


def test_set_get_remove(storage):
    storage.set_item("subslayer_settings_1", "{}")
    assert storage.get_item("subslayer_settings_1") == "{}"
    storage.remove_item("subslayer_settings_1")
    assert storage.get_item("subslayer_settings_1") is None


def test_values_survive_reopen(storage):
    storage.set_json("subslayer_profile_1", {"bio": "x"})
    assert LocalStorage(storage.path).get_json("subslayer_profile_1") == {"bio": "x"}


def test_purge_removes_keys_containing_fragment(storage):
    storage.set_item("subslayer_session", "a")
    storage.set_item("old-subslayer_session-backup", "b")
    storage.set_item("subslayer_profile_1", "c")

    assert storage.purge("subslayer_session") == 2
    assert storage.keys() == ["subslayer_profile_1"]


def test_unparseable_value_reads_as_none(storage):
    storage.set_item("subslayer_profile_1", "{not json")
    assert storage.get_json("subslayer_profile_1") is None


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("garbage")
    assert LocalStorage(path).keys() == []
