from subslayer.client.events import EventBus, Topic
from subslayer.client.profile import DEFAULT_BIO, ProfileStore
from subslayer.client.storage import LocalStorage

KEY = "subslayer_profile_8d3c1a52-6a9e-4c7a-9d0b-2f1e5b6c7d80"
LEGACY_KEY = "profile_8d3c1a52-6a9e-4c7a-9d0b-2f1e5b6c7d80"


def test_first_load_seeds_and_persists(storage, user_record):
    profile = ProfileStore(storage, EventBus()).load(user_record)
    assert profile.display_name == "Alice Doe"
    assert profile.email == "alice@example.com"
    assert profile.bio == DEFAULT_BIO
    assert profile.join_date == "2025-01-10T09:30:00"
    assert storage.get_json(KEY)["display_name"] == "Alice Doe"


def test_seed_falls_back_to_email_local_part(storage, user_record):
    user_record["full_name"] = None
    assert ProfileStore(storage, EventBus()).load(user_record).display_name == "alice"


async def test_save_then_reload(storage, user_record):
    store = ProfileStore(storage, EventBus())
    store.load(user_record)
    await store.save({"location": "Lisbon"})
    result = await store.save({"bio": "x"})
    assert result.success

    reloaded = ProfileStore(LocalStorage(storage.path), EventBus()).load(user_record)
    assert reloaded.bio == "x"
    assert reloaded.location == "Lisbon"
    assert reloaded.display_name == "Alice Doe"


async def test_save_publishes_profile_updated(storage, user_record):
    events = EventBus()
    seen = []
    events.subscribe(Topic.PROFILE_UPDATED, seen.append)

    store = ProfileStore(storage, events)
    store.load(user_record)
    await store.update_avatar("data:image/png;base64,AAAA")
    assert seen[0]["avatar"] == "data:image/png;base64,AAAA"


async def test_storage_failure_reports_error(storage, user_record, monkeypatch):
    store = ProfileStore(storage, EventBus())
    store.load(user_record)

    def broken(key, value):
        raise OSError("disk full")

    monkeypatch.setattr(storage, "set_item", broken)
    result = await store.save({"bio": "lost"})
    assert not result.success
    assert result.error == "Failed to save profile"
    assert store.profile.bio == DEFAULT_BIO


def test_legacy_key_is_migrated(storage, user_record):
    storage.set_json(LEGACY_KEY, {"display_name": "Old Name", "email": "alice@example.com"})
    profile = ProfileStore(storage, EventBus()).load(user_record)
    assert profile.display_name == "Old Name"
    # Missing fields are defaulted
    assert profile.bio == DEFAULT_BIO
    assert storage.get_json(KEY)["display_name"] == "Old Name"


def test_cleared_storage_resets_to_seed(storage, user_record):
    storage.set_json(KEY, {"display_name": "Custom"})
    storage.clear()
    assert ProfileStore(storage, EventBus()).load(user_record).display_name == "Alice Doe"


def test_signed_out_profile_is_blank(storage):
    assert ProfileStore(storage, EventBus()).load(None).email == ""
