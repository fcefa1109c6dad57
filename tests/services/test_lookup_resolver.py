# tests/services/test_lookup_resolver.py
from asset_admin.services.lookup_resolver import LookupCache, LookupResolver, normalize_name


class RecordingCreator:
    def __init__(self, start_id=100):
        self.calls = []
        self.next_id = start_id

    def __call__(self, name):
        self.calls.append(name)
        self.next_id += 1
        return self.next_id


def test_normalize_name():
    assert normalize_name("  Dell Inc ") == "dell inc"


def test_seeded_names_resolve_without_creating():
    creator = RecordingCreator()
    cache = LookupCache("Manufacturers").seed([(1, "Dell"), (2, "Lenovo")])
    resolver = LookupResolver(creator)

    assert resolver.resolve(cache, " dell ") == 1
    assert resolver.resolve(cache, "LENOVO") == 2
    assert creator.calls == []
    assert cache.miss_count == 0


def test_new_name_is_created_once_per_run():
    creator = RecordingCreator()
    cache = LookupCache("Categories")
    resolver = LookupResolver(creator)

    first = resolver.resolve(cache, " Laptop ")
    second = resolver.resolve(cache, "laptop")
    third = resolver.resolve(cache, "LAPTOP")

    assert first == second == third
    assert creator.calls == ["Laptop"]
    assert cache.miss_count == 1
    assert "laptop" in cache
    assert len(cache) == 1


def test_blank_names_resolve_to_none():
    creator = RecordingCreator()
    cache = LookupCache("Suppliers")
    resolver = LookupResolver(creator)

    assert resolver.resolve(cache, None) is None
    assert resolver.resolve(cache, "   ") is None
    assert creator.calls == []


def test_seed_ignores_empty_names():
    cache = LookupCache("Locations").seed([(1, ""), (2, "Main Office")])
    assert len(cache) == 1
    assert cache.get("main office") == 2
