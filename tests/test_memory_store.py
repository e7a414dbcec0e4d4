from sessionguard.session.store import MemorySessionBackend


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_save_and_load_copies():
    backend = MemorySessionBackend()
    data = {"cart": [1]}
    backend.save("abc", data, 60)
    data["cart"].append(2)

    loaded = backend.load("abc")
    assert loaded == {"cart": [1]}

    loaded["cart"].append(3)
    assert backend.load("abc") == {"cart": [1]}


def test_missing_record():
    backend = MemorySessionBackend()
    assert backend.load("nope") is None
    assert not backend.exists("nope")


def test_ttl_expiry():
    clock = FakeClock()
    backend = MemorySessionBackend(clock=clock)
    backend.save("abc", {"k": "v"}, 60)

    clock.now += 60
    assert backend.exists("abc")

    clock.now += 1
    assert backend.load("abc") is None
    assert len(backend) == 0


def test_zero_ttl_never_expires():
    clock = FakeClock()
    backend = MemorySessionBackend(clock=clock)
    backend.save("abc", {}, 0)
    clock.now += 10 ** 9
    assert backend.exists("abc")


def test_cleanup_expired_counts_removed():
    clock = FakeClock()
    backend = MemorySessionBackend(clock=clock)
    backend.save("old", {}, 10)
    backend.save("fresh", {}, 100)

    clock.now += 50
    assert backend.cleanup_expired() == 1
    assert backend.exists("fresh")
    assert not backend.exists("old")


def test_delete_and_availability():
    backend = MemorySessionBackend()
    backend.save("abc", {}, 60)
    backend.delete("abc")
    backend.delete("abc")
    assert not backend.exists("abc")
    assert backend.available()
    assert backend.save_path == "memory://"
