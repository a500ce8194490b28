import asyncio

import pytest

from dnslists.lists import (
    AlreadyExists,
    InvalidEntry,
    ListKind,
    ListRegistry,
    ListStore,
    MatchPolicy,
    NotFound,
    NotifyFailure,
)


class RecordingNotifier:
    def __init__(self, fail: bool = False):
        self.calls: list[ListKind] = []
        self.fail = fail

    async def notify(self, kind):
        self.calls.append(kind)
        if self.fail:
            raise NotifyFailure(kind, kind.sync_command, "daemon unreachable")


@pytest.fixture
def paths(tmp_path):
    return {
        ListKind.ALLOW: tmp_path / "whitelist.txt",
        ListKind.DENY: tmp_path / "blacklist.txt",
        ListKind.REGEX: tmp_path / "regex.list",
    }


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def registry(paths, notifier):
    return ListRegistry(ListStore(paths), notifier=notifier)


def test_get_without_file_is_empty(registry):
    for controller in registry:
        assert controller.get() == []


@pytest.mark.asyncio
async def test_add_then_remove_deny_scenario(registry, paths, notifier):
    deny = registry[ListKind.DENY]

    await deny.add("ads.example.com")
    assert paths[ListKind.DENY].read_text() == "ads.example.com\n"
    assert deny.get() == ["ads.example.com"]

    await deny.remove("ads.example.com")
    assert deny.get() == []
    assert paths[ListKind.DENY].read_bytes() == b""
    assert notifier.calls == [ListKind.DENY, ListKind.DENY]


@pytest.mark.asyncio
async def test_add_duplicate_is_rejected(registry, paths, notifier):
    allow = registry[ListKind.ALLOW]
    await allow.add("example.com")

    with pytest.raises(AlreadyExists):
        await allow.add("example.com")

    assert paths[ListKind.ALLOW].read_text() == "example.com\n"
    assert notifier.calls == [ListKind.ALLOW]


@pytest.mark.asyncio
async def test_add_invalid_domain_leaves_file_untouched(registry, paths, notifier):
    path = paths[ListKind.DENY]
    path.write_bytes(b"a.example.com\nb.example.com\n")

    with pytest.raises(InvalidEntry):
        await registry[ListKind.DENY].add("not a domain!!")

    assert path.read_bytes() == b"a.example.com\nb.example.com\n"
    assert notifier.calls == []


@pytest.mark.asyncio
async def test_invalid_entry_performs_no_io(tmp_path):
    missing_dir = tmp_path / "missing"
    registry = ListRegistry(ListStore({kind: missing_dir / kind.value for kind in ListKind}))

    with pytest.raises(InvalidEntry):
        await registry[ListKind.ALLOW].add("bad domain")
    with pytest.raises(InvalidEntry):
        await registry[ListKind.REGEX].remove("(unclosed")
    assert not missing_dir.exists()


@pytest.mark.asyncio
async def test_remove_validates_before_lookup(registry):
    with pytest.raises(InvalidEntry):
        await registry[ListKind.ALLOW].remove("not a domain!!")


@pytest.mark.asyncio
async def test_remove_missing_entry_is_not_found(registry, paths, notifier):
    paths[ListKind.ALLOW].write_text("other.com\n")
    with pytest.raises(NotFound):
        await registry[ListKind.ALLOW].remove("example.com")
    assert paths[ListKind.ALLOW].read_text() == "other.com\n"
    assert notifier.calls == []


@pytest.mark.asyncio
async def test_remove_drops_every_occurrence(registry, paths):
    paths[ListKind.DENY].write_text("a.com\nb.com\na.com\nc.com\n")
    await registry[ListKind.DENY].remove("a.com")
    assert paths[ListKind.DENY].read_text() == "b.com\nc.com\n"


@pytest.mark.asyncio
async def test_try_remove_is_idempotent(registry, notifier):
    deny = registry[ListKind.DENY]
    await deny.add("example.com")

    assert await deny.try_remove("example.com") is True
    assert await deny.try_remove("example.com") is False
    assert await deny.try_remove("never-added.com") is False
    assert deny.get() == []
    assert notifier.calls == [ListKind.DENY, ListKind.DENY]


@pytest.mark.asyncio
async def test_try_remove_still_rejects_invalid_input(registry):
    with pytest.raises(InvalidEntry):
        await registry[ListKind.DENY].try_remove("not a domain!!")


@pytest.mark.asyncio
async def test_regex_add_and_remove_notify_once_each(registry, paths, notifier):
    regex = registry[ListKind.REGEX]

    await regex.add("^.*example.com$")
    assert notifier.calls == [ListKind.REGEX]
    assert paths[ListKind.REGEX].read_text() == "^.*example.com$\n"

    await regex.remove("^.*example.com$")
    assert notifier.calls == [ListKind.REGEX, ListKind.REGEX]
    assert regex.get() == []


@pytest.mark.asyncio
async def test_lists_are_isolated(registry, paths):
    await registry[ListKind.ALLOW].add("example.com")
    assert registry[ListKind.DENY].get() == []
    assert registry[ListKind.REGEX].get() == []
    assert not paths[ListKind.DENY].exists()


@pytest.mark.asyncio
async def test_notify_failure_surfaces_after_commit(paths):
    notifier = RecordingNotifier(fail=True)
    registry = ListRegistry(ListStore(paths), notifier=notifier)

    with pytest.raises(NotifyFailure):
        await registry[ListKind.REGEX].add("^ads?\\.")

    # The file change is durable even though the daemon is stale
    assert registry[ListKind.REGEX].get() == ["^ads?\\."]


@pytest.mark.asyncio
async def test_add_waits_for_list_lock(registry, paths):
    allow = registry[ListKind.ALLOW]
    await allow._lock.acquire()
    task = asyncio.create_task(allow.add("example.com"))
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    assert not task.done()
    assert not paths[ListKind.ALLOW].exists()

    allow._lock.release()
    assert await task == "example.com"
    assert paths[ListKind.ALLOW].read_text() == "example.com\n"


@pytest.mark.asyncio
async def test_remove_waits_for_list_lock(registry, paths):
    paths[ListKind.DENY].write_text("a.com\nb.com\n")
    deny = registry[ListKind.DENY]
    await deny._lock.acquire()
    task = asyncio.create_task(deny.remove("a.com"))
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    assert not task.done()
    assert paths[ListKind.DENY].read_text() == "a.com\nb.com\n"

    deny._lock.release()
    await task
    assert paths[ListKind.DENY].read_text() == "b.com\n"


class LockCheckingStore(ListStore):
    """Fails any file access made outside the owning controller's lock."""

    def __init__(self, paths):
        super().__init__(paths)
        self.registry = None

    def _check(self, kind):
        assert self.registry[kind]._lock.locked()

    def read(self, kind):
        self._check(kind)
        return super().read(kind)

    def append(self, kind, entry):
        self._check(kind)
        super().append(kind, entry)

    def rewrite(self, kind, entries):
        self._check(kind)
        super().rewrite(kind, entries)


@pytest.mark.asyncio
async def test_mutations_touch_files_only_under_lock(paths, notifier):
    store = LockCheckingStore(paths)
    registry = ListRegistry(store, notifier=notifier)
    store.registry = registry
    deny = registry[ListKind.DENY]

    results = await asyncio.gather(
        *(deny.add("example.com") for _ in range(3)),
        deny.add("other.com"),
        return_exceptions=True,
    )
    assert sum(1 for r in results if isinstance(r, AlreadyExists)) == 2
    await deny.remove("example.com")
    assert await deny.try_remove("example.com") is False
    assert paths[ListKind.DENY].read_text() == "other.com\n"


@pytest.mark.asyncio
async def test_add_and_remove_without_sync(registry, paths, notifier):
    allow = registry[ListKind.ALLOW]
    await allow.add("example.com", sync=False)
    assert await allow.try_remove("example.com", sync=False) is True
    assert notifier.calls == []
    assert paths[ListKind.ALLOW].read_text() == ""

    await allow.sync()
    assert notifier.calls == [ListKind.ALLOW]


def test_registry_lookup_by_name(registry):
    assert registry["whitelist"].kind is ListKind.ALLOW
    assert registry[ListKind.REGEX].kind is ListKind.REGEX
    with pytest.raises(ValueError):
        registry["greylist"]



# ---------------------------------------------------------------------------
# Match policy
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_default_policy_is_case_sensitive(registry, paths):
    allow = registry[ListKind.ALLOW]
    await allow.add("Example.com")
    await allow.add("example.com")
    assert allow.get() == ["Example.com", "example.com"]
    with pytest.raises(InvalidEntry):
        await allow.add("example.org.")


@pytest.mark.asyncio
async def test_fold_case_policy(paths, notifier):
    registry = ListRegistry(ListStore(paths), notifier=notifier, policy=MatchPolicy(fold_case=True))
    allow = registry[ListKind.ALLOW]

    assert await allow.add("Example.COM") == "example.com"
    with pytest.raises(AlreadyExists):
        await allow.add("EXAMPLE.com")

    paths[ListKind.ALLOW].write_text("example.com\nMixed.Example.com\n")
    await allow.remove("mixed.example.com")
    assert allow.get() == ["example.com"]


@pytest.mark.asyncio
async def test_strip_trailing_dot_policy(paths):
    registry = ListRegistry(ListStore(paths), policy=MatchPolicy(strip_trailing_dot=True))
    deny = registry[ListKind.DENY]

    assert await deny.add("ads.example.com.") == "ads.example.com"
    with pytest.raises(AlreadyExists):
        await deny.add("ads.example.com")
    await deny.remove("ads.example.com.")
    assert deny.get() == []


@pytest.mark.asyncio
async def test_policy_does_not_touch_regex_entries(paths):
    registry = ListRegistry(
        ListStore(paths),
        policy=MatchPolicy(fold_case=True, strip_trailing_dot=True),
    )
    regex = registry[ListKind.REGEX]
    assert await regex.add("^Ads.") == "^Ads."
    assert regex.get() == ["^Ads."]


@pytest.mark.asyncio
async def test_regex_with_form_feed_round_trips(registry):
    regex = registry[ListKind.REGEX]
    await regex.add("^ads\x0c?x$")
    assert regex.get() == ["^ads\x0c?x$"]
    with pytest.raises(AlreadyExists):
        await regex.add("^ads\x0c?x$")


@pytest.mark.asyncio
async def test_regex_with_line_separator_survives_rewrite(registry):
    regex = registry[ListKind.REGEX]
    await regex.add("^a\u2028b$")
    await regex.add("^other$")
    await regex.remove("^other$")

    assert regex.get() == ["^a\u2028b$"]
    await regex.remove("^a\u2028b$")
    assert regex.get() == []
