from folio.build import BuildError
from folio.watcher import PostWatcher, _ChangeHandler


class DummyEvent:
    def __init__(self, path, is_directory=False):
        self.src_path = path
        self.is_directory = is_directory


def make_project(tmp_path):
    (tmp_path / "posts").mkdir()
    (tmp_path / "posts" / "a.md").write_text("# A", encoding="utf-8")
    return tmp_path


def test_change_handler_skips_outputs(tmp_path):
    watcher = PostWatcher(make_project(tmp_path))
    called = []
    watcher.rebuild = lambda include_drafts: called.append(include_drafts)
    handler = _ChangeHandler(watcher, include_drafts=True)

    handler.on_any_event(DummyEvent(str(tmp_path / "blogs" / "index.md")))
    handler.on_any_event(DummyEvent(str(tmp_path / ".vitepress" / "posts.json")))
    handler.on_any_event(DummyEvent(str(tmp_path / "public" / "sitemap.xml")))
    handler.on_any_event(DummyEvent(str(tmp_path / "posts"), is_directory=True))
    assert called == []

    handler.on_any_event(DummyEvent(str(tmp_path / "posts" / "a.md")))
    assert called == [True]


def test_rebuild_skips_unchanged_sources(monkeypatch, tmp_path):
    watcher = PostWatcher(make_project(tmp_path), page_size=3)
    watcher._debounce_seconds = 0
    calls = []

    def fake_build(root, include_drafts=False, page_size=None):
        calls.append((root, include_drafts, page_size))

        class Result:
            posts = []
            pages = []

        return Result()

    monkeypatch.setattr("folio.watcher.build_index", fake_build)
    assert watcher.rebuild(False, force=True) is True
    assert watcher.rebuild(False) is False
    (tmp_path / "posts" / "b.md").write_text("# B", encoding="utf-8")
    assert watcher.rebuild(True) is True
    assert calls == [(tmp_path, False, 3), (tmp_path, True, 3)]


def test_rebuild_survives_build_errors(monkeypatch, tmp_path, caplog):
    watcher = PostWatcher(make_project(tmp_path))

    def failing_build(root, include_drafts=False, page_size=None):
        raise BuildError(root / "posts" / "a.md", "Invalid date: nope")

    monkeypatch.setattr("folio.watcher.build_index", failing_build)
    assert watcher.rebuild(False, force=True) is False
    assert "Invalid date: nope" in caplog.text
    assert watcher._rebuilding is False


def test_rebuild_debounces(monkeypatch, tmp_path):
    watcher = PostWatcher(make_project(tmp_path))
    watcher._debounce_seconds = 3600
    watcher._last_rebuild_at = 10**12
    monkeypatch.setattr("folio.watcher.build_index", lambda *a, **k: None)
    assert watcher.rebuild(False) is False


def test_stop_without_observer(tmp_path):
    watcher = PostWatcher(tmp_path)
    watcher.stop()
    assert watcher._observer is None


def test_rebuild_survives_broken_template(tmp_path, caplog):
    project = make_project(tmp_path)
    template = project / "_templates" / "listing_page.md.jinja"
    template.parent.mkdir()
    template.write_text("{{ page.number ", encoding="utf-8")
    watcher = PostWatcher(project)
    assert watcher.rebuild(False, force=True) is False
    assert "Template syntax error" in caplog.text
    assert watcher._rebuilding is False

    template.write_text("Page {{ page.number }}", encoding="utf-8")
    assert watcher.rebuild(False, force=True) is True
    assert (project / "blogs" / "index.md").read_text(encoding="utf-8") == "Page 1\n"


def fake_build(root, include_drafts=False, page_size=None):
    class Result:
        posts = []
        pages = []

    return Result()


def test_rebuild_reloads_config(monkeypatch, tmp_path):
    project = make_project(tmp_path)
    watcher = PostWatcher(project)
    assert project / "blogs" in watcher.ignored
    monkeypatch.setattr("folio.watcher.build_index", fake_build)

    (project / "folio.yaml").write_text("listing_dir: pages\n", encoding="utf-8")
    assert watcher.rebuild(False, force=True) is True
    assert watcher.config["listing_dir"] == "pages"
    assert watcher.is_ignored(project / "pages" / "index.md")
    assert not watcher.is_ignored(project / "blogs" / "index.md")


def test_rebuild_reports_invalid_config(monkeypatch, tmp_path, caplog):
    project = make_project(tmp_path)
    watcher = PostWatcher(project)
    calls = []
    monkeypatch.setattr("folio.watcher.build_index", lambda *a, **k: calls.append(a))

    (project / "folio.yaml").write_text("page_size: 0\n", encoding="utf-8")
    assert watcher.rebuild(False, force=True) is False
    assert "page_size must be a positive integer" in caplog.text
    assert calls == []


class FakeObserver:
    def __init__(self):
        self.scheduled = []
        self.unscheduled = 0

    def unschedule_all(self):
        self.unscheduled += 1
        self.scheduled = []

    def schedule(self, handler, path, recursive=False):
        self.scheduled.append((path, recursive))


def test_rebuild_reschedules_moved_posts_dir(monkeypatch, tmp_path):
    project = make_project(tmp_path)
    watcher = PostWatcher(project)
    observer = FakeObserver()
    watcher._handler = _ChangeHandler(watcher, include_drafts=False)
    watcher._schedule(observer)
    watcher._observer = observer
    assert (str(project / "posts"), True) in observer.scheduled
    monkeypatch.setattr("folio.watcher.build_index", fake_build)

    (project / "articles").mkdir()
    (project / "folio.yaml").write_text("posts_dir: articles\n", encoding="utf-8")
    assert watcher.rebuild(False, force=True) is True
    assert observer.unscheduled == 2
    assert observer.scheduled == [
        (str(project / "articles"), True),
        (str(project), False),
    ]

    # unchanged folders keep the existing watches
    (project / "folio.yaml").write_text("posts_dir: articles\ntitle: x\n", encoding="utf-8")
    watcher.rebuild(False, force=True)
    assert observer.unscheduled == 2
