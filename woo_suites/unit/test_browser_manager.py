import json

from woo_suites.ui_testing.framework.browser_manager import BrowserManager, ensure_auth_state
from woo_tools.common.config_loader import UIConfig


class DummyContext:
    def __init__(self):
        self.pages = []

    async def new_page(self):
        page = object()
        self.pages.append(page)
        return page

    async def storage_state(self, path=None):
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"cookies": [{"name": "wordpress_logged_in"}], "origins": []}, f)


def test_context_options_without_saved_state(tmp_path):
    config = UIConfig(storage_state_path=tmp_path / "auth.json")
    manager = BrowserManager(config)

    options = manager.context_options()

    assert options["base_url"] == "https://woocommerce.com"
    assert options["viewport"] == {"width": 1280, "height": 720}
    assert "storage_state" not in options
    assert "record_video_dir" not in options


def test_context_options_restore_saved_state(tmp_path):
    state_file = tmp_path / "auth.json"
    state_file.write_text("{}", encoding="utf-8")
    manager = BrowserManager(UIConfig(storage_state_path=state_file))

    assert manager.context_options()["storage_state"] == str(state_file)
    assert "storage_state" not in manager.context_options(restore_auth=False)


def test_context_options_video_and_overrides(tmp_path):
    manager = BrowserManager(UIConfig(storage_state_path=tmp_path / "auth.json"))

    options = manager.context_options(record_video_dir=tmp_path / "videos", locale="en-US")

    assert options["record_video_dir"] == str(tmp_path / "videos")
    assert options["record_video_size"] == {"width": 1280, "height": 720}
    assert options["locale"] == "en-US"


def test_launch_options_per_browser():
    chromium = BrowserManager(UIConfig(headless=False, slow_mo=100)).launch_options()
    assert chromium["headless"] is False
    assert chromium["slow_mo"] == 100
    assert "--ignore-certificate-errors" in chromium["args"]

    firefox = BrowserManager(UIConfig(browser="firefox")).launch_options()
    assert "args" not in firefox


async def test_ensure_auth_state_logs_in_and_saves(monkeypatch, tmp_path):
    state_file = tmp_path / "auth" / "auth.json"
    manager = BrowserManager(UIConfig(storage_state_path=state_file))
    context = DummyContext()
    restore_flags = []

    async def fake_new_context(restore_auth=True, **kwargs):
        restore_flags.append(restore_auth)
        return context

    monkeypatch.setattr(manager, "new_context", fake_new_context)
    logged_in = []

    async def login(page):
        logged_in.append(page)

    path = await ensure_auth_state(manager, login)

    assert path == state_file
    assert json.loads(state_file.read_text(encoding="utf-8"))["cookies"]
    assert logged_in == context.pages
    assert restore_flags == [False]


async def test_ensure_auth_state_reuses_existing_file(monkeypatch, tmp_path):
    state_file = tmp_path / "auth.json"
    state_file.write_text('{"cookies": [], "origins": []}', encoding="utf-8")
    manager = BrowserManager(UIConfig(storage_state_path=state_file))

    async def fail_new_context(**kwargs):
        raise AssertionError("login should not run when state exists")

    monkeypatch.setattr(manager, "new_context", fail_new_context)

    async def login(page):
        raise AssertionError("login should not run when state exists")

    assert await ensure_auth_state(manager, login) == state_file


async def test_ensure_auth_state_force_relogs(monkeypatch, tmp_path):
    state_file = tmp_path / "auth.json"
    state_file.write_text('{"cookies": [], "origins": []}', encoding="utf-8")
    manager = BrowserManager(UIConfig(storage_state_path=state_file))
    context = DummyContext()

    async def fake_new_context(restore_auth=True, **kwargs):
        return context

    monkeypatch.setattr(manager, "new_context", fake_new_context)

    async def login(page):
        pass

    await ensure_auth_state(manager, login, force=True)

    assert json.loads(state_file.read_text(encoding="utf-8"))["cookies"]
    assert len(context.pages) == 1
