import pytest

from visualino.bridge.blockly_bridge import BlocklyBridge
from visualino.controllers.document_controller import DocumentController
from visualino.errors import BridgeError


@pytest.fixture
def controller(fake_bridge, prompter, notifier):
    return DocumentController(fake_bridge, prompter, notifier)


def test_open_escapes_content_for_the_editor(tmp_path, controller, fake_bridge):
    path = tmp_path / "x.xml"
    path.write_bytes(b'a\\"b\\\\c')

    assert controller.action_open(str(path))

    assert fake_bridge.calls == [("load_workspace", ('a\\\\\\"b\\\\\\\\c',))]
    assert controller.current_path == str(path)


def test_open_prompts_when_no_path_given(tmp_path, controller, prompter, fake_bridge):
    path = tmp_path / "blink.xml"
    path.write_text("<xml></xml>", encoding="utf-8")
    prompter.open_result = str(path)

    controller.action_open()

    assert prompter.open_prompts == 1
    assert fake_bridge.methods() == ["load_workspace"]
    assert controller.current_path == str(path)


def test_open_cancelled_is_a_no_op(controller, prompter, fake_bridge, notifier):
    assert controller.action_open() is False
    assert fake_bridge.calls == []
    assert notifier.errors == []
    assert controller.current_path is None


def test_open_unreadable_file_is_reported(tmp_path, controller, fake_bridge, notifier):
    missing = tmp_path / "missing.xml"

    assert controller.action_open(str(missing)) is False

    assert fake_bridge.calls == []
    assert notifier.errors == [("Open File", f"Couldn't open file to read content: {missing}.")]
    assert controller.current_path is None


def test_open_does_not_bind_when_the_editor_rejects_the_document(tmp_path, controller, fake_bridge, notifier):
    path = tmp_path / "broken.xml"
    path.write_text("<xml", encoding="utf-8")
    fake_bridge.error = BridgeError("bad xml", method="loadWorkspace")

    controller.action_open(str(path))

    assert controller.current_path is None
    assert notifier.errors[0][0] == "Open File"


def test_open_binds_only_after_the_editor_confirms(tmp_path, controller, fake_bridge):
    path = tmp_path / "later.xml"
    path.write_text("<xml></xml>", encoding="utf-8")
    fake_bridge.deferred = True

    controller.action_open(str(path))
    assert controller.current_path is None

    fake_bridge.flush()
    assert controller.current_path == str(path)


def test_startup_open_survives_the_first_page_load(qapp, tmp_path, prompter, notifier):
    path = tmp_path / "startup.xml"
    path.write_text("<xml></xml>", encoding="utf-8")
    bridge = BlocklyBridge()
    posted = []
    bridge.requestPosted.connect(lambda rid, method, _args: posted.append((rid, method)))
    controller = DocumentController(bridge, prompter, notifier)

    controller.action_open(str(path))
    bridge.reset()
    bridge.pageReady()
    bridge.respond(1, True, "")

    assert posted == [(1, "loadWorkspace")]
    assert notifier.errors == []
    assert controller.current_path == str(path)


def test_first_save_prompts_writes_and_binds(tmp_path, controller, prompter, fake_bridge, notifier):
    target = tmp_path / "sketch.xml"
    prompter.save_result = str(target)
    fake_bridge.xml = "<xml><block type=\"led\"/></xml>"

    controller.action_save()

    assert target.read_text(encoding="utf-8") == fake_bridge.xml
    assert controller.current_path == str(target)
    assert notifier.statuses == [("Done saving.", 2000)]


def test_save_serializes_before_prompting(controller, prompter, fake_bridge):
    controller.action_save()
    assert fake_bridge.methods() == ["serialize_workspace"]
    assert prompter.save_prompts == 1


def test_cancelled_save_leaves_identity_unset_and_writes_nothing(tmp_path, controller, prompter, notifier):
    controller.action_save()

    assert controller.current_path is None
    assert list(tmp_path.iterdir()) == []
    assert notifier.statuses == []


def test_later_saves_reuse_the_bound_path(tmp_path, controller, prompter, fake_bridge):
    target = tmp_path / "sketch.xml"
    prompter.save_result = str(target)
    controller.action_save()

    fake_bridge.xml = "<xml>v2</xml>"
    prompter.save_result = str(tmp_path / "other.xml")
    controller.action_save()

    assert prompter.save_prompts == 1
    assert target.read_text(encoding="utf-8") == "<xml>v2</xml>"
    assert not (tmp_path / "other.xml").exists()


def test_new_clears_identity_and_next_save_prompts(tmp_path, controller, prompter, fake_bridge):
    prompter.save_result = str(tmp_path / "first.xml")
    controller.action_save()
    assert controller.current_path is not None

    controller.action_new()
    assert controller.current_path is None
    assert fake_bridge.methods()[-1] == "clear_workspace"

    prompter.save_result = None
    controller.action_save()
    assert prompter.save_prompts == 2
    assert controller.current_path is None


def test_save_write_failure_is_reported(tmp_path, controller, prompter, notifier):
    target = tmp_path / "no-such-dir" / "sketch.xml"
    prompter.save_result = str(target)

    controller.action_save()

    assert notifier.errors == [("Save File", f"Couldn't open file to save content: {target}.")]
    assert controller.current_path is None
    assert notifier.statuses == []


def test_serialize_failure_is_reported_without_prompting(controller, prompter, fake_bridge, notifier):
    fake_bridge.error = BridgeError("timeout", method="serializeWorkspace")

    controller.action_save()

    assert prompter.save_prompts == 0
    assert notifier.errors[0][0] == "Save File"
