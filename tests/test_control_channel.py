import pytest

from gamecenter.input import ContextController, ControlChannel
from gamecenter.input.channel import STATUS_ERROR, STATUS_NOT_IMPLEMENTED, STATUS_OK


def make_channel(registry, probe, sink) -> ControlChannel:
    return ControlChannel(ContextController(registry, probe, sink))


def test_default_methods(registry, sink, supported):
    channel = make_channel(registry, supported, sink)
    assert channel.methods() == ["clear", "initialize", "isSupported", "setContext"]

    assert channel.invoke("isSupported").value is True
    assert channel.invoke("initialize").ok
    resp = channel.invoke("setContext", {"context": "puzzle"})
    assert resp.status == STATUS_OK
    assert resp.value is True
    assert channel.controller.active_context.name == "puzzle"
    assert channel.invoke("clear").ok
    assert channel.controller.active_context is None


def test_set_context_argument_shapes(registry, sink, supported):
    channel = make_channel(registry, supported, sink)
    channel.invoke("initialize")

    channel.invoke("setContext", {"contextName": "board"})
    assert channel.controller.active_context.name == "board"
    channel.invoke("setContext", "action")
    assert channel.controller.active_context.name == "action"
    # Missing or malformed argument resolves to the fallback context
    channel.invoke("setContext", {"context": 42})
    assert channel.controller.active_context.name == "menu"


def test_unsupported_host_reports_false_and_succeeds(registry, sink, unsupported):
    channel = make_channel(registry, unsupported, sink)
    assert channel.invoke("isSupported").value is False
    for method, args in (("initialize", None), ("setContext", {"context": "board"}), ("clear", None)):
        assert channel.invoke(method, args).ok
    assert sink.calls == []


def test_unknown_method_is_not_implemented(registry, sink, supported):
    channel = make_channel(registry, supported, sink)
    resp = channel.invoke("vibrate")
    assert resp.status == STATUS_NOT_IMPLEMENTED
    assert not resp.ok
    assert "vibrate" in resp.message


@pytest.mark.parametrize("method", [["setContext"], None, 42])
def test_non_string_method_is_not_implemented(registry, sink, supported, method):
    channel = make_channel(registry, supported, sink)
    resp = channel.invoke(method)
    assert resp.status == STATUS_NOT_IMPLEMENTED
    assert repr(method) in resp.message
    assert sink.calls == []


def test_register_extends_the_table(registry, sink, supported):
    channel = make_channel(registry, supported, sink)
    channel.register("activeContext", lambda _args: (
        channel.controller.active_context.name if channel.controller.active_context else None
    ))
    channel.invoke("initialize")
    channel.invoke("setContext", {"context": "board"})
    assert channel.invoke("activeContext").value == "board"


def test_handler_exceptions_become_error_responses(registry, sink, supported):
    channel = make_channel(registry, supported, sink)

    def boom(_args):
        raise RuntimeError("kaput")

    channel.register("boom", boom)
    resp = channel.invoke("boom")
    assert resp.status == STATUS_ERROR
    assert "kaput" in resp.message
