import json

import pytest
import responses

from qnsdk import client
from qnsdk.auth.context import with_credentials_type
from qnsdk.auth.credentials import Credentials, TokenType
from qnsdk.client import Client, ErrorInfo, JsonDecodeError, decode_json_from_data

XML_BODY = """<?xml version="1.0" encoding="UTF-8"?>
<Error>
  <Code>NoSuchKey</Code>
  <Message>The resource you requested does not exist</Message>
  <Resource>/mybucket/myfoto.jpg</Resource>
  <RequestId>4442587FB7D0A2F9</RequestId>
</Error>"""


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def cred():
    return Credentials("ak", "secret")


def test_json_decode_error_includes_body():
    with pytest.raises(JsonDecodeError) as info:
        decode_json_from_data(XML_BODY.encode())
    assert str(info.value).endswith(": " + XML_BODY)
    assert info.value.data == XML_BODY.encode()


def test_decode_json_valid():
    assert decode_json_from_data('{"a": [1, 2]}') == {"a": [1, 2]}


def test_error_detail_omits_empty_fields():
    err = ErrorInfo(code=612, err="no such file or directory", reqid="abc")
    assert err.error_detail() == '{"error":"no such file or directory","reqid":"abc","code":612}'
    assert str(err) == "no such file or directory"


def test_rpc_error_and_http_code():
    err = ErrorInfo(code=400, err="bad", key="k", errno=7)
    assert err.rpc_error() == (400, 7, "k", "bad")
    assert err.http_code == 400


def test_form_get_appends_sorted_query(mocked):
    mocked.add(responses.GET, "http://api.example.com/list", json={"ok": True})
    ret = Client().call_with_form(
        None, "GET", "http://api.example.com/list", None, {"b": ["x y"], "a": "1"}
    )
    assert ret == {"ok": True}
    assert mocked.calls[0].request.url == "http://api.example.com/list?a=1&b=x+y"


def test_form_post_signed_with_qbox(mocked, cred):
    mocked.add(responses.POST, "http://rs.example.com/stat", json={"hash": "h"})
    ctx = with_credentials_type(None, cred, TokenType.QBOX)
    ret = Client().call_with_form(
        ctx, "POST", "http://rs.example.com/stat", None, {"b": ["2"], "a": ["1"]}
    )
    sent = mocked.calls[0].request
    assert ret == {"hash": "h"}
    assert sent.body == b"a=1&b=2"
    assert sent.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert sent.headers["Authorization"] == "QBox " + cred.sign(b"/stat\na=1&b=2")


def test_credentialed_json_uses_qiniu_token(mocked, cred):
    mocked.add(responses.POST, "http://rs.example.com/v1/op", json={})
    ret = Client().credentialed_call_with_json(
        None, cred, TokenType.QINIU, "POST", "http://rs.example.com/v1/op", None, {"x": 1}
    )
    sent = mocked.calls[0].request
    assert ret == {}
    assert json.loads(sent.body) == {"x": 1}
    assert sent.headers["Authorization"].startswith("Qiniu ak:")


def test_user_agent_default_and_explicit(mocked):
    mocked.add(responses.GET, "http://api.example.com/a", json={"n": 1})
    mocked.add(responses.GET, "http://api.example.com/b", json={"n": 2})
    c = Client()
    first = c.call(None, "GET", "http://api.example.com/a", None)
    second = c.call(None, "GET", "http://api.example.com/b", {"User-Agent": "custom"})
    assert first == {"n": 1}
    assert second == {"n": 2}
    assert mocked.calls[0].request.headers["User-Agent"] == client.user_agent
    assert mocked.calls[1].request.headers["User-Agent"] == "custom"


def test_json_error_response_raises_error_info(mocked):
    mocked.add(
        responses.POST,
        "http://api.example.com/op",
        json={"error": "file exists", "key": "k1", "errno": 3},
        status=614,
        headers={"X-Reqid": "req-1"},
    )
    with pytest.raises(ErrorInfo) as info:
        Client().call_with_json(None, "POST", "http://api.example.com/op", None, {})
    err = info.value
    assert (err.code, err.err, err.key, err.errno, err.reqid) == (614, "file exists", "k1", 3, "req-1")


def test_text_error_response_strips_newline(mocked):
    mocked.add(
        responses.GET, "http://api.example.com/op", body="oops\n\n", status=500,
        content_type="text/plain",
    )
    with pytest.raises(ErrorInfo) as info:
        Client().call(None, "GET", "http://api.example.com/op", None)
    assert info.value.err == "oops"
    assert info.value.http_code == 500


def test_json_error_without_error_field_keeps_body(mocked):
    mocked.add(responses.GET, "http://api.example.com/op", json={"msg": "m"}, status=400)
    with pytest.raises(ErrorInfo) as info:
        Client().call(None, "GET", "http://api.example.com/op", None)
    assert json.loads(info.value.err) == {"msg": "m"}


def test_empty_success_body_returns_none(mocked):
    mocked.add(responses.DELETE, "http://api.example.com/item", body="")
    assert Client().call(None, "DELETE", "http://api.example.com/item", None) is None


def test_body_length_mismatch_raises():
    with pytest.raises(ValueError, match="ContentLength=10"):
        Client().call_with(None, "POST", "http://api.example.com/x", None, b"abc", 10)


def test_set_app_name(monkeypatch):
    monkeypatch.setattr(client, "user_agent", client.user_agent)
    client.set_app_name("demo-app")
    assert client.user_agent.startswith("QiniuPython/7.9.8 (")
    assert "; demo-app) " in client.user_agent


def test_turn_on_debug_logs(mocked, monkeypatch, capsys):
    monkeypatch.setattr(client, "debug_mode", False)
    client.turn_on_debug()
    assert client.debug_mode is True
    mocked.add(responses.GET, "http://api.example.com/dbg", json={"v": 1})
    assert Client().call(None, "GET", "http://api.example.com/dbg", None) == {"v": 1}
    out = capsys.readouterr().out
    assert "[D] " in out
    assert "GET http://api.example.com/dbg HTTP/1.1" in out