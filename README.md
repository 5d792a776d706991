# qnsdk

A Python client library for an object storage and CDN service. It provides:

- request signing with an access key / secret key pair (`qnsdk.auth`),
- an HTTP client that signs requests and turns error responses into exceptions
  (`qnsdk.client`),
- CDN helpers: timestamp anti-leech URLs, cache refresh, prefetch, bandwidth and
  flux statistics, and log listings (`qnsdk.cdn`),
- a device-linking manager for registering devices, querying their history and
  recordings, and issuing device access tokens (`qnsdk.linking`),
- a small leveled logger used for debug output (`qnsdk.log`).

The only runtime dependency is `requests`. The `test` extra adds `pytest` and
`responses` for the test suite.

## Signing

```python
from qnsdk.auth.credentials import Credentials, Request, TokenType

mac = Credentials("placeholder", "secret")

# HMAC-SHA1 of the data, returned as "<access key>:<url-safe base64 signature>"
mac.sign(b"hello")

# Signs the url-safe base64 of the data and appends the encoded data,
# the shape used for upload tokens
mac.sign_with_data(b'{"scope":"my-bucket","deadline":1700000000}')
```

`Request` describes an outgoing request (method, URL, headers, body, host).
Header names are canonicalised, so `req.header("content-type")` and
`req.header("Content-Type")` read the same value; `set_header` replaces a header
and `add_header` appends a value.

- `sign_request(req)` signs the path, query and, for
  `application/x-www-form-urlencoded` bodies, the body.
- `sign_request_v2(req)` also covers the method, host, content type and sorted
  `X-Qiniu-*` headers, and signs form or JSON bodies. If the request has no
  `Content-Type`, it is set to `application/x-www-form-urlencoded`.
- `add_token(TokenType.QINIU, req)` or `add_token(TokenType.QBOX, req)` adds the
  matching `Authorization` header.
- `verify_callback(req)` returns whether an upload callback carries a valid
  `QBox` signature for your keys.

`collect_data` and `collect_data_v2` return the exact bytes each signature
covers. The helpers in `qnsdk.auth.qbox` (`new_mac`, `sign`, `sign_with_data`,
`verify_callback`) offer the same operations as plain functions.

## HTTP client

`qnsdk.client.Client` wraps a `requests.Session` (a new one if none is given).
Credentials travel in an immutable `RequestContext`, built with
`qnsdk.auth.context.with_credentials` or `with_credentials_type`;
`credentials_from_context` reads them back, with the token type defaulting to
QBox. The `credentialed_call*` methods build the context for you.

- `call`, `call_with`, `call_with_form` and `call_with_json` send a request and
  return the decoded JSON body of a 2xx response, or `None` for an empty body.
- The `do_request*` methods return the raw `requests.Response`.
- Form data sent with `GET`, `HEAD` or `DELETE` goes into the query string;
  other methods send it as the body.

Responses outside the 2xx range raise `ErrorInfo`, which carries the HTTP code
(`code`, also `http_code`), the request id (`reqid`) and the service's error
message, key and errno. `error_detail()` returns them as compact JSON and
`rpc_error()` as a tuple. Bodies that are not valid JSON raise
`JsonDecodeError`, whose message includes the offending body.

`turn_on_debug()` makes the client log every request and response through
`qnsdk.log` and returns the previous setting. `set_app_name(name)` puts your
application's name into the `User-Agent` of later requests.

## CDN

```python
from qnsdk.cdn.anti_leech import create_timestamp_antileech_url
from qnsdk.cdn.api import CdnManager

url = create_timestamp_antileech_url(
    "http://www.example.com/testfile.jpg", "secret", 3600
)

cdn = CdnManager(mac)
cdn.refresh_urls(["http://www.example.com/index.html"])   # at most 100 URLs
cdn.refresh_dirs(["http://www.example.com/static/"])      # at most 10 dirs
cdn.prefetch_urls(["http://www.example.com/logo.png"])    # at most 100 URLs
cdn.get_bandwidth_data("2024-01-01", "2024-01-02", "day", ["www.example.com"])
cdn.get_flux_data("2024-01-01", "2024-01-02", "hour", ["www.example.com"])
cdn.get_cdn_log_list("2024-01-01", ["www.example.com"])
```

The anti-leech URL gets `sign` and `t` query parameters, `t` being the expiry
time in hexadecimal. `CdnManager` takes an optional `host` to use instead of
the default service address. Results come back as dataclasses
(`TrafficResp`, `RefreshResp`, `PrefetchResp`, `ListLogResult`). Going over a
count limit raises `ValueError` before any request is sent;
`get_cdn_log_list` raises `RuntimeError` when the request fails, the reply
cannot be decoded or the service reports an error.

## Device linking

```python
import requests

from qnsdk.linking.manager import Manager
from qnsdk.linking.models import Device, PatchOperation

linking = Manager(mac, requests.Session())

linking.add_device("my-app", Device(device="camera-01", segment_expire_days=7))
linking.update_device(
    "my-app", "camera-01",
    [PatchOperation(op="replace", key="segmentExpireDays", value=30)],
)
devices, marker = linking.list_device("my-app", "camera-", "", 100, False, False, 0, "")

vod = linking.vod_token("my-app", "camera-01", 1700000000)
```

Every manager request is signed with a `Qiniu` token. Besides device
management (`add_device`, `query_device`, `update_device`, `list_device`,
`delete_device`) the manager covers online history
(`list_device_history_activity`), recorded segments (`segments`), saving a clip
(`saveas`), remote procedure calls to a device (`rpc`), live streaming
(`start_live`) and device statistics (`stat`). `token`, `vod_token` and
`status_token` issue device access tokens. Request and reply types live in
`qnsdk.linking.models`.

## Logging

`qnsdk.log.Logger(out, prefix, level)` writes timestamped, prefixed lines at or
above a `LogLevel` (`DEBUG`, `INFO`, `WARN`); with `out=None` it writes to
standard output. The module-level `debug`, `info` and `warn` functions use
loggers with the prefixes `[D] `, `[I] ` and `[W] `.

## Errors

Library-level errors are `qnsdk.errors.QError`, created with
`new_error(code, message)`; their string form is `"<code>: <message>"`.

## What this package does not do

It does not upload or download objects, manage buckets, build upload policies
or run data-processing jobs. It signs data and requests and talks to the CDN
and device-linking APIs; anything else has to be built on `Credentials` and
`Client`. There is no command-line tool.