# smallproxy

The core pieces of a lightweight HTTP proxy, written as plain Python
objects with no third-party dependencies:

- `smallproxy.htab.HashTable`: a case-insensitive open-addressing hash table.
- `smallproxy.encoding`: base64 encoding (`base64_encode`, `encoded_length`).
- `smallproxy.basicauth`: builds and checks `Basic` authorization tokens
  (`basicauth_string`, `BasicAuthList`).
- `smallproxy.hostspec`: parses host specifications such as `10.0.0.0/8`,
  `::1/128`, `192.168.1.0/255.255.255.0` or `.example.com`, and matches
  addresses against them (`parse_hostspec`, `HostSpec.match`).
- `smallproxy.connect_ports.ConnectPorts`: the ports allowed for `CONNECT`.
- `smallproxy.acl.AccessList`: ordered allow/deny rules for clients.
- `smallproxy.anonymous.AnonymousHeaders`: the headers let through in anonymous mode.
- `smallproxy.url_filter.Filter`: host and URL filtering driven by a pattern file.
- `smallproxy.buffer.LineBuffer`: a bounded queue of byte chunks between sockets.
- `smallproxy.http_message.HttpMessage`: builds and sends simple HTTP responses.
- `smallproxy.proxylog.ProxyLogger`: level-filtered logging to a file or syslog.
  Messages logged before setup are stored and sent once setup is done.
- `smallproxy.loop_guard.LoopRecords`: detects connections that loop back to the proxy.
- `smallproxy.directives.find_directive`: looks up configuration directive names.
- `smallproxy.config.Config`: the proxy configuration.
- `smallproxy.conns.Connection`: the state of a single client connection.
- `smallproxy.html_error`: error pages with `{variable}` substitution.

## Installation

```
pip install .
```

## Examples

Check credentials sent by a client:

```python
from smallproxy.basicauth import BasicAuthList

auth = BasicAuthList()
auth.add("user", "password")
auth.check("dXNlcjpwYXNzd29yZA==")   # True
```

Allow a local network and deny everyone else:

```python
from smallproxy.acl import AccessList, Access

acl = AccessList()
acl.insert("192.168.0.0/16", Access.ALLOW)
acl.check("192.168.3.4")   # True
acl.check("10.1.2.3")      # False
```

Build a response:

```python
from smallproxy.http_message import HttpMessage

msg = HttpMessage(200, "OK")
msg.add_headers(["Content-Type: text/plain"])
msg.set_body(b"hello")
raw = msg.render()
```

## Running the tests

```
pip install .[test]
pytest
```