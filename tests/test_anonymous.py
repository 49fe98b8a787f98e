from smallproxy.anonymous import AnonymousHeaders


def test_empty_set_contains_nothing():
    headers = AnonymousHeaders()
    assert len(headers) == 0
    assert "Host" not in headers


def test_insert_then_lookup_ignores_case():
    headers = AnonymousHeaders()
    headers.insert("Content-Length")
    assert "content-length" in headers
    assert "CONTENT-LENGTH" in headers
    assert "Content-Type" not in headers


def test_duplicate_insert_is_ignored():
    headers = AnonymousHeaders()
    headers.insert("Content-Type")
    headers.insert("content-type")
    headers.insert("User-Agent")
    assert len(headers) == 2


def test_non_string_is_not_contained():
    headers = AnonymousHeaders()
    headers.insert("Host")
    assert 42 not in headers