import pytest

from smallproxy.config import Config, HttpHeader


def test_anonymous_disabled_by_default():
    config = Config()
    assert config.is_anonymous_enabled() is False


def test_adding_anonymous_header_enables_mode():
    config = Config()
    config.add_anonymous_header("Content-Length")
    assert config.is_anonymous_enabled() is True
    assert "content-length" in config.anonymous_map
    assert "Content-Type" not in config.anonymous_map


def test_anonymous_header_added_twice_counts_once():
    config = Config()
    config.add_anonymous_header("Content-Type")
    config.add_anonymous_header("CONTENT-TYPE")
    assert len(config.anonymous_map) == 1


def test_errorpage_lookup():
    config = Config()
    config.add_errorpage("/pages/404.html", 404)
    assert config.errorpage_for(404) == "/pages/404.html"


def test_errorpage_falls_back_to_default():
    config = Config(errorpage_undef="/pages/default.html")
    assert config.errorpage_for(500) == "/pages/default.html"
    config.add_errorpage("/pages/404.html", 404)
    assert config.errorpage_for(500) == "/pages/default.html"


def test_errorpage_without_any_pages_is_none():
    config = Config()
    assert config.errorpage_for(403) is None


def test_duplicate_errorpage_rejected():
    config = Config()
    config.add_errorpage("/pages/a.html", 404)
    with pytest.raises(ValueError):
        config.add_errorpage("/pages/b.html", 404)
    assert config.errorpage_for(404) == "/pages/a.html"


@pytest.mark.parametrize("errornum", [99, 1000, -1])
def test_errorpage_for_out_of_range(errornum):
    with pytest.raises(ValueError):
        Config().errorpage_for(errornum)


def test_default_lists_allow_everything():
    config = Config()
    assert config.access_list.check("192.0.2.1") is True
    assert config.connect_ports.is_allowed(443) is True
    assert config.basicauth_list.check("anything") is False


def test_add_headers_hold_pairs():
    config = Config()
    config.add_headers.append(HttpHeader("X-Test", "yes"))
    assert config.add_headers == [HttpHeader(name="X-Test", value="yes")]


def test_configs_do_not_share_lists():
    first, second = Config(), Config()
    first.listen_addrs.append("127.0.0.1")
    assert second.listen_addrs == []