from datetime import date, datetime

from dazibao.services.polling.variables import NOT_AVAILABLE, UNKNOWN_VARIABLE, VariableResolver


def fixed_clock():
    return datetime(2024, 3, 9, 7, 5, 3)


def test_date_is_today():
    assert VariableResolver().resolve("date") == date.today().strftime("%Y-%m-%d")


def test_clock_variables_use_injected_clock():
    resolver = VariableResolver(now=fixed_clock)
    assert resolver.resolve("time") == "07:05:03"
    assert resolver.resolve("date") == "2024-03-09"
    assert resolver.resolve("year") == "2024"
    assert resolver.resolve("month") == "03"
    assert resolver.resolve("day") == "09"
    assert resolver.resolve("dayname") == "Saturday"
    assert resolver.resolve("hours") == "07"
    assert resolver.resolve("minutes") == "05"
    assert resolver.resolve("seconds") == "03"


def test_unknown_variable_returns_placeholder():
    assert VariableResolver().resolve("nope") == UNKNOWN_VARIABLE


def test_app_variables():
    resolver = VariableResolver(app_name="Board", app_version="9.9")
    assert resolver.resolve("app_name") == "Board"
    assert resolver.resolve("app_version") == "9.9"


def test_getter_failure_becomes_error_text(monkeypatch):
    def boom():
        raise OSError("no user")

    monkeypatch.setattr("dazibao.services.polling.variables.getpass.getuser", boom)
    assert VariableResolver().resolve("username") == "Error: no user"


def test_ip_address_skips_loopback(monkeypatch):
    import socket
    from types import SimpleNamespace

    addrs = {
        "lo": [SimpleNamespace(family=socket.AF_INET, address="127.0.0.1")],
        "eth0": [
            SimpleNamespace(family=socket.AF_INET6, address="fe80::1"),
            SimpleNamespace(family=socket.AF_INET, address="192.168.1.20"),
        ],
    }
    monkeypatch.setattr("dazibao.services.polling.variables.psutil.net_if_addrs", lambda: addrs)
    assert VariableResolver().resolve("ip_address") == "192.168.1.20"


def test_ip_address_not_available(monkeypatch):
    monkeypatch.setattr("dazibao.services.polling.variables.psutil.net_if_addrs", lambda: {})
    assert VariableResolver().resolve("ip_address") == NOT_AVAILABLE


def test_all_names_resolve_to_strings():
    resolver = VariableResolver()
    for name in resolver.names:
        assert isinstance(resolver.resolve(name), str)
