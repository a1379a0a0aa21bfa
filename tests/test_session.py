"""Tests for cookie session state."""

from xhs_client.session import Session, parse_cookie


class TestParseCookie:
    """Tests for parse_cookie function."""

    def test_basic_pairs(self):
        """Parse ; separated pairs."""
        assert parse_cookie("a1=abc; webId=123; web_session=xyz") == {
            "a1": "abc",
            "webId": "123",
            "web_session": "xyz",
        }

    def test_value_containing_equals(self):
        """Only the first = separates key and value."""
        assert parse_cookie("token=a=b==") == {"token": "a=b=="}

    def test_no_space_separator(self):
        """Pairs separated by ; without a space are parsed."""
        assert parse_cookie("a=1;b=2") == {"a": "1", "b": "2"}

    def test_malformed_pairs_skipped(self):
        """Malformed fragments are skipped, not errors."""
        assert parse_cookie("garbage; =nokey; a1=ok;;") == {"a1": "ok"}

    def test_empty(self):
        """Empty or missing cookie gives no fields."""
        assert parse_cookie("") == {}
        assert parse_cookie(None) == {}


class TestSession:
    """Tests for Session."""

    def test_initial_cookie(self):
        """Cookie given at construction is returned."""
        session = Session("a1=abc")
        assert session.get_cookie() == "a1=abc"
        assert session.get_cookie_field("a1") == "abc"

    def test_unset(self):
        """No cookie means absent fields and an empty snapshot."""
        session = Session()
        assert session.get_cookie() is None
        assert session.get_cookie_field("a1") is None
        assert session.snapshot() == ""

    def test_set_cookie_replaces(self):
        """set_cookie replaces the cookie and derived fields follow."""
        session = Session("a1=old; x=1")
        session.set_cookie("a1=new")

        assert session.get_cookie() == "a1=new"
        assert session.get_cookie_field("a1") == "new"
        assert session.get_cookie_field("x") is None
        assert session.cookie_dict == {"a1": "new"}

    def test_set_empty_cookie_clears(self):
        """Setting an empty cookie clears the session."""
        session = Session("a1=abc")
        session.set_cookie("")
        assert session.get_cookie() is None

    def test_malformed_cookie_is_not_an_error(self):
        """Malformed cookie yields absent fields."""
        session = Session("not a cookie")
        assert session.get_cookie_field("a1") is None
        assert session.snapshot() == "not a cookie"
