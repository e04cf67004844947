from wabot.utils.helpers import jid_user, normalize_jid, safe_filename, truncate


def test_truncate_long_text_to_limit_plus_marker():
    text = "x" * 10_000
    result = truncate(text, 500)
    assert result == "x" * 500 + "..."
    assert len(result) == 503


def test_truncate_custom_marker():
    result = truncate("a" * 5000, 4000, "\n\n... (response truncated)")
    assert result.startswith("a" * 4000)
    assert result.endswith("\n\n... (response truncated)")


def test_truncate_short_text_unchanged():
    assert truncate("hello", 500) == "hello"
    assert truncate("x" * 500, 500) == "x" * 500


def test_normalize_jid_strips_device_suffix():
    assert normalize_jid("123:4@s.whatsapp.net") == "123@s.whatsapp.net"
    assert normalize_jid("123@s.whatsapp.net") == "123@s.whatsapp.net"
    assert normalize_jid("") == ""


def test_jid_user():
    assert jid_user("5511999999999:12@s.whatsapp.net") == "5511999999999"


def test_safe_filename():
    assert safe_filename('a<b>c:d"e') == "a_b_c_d_e"
    assert safe_filename("") == "_"
