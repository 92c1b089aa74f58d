from argos.services.sanitize import sanitize


def test_escapes_reserved_characters():
    assert sanitize("<a href=\"x\">'&'</a>") == "&lt;a href=&quot;x&quot;&gt;&#39;&amp;&#39;&lt;/a&gt;"


def test_plain_text_unchanged():
    for s in ["", "salmon pen 4", "2026-02-06", "ñandú 100%"]:
        assert sanitize(s) == s


def test_not_idempotent_on_ampersand():
    once = sanitize("&")
    assert once == "&amp;"
    assert sanitize(once) == "&amp;amp;"


def test_non_string_passthrough():
    assert sanitize(None) is None
    assert sanitize(5) == 5
