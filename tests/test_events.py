from wabot.bus.events import (
    QUOTED_EMPTY,
    ContextInfo,
    DocumentMessage,
    ImageMessage,
    InboundMessage,
    TextMessage,
    VideoMessage,
)


def _msg(*content):
    return InboundMessage(chat_id="g@g.us", sender_id="1@s.whatsapp.net", content=list(content))


def test_text_prefers_text_shape_then_caption():
    msg = _msg(ImageMessage(caption="look at this"), TextMessage(text="hi"))
    assert msg.text == "hi"
    assert _msg(VideoMessage(caption="clip")).text == "clip"
    assert _msg(ImageMessage()).text == ""


def test_mentions_collected_from_every_shape():
    msg = _msg(
        TextMessage(text="a", context=ContextInfo(mentioned_ids=["1@s"])),
        ImageMessage(caption="b", context=ContextInfo(mentioned_ids=["2@s"])),
        DocumentMessage(caption="c", context=ContextInfo(mentioned_ids=["3@s"])),
    )
    assert msg.mentioned_ids() == ["1@s", "2@s", "3@s"]


def test_quoted_authors_skip_shapes_without_quote():
    msg = _msg(
        TextMessage(text="a", context=ContextInfo(quoted_author="x@s")),
        VideoMessage(caption="b", context=ContextInfo()),
    )
    assert msg.quoted_authors() == ["x@s"]


def test_quoted_text_placeholders():
    def quoting(shape):
        return _msg(TextMessage(text="!explain", context=ContextInfo(quoted=shape)))

    assert quoting(TextMessage(text="original")).quoted_text() == "original"
    assert quoting(ImageMessage()).quoted_text() == "[image message]"
    assert quoting(ImageMessage(caption="cap")).quoted_text() == "cap"
    assert quoting(VideoMessage()).quoted_text() == "[video message]"
    assert quoting(DocumentMessage(title="report.pdf")).quoted_text() == "[Document: report.pdf]"
    assert quoting(DocumentMessage()).quoted_text() == "[document message]"
    assert quoting(TextMessage(text="")).quoted_text() == QUOTED_EMPTY


def test_quoted_text_none_without_quote():
    assert _msg(TextMessage(text="plain")).quoted_text() is None


def test_session_key():
    group = InboundMessage(chat_id="g@g.us", sender_id="1@s", is_group=True)
    private = InboundMessage(chat_id="1@s", sender_id="1@s")
    assert group.session_key == "g@g.us"
    assert private.session_key == "1@s"
