import asyncio

from conftest import GROUP, FakeProvider, make_bot, make_msg

from wabot.bus.events import ImageMessage, TextMessage
from wabot.commands import build_default_router
from wabot.commands.generative import NOT_CONFIGURED_MSG


def _run(bot, text, **msg_kwargs):
    router = build_default_router()
    verb, args = router.parse(text)
    asyncio.run(router.dispatch(verb, args, make_msg(text, **msg_kwargs), bot))


def test_not_configured(tmp_path):
    bot = make_bot(tmp_path, provider=None)
    for text in ("!joke", "!pickup @x", "!story", "!explain"):
        _run(bot, text)
    assert bot.transport.texts == [NOT_CONFIGURED_MSG] * 4
    assert bot.transport.presence == []


def test_joke_prompt_contains_every_previous_joke(tmp_path):
    provider = FakeProvider("Why did the duck cross the road?")
    bot = make_bot(tmp_path, provider)
    previous = [f"old joke number {i}" for i in range(7)]
    for joke in previous:
        bot.history.append_joke(joke)

    _run(bot, "!joke")

    [prompt] = provider.prompts
    for i, joke in enumerate(previous, 1):
        assert f"{i}. {joke}" in prompt
    assert "Do NOT repeat" in prompt
    assert bot.transport.texts == ["😄 *Joke:*\n\nWhy did the duck cross the road?"]
    assert bot.history.load_recent_jokes(50)[-1].text == "Why did the duck cross the road?"
    assert bot.transport.presence == [(GROUP, "composing"), (GROUP, "paused")]


def test_first_joke_has_no_history_block(tmp_path):
    provider = FakeProvider("ha")
    bot = make_bot(tmp_path, provider)
    _run(bot, "!piada")
    assert "Do NOT repeat" not in provider.prompts[0]


def test_joke_failure_persists_nothing(tmp_path):
    bot = make_bot(tmp_path, FakeProvider(fail=True))

    _run(bot, "!joke")

    assert bot.transport.texts == ["❌ Failed to generate joke. Please try again later."]
    assert bot.history.load_recent_jokes(50) == []
    assert bot.transport.presence[-1] == (GROUP, "paused")


def _disk_full(*args, **kwargs):
    raise OSError("disk full")


def test_joke_sent_when_saving_fails(tmp_path, monkeypatch):
    bot = make_bot(tmp_path, FakeProvider("a joke"))
    monkeypatch.setattr(bot.history, "append_joke", _disk_full)

    _run(bot, "!joke")

    assert bot.transport.texts == ["😄 *Joke:*\n\na joke"]


def test_joke_sent_when_history_unreadable(tmp_path, monkeypatch):
    provider = FakeProvider("a joke")
    bot = make_bot(tmp_path, provider)
    monkeypatch.setattr(bot.history, "load_recent_jokes", _disk_full)

    _run(bot, "!joke")

    assert "Do NOT repeat" not in provider.prompts[0]
    assert bot.transport.texts == ["😄 *Joke:*\n\na joke"]


def test_joke_truncated(tmp_path):
    bot = make_bot(tmp_path, FakeProvider("j" * 800))
    _run(bot, "!joke")
    assert bot.transport.texts == ["😄 *Joke:*\n\n" + "j" * 500 + "..."]


def test_pickup_requires_target(tmp_path):
    provider = FakeProvider("line")
    bot = make_bot(tmp_path, provider)
    _run(bot, "!pickup")
    assert bot.transport.texts == ["❌ Use: !pickup @user\nExample: !pickup @johndoe"]
    assert provider.prompts == []


def test_pickup_mentions_target(tmp_path):
    provider = FakeProvider("Are you wifi? I feel a connection.")
    bot = make_bot(tmp_path, provider)

    _run(bot, "!cantada @maria", mentions=["m@s.whatsapp.net"])

    assert "maria" in provider.prompts[0]
    assert bot.transport.sent == [
        ("mention", GROUP, "💕 *Pickup line for @maria:*\n\nAre you wifi? I feel a connection.")
    ]
    assert bot.transport.mentions == ["m@s.whatsapp.net"]


def test_story_default_genre(tmp_path):
    provider = FakeProvider("Once upon a time.")
    bot = make_bot(tmp_path, provider)
    _run(bot, "!story")
    assert "genre: adventure" in provider.prompts[0]
    assert bot.transport.texts == ["📖 *Adventure story:*\n\nOnce upon a time."]


def test_story_genre_and_truncation(tmp_path):
    provider = FakeProvider("s" * 3500)
    bot = make_bot(tmp_path, provider)
    _run(bot, "!historia Science Fiction")
    assert "genre: science fiction" in provider.prompts[0]
    assert bot.transport.texts == [
        "📖 *Science fiction story:*\n\n" + "s" * 3000 + "\n\n... (story truncated)"
    ]


def test_explain_requires_quote(tmp_path):
    provider = FakeProvider("x")
    bot = make_bot(tmp_path, provider)
    _run(bot, "!explain")
    assert provider.prompts == []
    assert bot.transport.texts[0].startswith("❌ Quote a message before using !explain.")


def test_explain_quoted_text(tmp_path):
    provider = FakeProvider("They are happy.")
    bot = make_bot(tmp_path, provider)

    _run(bot, "!explique", quoted_author="x@s", quoted=TextMessage(text="lol rofl"))

    assert '"lol rofl"' in provider.prompts[0]
    assert bot.transport.texts == ["💡 *Explanation:*\n\nThey are happy."]


def test_explain_quoted_image_without_caption(tmp_path):
    provider = FakeProvider("An image.")
    bot = make_bot(tmp_path, provider)
    _run(bot, "!explain", quoted_author="x@s", quoted=ImageMessage())
    assert '"[image message]"' in provider.prompts[0]


def test_explain_truncated(tmp_path):
    bot = make_bot(tmp_path, FakeProvider("e" * 1200))
    _run(bot, "!explain", quoted_author="x@s", quoted=TextMessage(text="hm"))
    assert bot.transport.texts == ["💡 *Explanation:*\n\n" + "e" * 1000 + "..."]
