import asyncio
import random

import pytest
from conftest import GROUP, make_bot, make_msg

from wabot.commands import build_default_router
from wabot.commands.actions import find_random_media


def _run(bot, text, mentions=None):
    router = build_default_router()
    verb, args = router.parse(text)
    asyncio.run(router.dispatch(verb, args, make_msg(text, mentions=mentions), bot))


def _media_dir(tmp_path, folder, names):
    directory = tmp_path / "gif" / folder
    directory.mkdir(parents=True)
    for name in names:
        (directory / name).write_bytes(b"\x00" * 16)
    return directory


def test_usage_without_target(tmp_path):
    bot = make_bot(tmp_path)
    _run(bot, "!slap")
    assert bot.transport.texts == ["❌ Use: !slap @user\nExample: !slap @johndoe"]


def test_sends_looping_gif_with_caption(tmp_path):
    _media_dir(tmp_path, "slap", ["a.mp4", "notes.txt"])
    bot = make_bot(tmp_path)

    _run(bot, "!slap @bob", mentions=["b@s.whatsapp.net"])

    assert bot.transport.uploads == [(16, "video")]
    [(chat, media, caption, loop)] = bot.transport.media
    assert chat == GROUP
    assert caption == "🤚 *Alice* slapped *@bob*!"
    assert loop is True
    assert bot.transport.sent == []


def test_portuguese_alias_uses_same_folder(tmp_path):
    _media_dir(tmp_path, "flying", ["x.MP4"])
    bot = make_bot(tmp_path)

    _run(bot, "!voadora carlos")

    [(_, _, caption, _)] = bot.transport.media
    assert caption == "💥 *Alice* flying-kicked *carlos*!"


def test_missing_media_falls_back_to_mention_text(tmp_path):
    bot = make_bot(tmp_path)

    _run(bot, "!hug @bob", mentions=["b@s.whatsapp.net"])

    assert bot.transport.sent == [
        ("mention", GROUP, "🤗 *Alice* hugged *@bob*!\n\n[media unavailable]")
    ]
    assert bot.transport.mentions == ["b@s.whatsapp.net"]


def test_upload_failure_falls_back_to_text(tmp_path):
    _media_dir(tmp_path, "kiss", ["k.mp4"])
    bot = make_bot(tmp_path)
    bot.transport.fail_upload = True

    _run(bot, "!kiss maria")

    assert bot.transport.sent == [("text", GROUP, "💋 *Alice* kissed *maria*!\n\n[media unavailable]")]


def test_failed_mention_send_falls_back_to_plain(tmp_path):
    bot = make_bot(tmp_path)
    bot.transport.fail_mentions = True

    _run(bot, "!kick @bob", mentions=["b@s.whatsapp.net"])

    assert bot.transport.sent == [
        ("text", GROUP, "🦵 *Alice* kicked *@bob*!\n\n[media unavailable]")
    ]


def test_find_random_media_only_picks_mp4(tmp_path):
    directory = _media_dir(tmp_path, "hug", ["a.mp4", "b.mp4", "c.gif"])
    rng = random.Random(1)
    picks = {find_random_media(tmp_path / "gif", "hug", rng).name for _ in range(20)}
    assert picks == {"a.mp4", "b.mp4"}
    assert directory.exists()


def test_find_random_media_empty_folder(tmp_path):
    _media_dir(tmp_path, "hug", ["c.gif"])
    with pytest.raises(FileNotFoundError):
        find_random_media(tmp_path / "gif", "hug", random.Random(1))
